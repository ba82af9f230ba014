"""Merge service for uploaded program files."""
import os
import tempfile
from typing import Dict, List, Optional, Tuple

from gcode_post.merge_engine import MergeSettings
from gcode_post.models import Bounds
from gcode_post.post_processor import NoProgramFilesError, PostProcessor
from gcode_post.utils.file_manager import package_for_download
from gcode_post.utils.gcode_format import generate_filename
from gcode_post.utils.tags import parse_filter

ARCHIVE_NAME = 'merged-programs.zip'

Upload = Tuple[str, bytes]


def _bounds_dict(bounds: Optional[Bounds]) -> Optional[Dict]:
    """JSON-friendly bounds; None when nothing was tracked."""
    if bounds is None or bounds == Bounds.empty():
        return None
    return {
        'min': {'x': bounds.minimum.x, 'y': bounds.minimum.y, 'z': bounds.minimum.z},
        'max': {'x': bounds.maximum.x, 'y': bounds.maximum.y, 'z': bounds.maximum.z},
    }


class MergeService:
    """Service running the post-processor over uploaded files."""

    @staticmethod
    def parse_settings(feed_rate: Optional[str], filter_text: Optional[str],
                       default_feed_rate: float) -> MergeSettings:
        """
        Build MergeSettings from request parameters.

        Raises:
            ValueError: If feed_rate is present but not a positive number
        """
        rate = None
        if feed_rate not in (None, ''):
            rate = float(feed_rate)
            if rate <= 0:
                raise ValueError('Feed rate must be positive')
        return MergeSettings(
            feed_rate=rate,
            filter_tags=tuple(parse_filter(filter_text or '')),
            default_feed_rate=default_feed_rate,
        )

    @staticmethod
    def save_uploads(uploads: List[Upload], directory: str) -> List[str]:
        """
        Write uploads into directory, keeping upload order.

        Upload order stands in for the modification-time order used when
        scanning a directory. Only directory components are removed from
        names; the rest, spaces included, is kept since the operation number
        is read from it.

        Raises:
            NoProgramFilesError: If there are no uploads
            ValueError: If a name is unusable or repeated
        """
        if not uploads:
            raise NoProgramFilesError('No program files uploaded')

        paths = []
        for name, data in uploads:
            filename = os.path.basename((name or '').replace('\\', '/')).strip()
            if filename in ('', '.', '..'):
                raise ValueError(f"Invalid file name: '{name}'")
            path = os.path.join(directory, filename)
            if path in paths:
                raise ValueError(f"Duplicate file name: '{filename}'")
            with open(path, 'wb') as f:
                f.write(data)
            paths.append(path)
        return paths

    @staticmethod
    def analyze(uploads: List[Upload], settings: MergeSettings) -> Dict:
        """
        Describe the merge that uploads would produce, without writing it.

        Returns:
            Dict with the tool catalog, definition files and planned groups
        """
        with tempfile.TemporaryDirectory() as workdir:
            paths = MergeService.save_uploads(uploads, workdir)
            processor = PostProcessor(settings, output_dir=workdir)
            groups = processor.prepare(paths)
            catalog = processor.catalog

            planned = []
            for op_index, group in enumerate(groups, start=1):
                diameter = catalog.format_diameter(group.tool_id)
                planned.append({
                    'folder': group.folder_name,
                    'filename': generate_filename(op_index, group.tool_id, diameter, len(group.members)),
                    'setup': group.setup_name,
                    'setup_number': group.setup_number,
                    'tool': group.tool_id,
                    'diameter': diameter,
                    'bounds': _bounds_dict(group.bounds),
                    'files': [
                        {
                            'name': member.filename,
                            'display_name': member.display_name,
                            'operation': member.operation_index,
                            'drilling': member.is_drilling,
                            'z_offset': member.z_offset,
                            'bounds': _bounds_dict(member.bounds),
                        }
                        for member in group.members
                    ],
                })

            return {
                'tools': {
                    tool_id: {
                        'diameter': entry.diameter,
                        'definition_file': os.path.basename(entry.definition_path),
                    }
                    for tool_id, entry in catalog.entries.items()
                },
                'definition_files': [os.path.basename(p) for p in catalog.definition_paths],
                'groups': planned,
            }

    @staticmethod
    def merge(uploads: List[Upload], settings: MergeSettings) -> Tuple[bytes, str]:
        """
        Merge uploads and package the output folders.

        Returns:
            (zip bytes, archive filename)
        """
        with tempfile.TemporaryDirectory() as workdir:
            input_dir = os.path.join(workdir, 'input')
            output_dir = os.path.join(workdir, 'output')
            os.makedirs(input_dir)
            os.makedirs(output_dir)

            paths = MergeService.save_uploads(uploads, input_dir)
            processor = PostProcessor(
                settings,
                output_dir=output_dir,
                log_path=os.path.join(workdir, 'gcode-post.log'),
            )
            processor.run(paths)
            return package_for_download(output_dir), ARCHIVE_NAME
