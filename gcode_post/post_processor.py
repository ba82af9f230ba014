"""Run orchestration: catalog, load, merge and write, with a run log.

The PostProcessor owns all state of one run (tool catalog, loaded
programs) and passes it to each phase explicitly. It is the only part of
the package that logs or touches the filesystem.
"""
import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from .merge_engine import MergedProgram, MergeEngine, MergeGroup, MergeSettings
from .program_file import ProgramFile, parse_program, split_program_text
from .tool_catalog import ToolCatalog
from .utils.file_manager import create_setup_directory, read_program_file, write_merged_file

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = 'gcode_post'
RUN_LOG_NAME = 'gcode-post.log'


class PostProcessError(Exception):
    """Base exception for run failures raised by the post-processor itself."""
    pass


class NoProgramFilesError(PostProcessError):
    """No mergeable program files were supplied."""
    pass


@dataclass
class RunResult:
    """What one run produced."""
    catalog: ToolCatalog
    programs: List[ProgramFile]
    merged: List[MergedProgram] = field(default_factory=list)
    written: List[str] = field(default_factory=list)
    previews: List[str] = field(default_factory=list)


class PostProcessor:
    """
    Merges a list of program files into per-setup, per-tool programs.

    Example:
        processor = PostProcessor(MergeSettings(feed_rate=800), output_dir='.')
        result = processor.run(find_program_files('.'))
    """

    def __init__(self, settings: Optional[MergeSettings] = None, output_dir: str = '.',
                 log_path: Optional[str] = None, preview: bool = False):
        self.settings = settings or MergeSettings()
        self.output_dir = output_dir
        self.log_path = log_path
        self.preview = preview
        self.catalog = ToolCatalog()
        self.programs: List[ProgramFile] = []

    @contextmanager
    def run_log(self):
        """Attach the run log (truncated on open) to the package logger."""
        if not self.log_path:
            yield
            return

        package_logger = logging.getLogger(PACKAGE_LOGGER)
        previous_level = package_logger.level
        if package_logger.getEffectiveLevel() > logging.INFO:
            package_logger.setLevel(logging.INFO)

        handler = logging.FileHandler(self.log_path, mode='w', encoding='utf-8')
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter('%(message)s'))
        package_logger.addHandler(handler)
        try:
            yield
        finally:
            package_logger.removeHandler(handler)
            handler.close()
            package_logger.setLevel(previous_level)

    def read_sources(self, paths: Iterable[str]) -> List[Tuple[str, str]]:
        return [(path, read_program_file(path)) for path in paths]

    def build_catalog(self, sources: List[Tuple[str, str]]) -> ToolCatalog:
        """Scan every source for tool definitions. Must finish before loading."""
        logger.info('Parsing tool definition files...')
        self.catalog = ToolCatalog.build(
            (path, split_program_text(text)) for path, text in sources
        )
        for tool_id, entry in self.catalog.entries.items():
            logger.debug("Tool %s D=%.2f from %s", tool_id, entry.diameter, entry.definition_path)
        logger.info('OK')
        return self.catalog

    def load_programs(self, sources: List[Tuple[str, str]]) -> List[ProgramFile]:
        """Parse every source that is not a tool definition file."""
        logger.info('Loading files...')
        self.programs = []
        for path, text in sources:
            if self.catalog.is_definition(path):
                continue
            logger.info('\t%s', path)
            self.programs.append(parse_program(path, text))
        return self.programs

    def prepare(self, paths: Iterable[str]) -> List[MergeGroup]:
        """Catalog and load paths, then return the merge plan."""
        sources = self.read_sources(paths)
        self.build_catalog(sources)
        self.load_programs(sources)
        return MergeEngine(self.catalog, self.settings).plan(self.programs)

    def write(self, merged: List[MergedProgram]) -> List[str]:
        written = []
        for program in merged:
            directory = create_setup_directory(self.output_dir, program.folder_name)
            path = write_merged_file(directory, program.filename, program.to_text())
            logger.info('Wrote %s', path)
            written.append(path)
        return written

    def write_previews(self, merged: List[MergedProgram], written: List[str]) -> List[str]:
        from .visualizer import save_group_preview

        previews = []
        for program, path in zip(merged, written):
            preview_path = os.path.splitext(path)[0] + '.png'
            previews.append(save_group_preview(program.group, preview_path))
        return previews

    def run(self, paths: Iterable[str]) -> RunResult:
        """
        Run every phase over paths, in enumeration order.

        Any read or write failure aborts the run; the message is recorded
        in the run log and the exception propagates.

        Args:
            paths: Program files, already in the order they were produced

        Returns:
            RunResult with the catalog, programs, merged output and written paths
        """
        with self.run_log():
            logger.info('BEGIN')
            try:
                sources = self.read_sources(paths)
                self.build_catalog(sources)
                self.load_programs(sources)

                merged = MergeEngine(self.catalog, self.settings).merge(self.programs)
                logger.info('Merging %d group(s)...', len(merged))
                written = self.write(merged)
                previews = self.write_previews(merged, written) if self.preview else []
            except Exception as e:
                logger.error(str(e))
                raise
            logger.info('DONE')

        return RunResult(
            catalog=self.catalog,
            programs=self.programs,
            merged=merged,
            written=written,
            previews=previews,
        )
