"""Ordering, grouping and serialization of program files into merged programs.

Programs sharing a setup and a tool are concatenated into one merged
program, in operation order. Each merged program starts with a header that
points at the first line of every member's block, followed by the feed
preamble, aggregate statistics and one block per member.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .models import Bounds, LineRecord
from .program_file import ProgramFile
from .tool_catalog import ToolCatalog
from .utils.gcode_format import (
    CLEARANCE_LINE,
    MERGED_MARKER,
    format_content_line,
    format_header_entry,
    generate_filename,
    generate_footer,
    generate_preamble,
    generate_stats_block,
    setup_folder_name,
)
from .utils.safety import insert_modal_resets
from .utils.tags import passes_filter, tag_line

DEFAULT_FEED_RATE = 500.0
MEMBER_SEPARATOR_LINES = 10


@dataclass
class MergeSettings:
    """Run options for merging.

    Attributes:
        feed_rate: Override for every F word, or None to keep the source values
        filter_tags: When non-empty, only lines carrying all of these tags are written
        default_feed_rate: Feed rate for the preamble when there is no override
    """
    feed_rate: Optional[float] = None
    filter_tags: Tuple[str, ...] = ()
    default_feed_rate: float = DEFAULT_FEED_RATE

    @property
    def filtered(self) -> bool:
        return bool(self.filter_tags)

    @property
    def effective_feed_rate(self) -> float:
        if self.feed_rate is None:
            return self.default_feed_rate
        return self.feed_rate


@dataclass
class MergeGroup:
    """Programs that share a setup and a tool, in operation order."""
    setup_name: str
    setup_number: int
    tool_id: str
    members: List[ProgramFile] = field(default_factory=list)

    @property
    def key(self) -> Tuple[str, str]:
        return self.setup_name, self.tool_id

    @property
    def folder_name(self) -> str:
        return setup_folder_name(self.setup_number, self.setup_name)

    @property
    def bounds(self) -> Bounds:
        """Componentwise min/max over the tracked members."""
        return Bounds.combine(member.bounds for member in self.members)


@dataclass
class MergedProgram:
    """Serialized output for one MergeGroup.

    Attributes:
        group: The source group
        filename: Output file name
        lines: Output lines, without line terminators
        start_lines: Source path to the 1-based output line where its block begins
    """
    group: MergeGroup
    filename: str
    lines: List[str]
    start_lines: Dict[str, int]

    @property
    def folder_name(self) -> str:
        return self.group.folder_name

    def to_text(self) -> str:
        return ''.join(f"{line}\n" for line in self.lines)


def sort_by_operation(programs: Iterable[ProgramFile]) -> List[ProgramFile]:
    """Stable sort by operation index."""
    return sorted(programs, key=lambda program: program.operation_index)


def assign_setup_numbers(programs: Iterable[ProgramFile]) -> Dict[str, int]:
    """Number each distinct setup in first-seen order, starting at 1."""
    numbers = {}
    for program in programs:
        if program.setup_key not in numbers:
            numbers[program.setup_key] = len(numbers) + 1
    return numbers


def group_by_setup_and_tool(programs: Iterable[ProgramFile]) -> List[MergeGroup]:
    """
    Group programs by (setup, tool).

    Args:
        programs: Programs already in operation order

    Returns:
        Groups in first-seen key order, members keeping input order
    """
    programs = list(programs)
    setup_numbers = assign_setup_numbers(programs)
    groups: Dict[Tuple[str, str], MergeGroup] = {}
    for program in programs:
        key = (program.setup_key, program.tool_id)
        if key not in groups:
            groups[key] = MergeGroup(
                setup_name=program.setup_key,
                setup_number=setup_numbers[program.setup_key],
                tool_id=program.tool_id,
            )
        groups[key].members.append(program)
    return list(groups.values())


def prepare_content_lines(program: ProgramFile) -> List[LineRecord]:
    """
    Retained lines of a program, tagged, with modal resets inserted.

    Drilling programs are tagged but never get resets.
    """
    tagged = [tag_line(line) for line in program.lines if line.is_retained]
    if program.allow_fast_moves:
        return insert_modal_resets(tagged)
    return tagged


class MergeEngine:
    """
    Builds merged programs from parsed program files.

    Example:
        engine = MergeEngine(catalog, MergeSettings(feed_rate=800))
        for merged in engine.merge(programs):
            write(merged.folder_name, merged.filename, merged.to_text())
    """

    def __init__(self, catalog: ToolCatalog, settings: Optional[MergeSettings] = None):
        self.catalog = catalog
        self.settings = settings or MergeSettings()

    def plan(self, programs: Iterable[ProgramFile]) -> List[MergeGroup]:
        """Order and group programs without serializing them."""
        return group_by_setup_and_tool(sort_by_operation(programs))

    def merge(self, programs: Iterable[ProgramFile]) -> List[MergedProgram]:
        merged = []
        for op_index, group in enumerate(self.plan(programs), start=1):
            filename = generate_filename(
                op_index,
                group.tool_id,
                self.catalog.format_diameter(group.tool_id),
                len(group.members),
            )
            merged.append(self.serialize_group(group, filename))
        return merged

    def serialize_group(self, group: MergeGroup, filename: str) -> MergedProgram:
        content, offsets = self.build_content(group)

        header = [MERGED_MARKER, '']
        header_length = len(header) + len(group.members)
        start_lines = {}
        for member in group.members:
            start = header_length + offsets[member.path]
            start_lines[member.path] = start
            header.append(format_header_entry(start, member.filename))

        return MergedProgram(
            group=group,
            filename=filename,
            lines=header + content,
            start_lines=start_lines,
        )

    def build_content(self, group: MergeGroup) -> Tuple[List[str], Dict[str, int]]:
        """
        Compose the body of a merged program.

        Returns:
            (content lines, source path to 1-based content line of its block)
        """
        settings = self.settings
        content = generate_preamble(settings.effective_feed_rate)
        content += generate_stats_block('AGGREGATE STATS - ALL FILES', group.bounds)

        offsets = {}
        tracked_count = 0
        for member in group.members:
            offsets[member.path] = len(content) + 1
            content += [CLEARANCE_LINE, '']

            comments = [line.raw for line in member.comment_lines]
            if comments:
                content += comments + ['']

            if member.bounds is not None:
                tracked_count += 1
                content += generate_stats_block(f"FILE {tracked_count} STATS", member.bounds)

            for line in prepare_content_lines(member):
                if settings.filtered and not passes_filter(line, settings.filter_tags):
                    continue
                content.append(format_content_line(
                    line,
                    feed_rate=settings.feed_rate,
                    allow_fast_moves=member.allow_fast_moves,
                ))

            content += [''] * MEMBER_SEPARATOR_LINES

        content += generate_footer()
        return content, offsets

