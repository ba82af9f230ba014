"""One CAM-generated program file and the metadata read from it."""
import os
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .models import Bounds, LineRecord, parse_lines
from .position_tracker import track_lines
from .utils.numbers import parse_leading_float
from .utils.safety import MotionClassifier, create_motion_classifier

UNKNOWN_TOOL = 'T?'
UNKNOWN_SETUP = 'unknown'

LINE_SPLIT_RE = re.compile(r'\r?\n')
TOOL_RE = re.compile(r'^\s*T(\d+)', re.IGNORECASE)
FULL_COMMENT_RE = re.compile(r'^\s*\((.*)\)\s*$')
SETUP_RE = re.compile(r'(?:^|\s)SETUP=([^\s)]+)', re.IGNORECASE)
Z_OFFSET_RE = re.compile(r'(?:^|\s)ZO=([^\s)]+)', re.IGNORECASE)
OPERATION_RE = re.compile(r'\bop\s*(\d+)', re.IGNORECASE)
DRILL_RE = re.compile(r'^Drill', re.IGNORECASE)


@dataclass
class ProgramFile:
    """A source program: its lines plus metadata for grouping and ordering."""
    path: str
    lines: Tuple[LineRecord, ...]
    display_name: str = ''
    tool_id: str = UNKNOWN_TOOL
    setup_name: Optional[str] = None
    z_offset: Optional[float] = None
    operation_index: int = 0
    is_drilling: bool = False
    bounds: Optional[Bounds] = None

    @property
    def allow_fast_moves(self) -> bool:
        return not self.is_drilling

    @property
    def setup_key(self) -> str:
        """Setup name used for grouping; missing setups share 'unknown'."""
        return self.setup_name or UNKNOWN_SETUP

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)

    @property
    def comment_lines(self) -> List[LineRecord]:
        return [line for line in self.lines if line.is_comment]

    def line_count(self) -> int:
        return len(self.lines)


def split_program_text(text: str) -> List[str]:
    """Split file content into raw lines (LF or CRLF)."""
    return LINE_SPLIT_RE.split(text)


def _full_line_comments(lines: Iterable[LineRecord]):
    for line in lines:
        match = FULL_COMMENT_RE.match(line.raw)
        if match:
            yield match.group(1)


def extract_display_name(lines: Tuple[LineRecord, ...]) -> str:
    """Name from the first line with its surrounding parentheses removed."""
    if not lines:
        return ''
    name = re.sub(r'^\s*\(', '', lines[0].raw)
    name = re.sub(r'\)\s*$', '', name)
    return name.strip()


def extract_tool_id(lines: Iterable[LineRecord]) -> str:
    """Tool id from the first line starting with T<digits>, else 'T?'."""
    for line in lines:
        match = TOOL_RE.match(line.raw)
        if match:
            return f"T{match.group(1)}"
    return UNKNOWN_TOOL


def extract_setup_name(lines: Iterable[LineRecord]) -> Optional[str]:
    for comment in _full_line_comments(lines):
        match = SETUP_RE.search(comment)
        if match:
            return match.group(1)
    return None


def extract_z_offset(lines: Iterable[LineRecord]) -> Optional[float]:
    """Value of the first ZO= comment word; None if absent or not numeric."""
    for comment in _full_line_comments(lines):
        match = Z_OFFSET_RE.search(comment)
        if match:
            return parse_leading_float(match.group(1))
    return None


def extract_operation_index(path: str) -> int:
    """Operation number from an 'op<digits>' word in the file name, else 0."""
    match = OPERATION_RE.search(os.path.basename(path))
    if not match:
        return 0
    return int(match.group(1))


def extract_is_drilling(lines: Iterable[LineRecord]) -> bool:
    """True when a full-line comment's text starts with 'Drill'."""
    return any(DRILL_RE.match(comment) for comment in _full_line_comments(lines))


def parse_program(path: str, text: str,
                  classifier: Optional[MotionClassifier] = None) -> ProgramFile:
    """
    Parse a program file and, unless it is a drilling program, track and
    classify every line.

    Malformed content never raises: missing metadata falls back to defaults
    and unreadable axis words are skipped.

    Args:
        path: Source path (its file name may carry the operation number)
        text: File content
        classifier: Fast-move classifier (standard rules if omitted)

    Returns:
        The parsed ProgramFile
    """
    lines = parse_lines(split_program_text(text))
    program = ProgramFile(
        path=path,
        lines=lines,
        display_name=extract_display_name(lines),
        tool_id=extract_tool_id(lines),
        setup_name=extract_setup_name(lines),
        z_offset=extract_z_offset(lines),
        operation_index=extract_operation_index(path),
        is_drilling=extract_is_drilling(lines),
    )

    if program.allow_fast_moves:
        classifier = classifier or create_motion_classifier()
        tracked, tracker = track_lines(program.lines)
        program.lines = tuple(
            classifier.classify_line(line) if line.is_retained else line
            for line in tracked
        )
        program.bounds = tracker.bounds

    return program
