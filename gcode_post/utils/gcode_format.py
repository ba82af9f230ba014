"""G-code formatting utilities for merged programs.

Every line of text that the merge writes is produced here, so the layout
of a merged program can be read in one place.
"""
import re
from typing import List, Optional

from gcode_post.models import Bounds, Coordinate, LineRecord
from .numbers import format_number

CONTENT_PADDING = 50
CLEARANCE_LINE = 'G0 Z5'
HOME_LINE = 'G0 X0 Y0'
MERGED_MARKER = '(MERGED)'

FEED_WORD_RE = re.compile(r'\bF\d+(\.\d+)?\b', re.IGNORECASE)
LEADING_G1_RE = re.compile(r'^\s*G0?1\b', re.IGNORECASE)
LEADING_G0_RE = re.compile(r'^\s*G0{1,2}\b', re.IGNORECASE)


def format_coordinate(value: float) -> str:
    """
    Format one axis value as fixed width, 3 decimals.

    Args:
        value: The coordinate value

    Returns:
        8 character right-aligned string, e.g. ``'  -2.500'``
    """
    return f"{value:8.3f}"


def format_position(coord: Coordinate) -> str:
    """Space separated fixed width X Y Z."""
    return ' '.join(format_coordinate(v) for v in (coord.x, coord.y, coord.z))


def generate_preamble(feed_rate: float) -> List[str]:
    """
    Generate the lines opening every merged program.

    Args:
        feed_rate: Effective feed rate (override or default)

    Returns:
        Blank line, modal state line carrying the feed rate, blank line
    """
    return [
        '',
        f"G90 G94 G17 G21 G54 F{format_number(feed_rate)}",
        '',
    ]


def generate_stats_block(title: str, bounds: Bounds) -> List[str]:
    """
    Generate a min/max statistics block.

    Args:
        title: Label, e.g. ``AGGREGATE STATS - ALL FILES``
        bounds: The bounds to report

    Returns:
        Title line, MIN line, MAX line, blank line
    """
    lead = ' ' * 46
    gap = ' ' * 26
    return [
        f"; {title}",
        f"({lead}MIN: {gap}{format_position(bounds.minimum)})",
        f"({lead}MAX: {gap}{format_position(bounds.maximum)})",
        '',
    ]


def generate_footer() -> List[str]:
    """Lines closing every merged program: clearance height, then home."""
    return [CLEARANCE_LINE, HOME_LINE]


def apply_feed_rate(text: str, feed_rate: Optional[float]) -> str:
    """
    Replace every F word with the override feed rate.

    Args:
        text: Line text
        feed_rate: Override, or None to leave the text alone

    Returns:
        Text with feed words substituted
    """
    if feed_rate is None:
        return text
    return FEED_WORD_RE.sub(f"F{format_number(feed_rate)}", text)


def apply_rapid(text: str) -> str:
    """Rewrite a line to start with the rapid mnemonic G0."""
    text = LEADING_G1_RE.sub('G0', text, count=1)
    if not LEADING_G0_RE.match(text):
        text = 'G0 ' + text.lstrip()
    return text


def format_content_line(line: LineRecord, feed_rate: Optional[float] = None,
                        allow_fast_moves: bool = True) -> str:
    """
    Format a retained line for merged output.

    The G-code is padded to a fixed width and followed by a comment with
    both endpoint positions and the line's tags.

    Args:
        line: Tagged, tracked line
        feed_rate: Feed rate override, if any
        allow_fast_moves: False for drilling programs (no rapid rewrite)

    Returns:
        Output line text
    """
    text = apply_feed_rate(line.raw, feed_rate)
    if allow_fast_moves and line.is_fast:
        text = apply_rapid(text)
    coords = f"{format_position(line.start)}\t{format_position(line.end)}"
    return f"{text:<{CONTENT_PADDING}}; {coords} # {' '.join(line.tags)}"


def format_header_entry(start_line: int, filename: str) -> str:
    """Header comment pointing at a member's block in the merged program."""
    return f"({start_line:>5} - {filename})"


def generate_filename(op_index: int, tool_id: str, diameter: str, file_count: int) -> str:
    """
    Build the merged program filename.

    Args:
        op_index: Run-wide sequential operation counter
        tool_id: Tool id, e.g. ``T3``
        diameter: Diameter text (2 decimals) or ``unknown``
        file_count: Number of merged source files

    Returns:
        e.g. ``'Op 1  - 6.00mm T3  -  2 file(s).nc'``
    """
    op = f"Op {op_index}"
    return f"{op:<5} - {diameter}mm {tool_id:<3} - {file_count:>2} file(s).nc"


def setup_folder_name(setup_number: int, setup_name: str) -> str:
    """Name of the per-setup output folder."""
    return f"Setup {setup_number} - {setup_name}"
