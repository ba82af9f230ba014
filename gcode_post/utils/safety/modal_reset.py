"""Modal reset insertion.

Rapid traverses leave the controller in G0 mode. Before the first
controlled move after a run of rapids, a bare ``G1`` line is emitted so
that cutting resumes at the programmed feed rate.
"""
from typing import Iterable, List

from gcode_post.models import LineRecord
from gcode_post.utils.tags import RESET_TAG

RESET_MNEMONIC = 'G1'


def make_reset_line(line: LineRecord) -> LineRecord:
    """Synthetic reset placed before line, sharing its coordinates."""
    return line.clone(RESET_MNEMONIC).with_tags([RESET_TAG])


def insert_modal_resets(lines: Iterable[LineRecord]) -> List[LineRecord]:
    """
    Insert a reset line before each NOT-FAST line that follows a FAST one.

    Only retained lines take part; any others are dropped. No reset is
    emitted for the opposite transition (NOT-FAST to FAST).

    Args:
        lines: A program's lines after classification

    Returns:
        Retained lines with reset lines inserted
    """
    output = []
    last_was_fast = False
    for line in lines:
        if not line.is_retained:
            continue
        if line.is_fast:
            last_was_fast = True
        elif last_was_fast:
            output.append(make_reset_line(line))
            last_was_fast = False
        output.append(line)
    return output
