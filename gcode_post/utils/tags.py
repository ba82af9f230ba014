"""Line tags used to annotate and filter merged output."""
from typing import Iterable, List

from gcode_post.models import LineRecord

FAST_TAG = 'FAST'
UNENGAGED_TAG = 'UNENGAGED'
RESET_TAG = 'RESET-FR'


def derive_tags(line: LineRecord) -> List[str]:
    """
    Compute the tags of a retained line.

    Order: FAST (if fast), the present axis letters in X, Y, Z order (the
    empty string when there are none), UNENGAGED when both endpoints are at
    Z >= 0.
    """
    tags = []
    if line.is_fast:
        tags.append(FAST_TAG)
    axes = ''.join(
        letter for letter, present in (('X', line.has_x), ('Y', line.has_y), ('Z', line.has_z))
        if present
    )
    tags.append(axes)
    if line.start.z >= 0 and line.end.z >= 0:
        tags.append(UNENGAGED_TAG)
    return tags


def tag_line(line: LineRecord) -> LineRecord:
    """Return line with its derived tags added to any it already has."""
    return line.with_tags(list(line.tags) + derive_tags(line))


def parse_filter(text: str) -> List[str]:
    """Split a space separated filter argument into tag names."""
    return text.split()


def passes_filter(line: LineRecord, filter_tags: Iterable[str]) -> bool:
    """True when every filter tag is on the line (an empty filter passes)."""
    return line.matches_tags(filter_tags)
