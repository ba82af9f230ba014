"""Shared dataclasses for NC program post-processing."""
import math
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional, Tuple

# Tokens that carry only modal/setup state and are dropped from merged output
IGNORABLE_TOKEN_RE = re.compile(r'^(?:G90|G94|G17|G21|G54|M|T|S)', re.IGNORECASE)
MOTION_START_RE = re.compile(r'^(?:G0|G1)\b', re.IGNORECASE)
FIRST_MOTION_RE = re.compile(r'^\s*(?:G0|G1)\b', re.IGNORECASE)


@dataclass(frozen=True)
class Coordinate:
    """An absolute machine position."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Bounds:
    """Componentwise minimum and maximum of a set of positions."""
    minimum: Coordinate
    maximum: Coordinate

    @classmethod
    def at(cls, coord: Coordinate) -> 'Bounds':
        """Bounds containing a single position."""
        return cls(minimum=coord, maximum=coord)

    @classmethod
    def empty(cls) -> 'Bounds':
        """Bounds containing nothing (infinite min, negative infinite max)."""
        return cls(
            minimum=Coordinate(math.inf, math.inf, math.inf),
            maximum=Coordinate(-math.inf, -math.inf, -math.inf),
        )

    def include(self, coord: Coordinate) -> 'Bounds':
        """Return bounds widened to contain coord."""
        return Bounds(
            minimum=Coordinate(
                min(self.minimum.x, coord.x),
                min(self.minimum.y, coord.y),
                min(self.minimum.z, coord.z),
            ),
            maximum=Coordinate(
                max(self.maximum.x, coord.x),
                max(self.maximum.y, coord.y),
                max(self.maximum.z, coord.z),
            ),
        )

    @classmethod
    def combine(cls, bounds: Iterable[Optional['Bounds']]) -> 'Bounds':
        """Componentwise min/max over several bounds; None entries are skipped."""
        result = cls.empty()
        for item in bounds:
            if item is None:
                continue
            result = result.include(item.minimum).include(item.maximum)
        return result


class LineKind(Enum):
    """What a source line is, fixed when the line is read."""
    BLANK = 'blank'
    COMMENT = 'comment'
    IGNORABLE = 'ignorable'
    MOTION = 'motion'  # any retained program statement


def classify_kind(raw: str) -> LineKind:
    """Determine the LineKind of raw line text."""
    tokens = raw.split()
    if not tokens:
        return LineKind.BLANK
    if raw.startswith('('):
        return LineKind.COMMENT
    if all(IGNORABLE_TOKEN_RE.match(token) for token in tokens):
        return LineKind.IGNORABLE
    return LineKind.MOTION


@dataclass(frozen=True)
class LineRecord:
    """
    One source line and its properties.

    Static properties are derived from the text on construction. The per-run
    values (coordinates, classification, tags) are changed only through the
    ``with_*`` transitions, each of which returns a new record.
    """
    raw: str
    kind: LineKind = field(init=False)
    has_x: bool = field(init=False)
    has_y: bool = field(init=False)
    has_z: bool = field(init=False)
    has_motion: bool = field(init=False)
    is_first_motion: bool = False
    start: Coordinate = Coordinate()
    end: Coordinate = Coordinate()
    is_fast: bool = False
    fast_reason: str = ''
    tags: Tuple[str, ...] = ()

    def __post_init__(self):
        upper = self.raw.upper()
        object.__setattr__(self, 'kind', classify_kind(self.raw))
        object.__setattr__(self, 'has_x', 'X' in upper)
        object.__setattr__(self, 'has_y', 'Y' in upper)
        object.__setattr__(self, 'has_z', 'Z' in upper)
        object.__setattr__(
            self,
            'has_motion',
            bool(MOTION_START_RE.match(self.raw)) or any(axis in upper for axis in 'XYZ'),
        )

    @property
    def is_blank(self) -> bool:
        return self.kind is LineKind.BLANK

    @property
    def is_comment(self) -> bool:
        return self.kind is LineKind.COMMENT

    @property
    def is_ignorable(self) -> bool:
        return self.kind is LineKind.IGNORABLE

    @property
    def is_retained(self) -> bool:
        """True for lines carried into merged output."""
        return self.kind is LineKind.MOTION

    @property
    def has_xy(self) -> bool:
        return self.has_x or self.has_y

    def matches_tags(self, required: Iterable[str]) -> bool:
        """True if every required tag is present on this line."""
        return all(tag in self.tags for tag in required)

    def clone(self, new_text: str) -> 'LineRecord':
        """New record for new_text that keeps this record's coordinates."""
        return LineRecord(new_text, start=self.start, end=self.end)

    def mark_first_motion(self) -> 'LineRecord':
        return replace(self, is_first_motion=True)

    def with_coordinates(self, start: Coordinate, end: Coordinate) -> 'LineRecord':
        return replace(self, start=start, end=end)

    def with_classification(self, is_fast: bool, reason: str = '') -> 'LineRecord':
        return replace(self, is_fast=is_fast, fast_reason=reason)

    def with_tags(self, tags: Iterable[str]) -> 'LineRecord':
        """Return a record carrying tags (duplicates collapsed, order kept)."""
        return replace(self, tags=tuple(dict.fromkeys(tags)))


def parse_lines(raw_lines: Iterable[str]) -> Tuple[LineRecord, ...]:
    """Build LineRecords for a file and flag its first G0/G1 line."""
    records = [LineRecord(raw) for raw in raw_lines]
    for index, record in enumerate(records):
        if FIRST_MOTION_RE.match(record.raw):
            records[index] = record.mark_first_motion()
            break
    return tuple(records)
