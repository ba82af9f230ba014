"""Absolute X/Y/Z position tracking across the lines of one program."""
from typing import Iterable, List, Tuple

from .models import Bounds, Coordinate, LineRecord
from .utils.numbers import parse_leading_float

# Every CAM program is posted with a retract to Z5 before its first move
INITIAL_POSITION = Coordinate(0.0, 0.0, 5.0)


class PositionTracker:
    """
    Tracks the absolute tool-tip position line by line.

    Only absolute positioning is supported: an axis word overwrites that
    axis. Axis words that do not hold a number are ignored and the axis
    keeps its previous value.
    """

    def __init__(self, initial: Coordinate = INITIAL_POSITION):
        self.x = initial.x
        self.y = initial.y
        self.z = initial.z
        self.bounds = Bounds.at(initial)

    @property
    def position(self) -> Coordinate:
        return Coordinate(self.x, self.y, self.z)

    def process_line(self, line: LineRecord) -> Tuple[Coordinate, Coordinate]:
        """
        Apply one line to the tracked position.

        Args:
            line: Source line (any kind; comments can carry axis words too)

        Returns:
            (start, end) positions for the line
        """
        start = self.position

        for token in line.raw.split():
            axis = token[0].upper()
            if axis not in 'XYZ':
                continue
            value = parse_leading_float(token[1:])
            if value is None:
                continue
            setattr(self, axis.lower(), value)

        end = self.position
        self.bounds = self.bounds.include(end)
        return start, end


def track_lines(lines: Iterable[LineRecord]) -> Tuple[List[LineRecord], PositionTracker]:
    """
    Run a fresh tracker over every line of a program, in order.

    Returns:
        The lines carrying their start/end coordinates, and the tracker
        (whose ``bounds`` hold the program's running min/max)
    """
    tracker = PositionTracker()
    tracked = []
    for line in lines:
        start, end = tracker.process_line(line)
        tracked.append(line.with_coordinates(start, end))
    return tracked, tracker
