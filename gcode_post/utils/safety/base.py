"""Base classes and types for fast-move classification.

This module defines the rule protocol and the classifier that decides
whether a tracked line may be emitted as a rapid traverse. Each rule
implements the MoveRule protocol and is registered with the
MotionClassifier; the first rule that makes a decision wins.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from gcode_post.models import Coordinate, LineRecord

# Z at or above this plane cannot be engaged in material
CLEARANCE_Z = 0.0


@dataclass(frozen=True)
class MoveContext:
    """Geometry of one line, as seen by the classification rules.

    Attributes:
        has_xy: True if the line carries an X or Y word
        has_z: True if the line carries a Z word
        start: Tool position before the line
        end: Tool position after the line
    """
    has_xy: bool
    has_z: bool
    start: Coordinate
    end: Coordinate

    @classmethod
    def from_line(cls, line: LineRecord) -> 'MoveContext':
        return cls(
            has_xy=line.has_xy,
            has_z=line.has_z,
            start=line.start,
            end=line.end,
        )


@dataclass(frozen=True)
class MoveDecision:
    """Outcome of classification; reason is diagnostic only."""
    is_fast: bool
    reason: str = ''


NOT_FAST = MoveDecision(is_fast=False)


class MoveRule(Protocol):
    """Protocol for fast-move rules.

    Methods:
        evaluate: Return a decision, or None to defer to the next rule
        is_enabled: Check if this rule should be consulted
    """

    def evaluate(self, context: MoveContext) -> Optional[MoveDecision]:
        ...

    def is_enabled(self) -> bool:
        ...


@dataclass
class MotionClassifier:
    """Chains fast-move rules; the first rule to decide wins.

    Lines that no rule claims are NOT FAST.

    Example:
        classifier = create_motion_classifier()
        decision = classifier.classify(MoveContext.from_line(line))
    """
    rules: List[MoveRule] = field(default_factory=list)

    def register(self, rule: MoveRule) -> None:
        """Append a rule to the chain."""
        self.rules.append(rule)

    def classify(self, context: MoveContext) -> MoveDecision:
        for rule in self.rules:
            if not rule.is_enabled():
                continue
            decision = rule.evaluate(context)
            if decision is not None:
                return decision
        return NOT_FAST

    def classify_line(self, line: LineRecord) -> LineRecord:
        """Return line carrying its fast-move classification."""
        decision = self.classify(MoveContext.from_line(line))
        return line.with_classification(decision.is_fast, decision.reason)


def create_motion_classifier() -> MotionClassifier:
    """Factory function to create the standard MotionClassifier.

    Rules are registered in priority order: horizontal moves above the
    clearance plane first, then upward Z-only retracts.
    """
    # Import here to avoid circular imports
    from .clearance_plane import ClearancePlaneRule
    from .safe_retract import SafeRetractRule

    classifier = MotionClassifier()
    classifier.register(ClearancePlaneRule())
    classifier.register(SafeRetractRule())
    return classifier
