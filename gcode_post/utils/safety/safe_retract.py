"""Safe retract rule.

Z-only moves that go up and finish at or above the clearance plane are
reclassified as rapid traverses.
"""
from dataclasses import dataclass
from typing import Optional

from .base import CLEARANCE_Z, MoveContext, MoveDecision


@dataclass
class SafeRetractRule:
    """Marks upward Z-only moves ending at Z >= clearance as FAST."""
    clearance_z: float = CLEARANCE_Z

    def evaluate(self, context: MoveContext) -> Optional[MoveDecision]:
        if context.has_xy or not context.has_z:
            return None
        if context.end.z > context.start.z and context.end.z >= self.clearance_z:
            return MoveDecision(is_fast=True)
        return None

    def is_enabled(self) -> bool:
        return True
