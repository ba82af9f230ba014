"""Clearance plane rule.

Horizontal moves made entirely at or above the clearance plane are
reclassified as rapid traverses.
"""
from dataclasses import dataclass
from typing import Optional

from .base import CLEARANCE_Z, MoveContext, MoveDecision


@dataclass
class ClearancePlaneRule:
    """Marks X/Y moves that start and end at Z >= clearance as FAST.

    The Z word is irrelevant: an XYZ move qualifies as long as both
    endpoints stay at or above the clearance plane.

    Attributes:
        clearance_z: Lowest Z considered clear of the material
    """
    clearance_z: float = CLEARANCE_Z

    def evaluate(self, context: MoveContext) -> Optional[MoveDecision]:
        """Claim the line when it is a horizontal move above clearance.

        Args:
            context: MoveContext for the line

        Returns:
            FAST decision with a diagnostic reason, or None to defer
        """
        if (context.has_xy
                and context.start.z >= self.clearance_z
                and context.end.z >= self.clearance_z):
            reason = (
                f"anyXY{{{context.has_xy}}} && start.z{{{context.start.z:g}}} >= 0"
                f" && end.z{{{context.end.z:g}}} >= 0"
            )
            return MoveDecision(is_fast=True, reason=reason)
        return None

    def is_enabled(self) -> bool:
        return True
