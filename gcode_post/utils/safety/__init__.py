"""Rapid-traverse classification for tracked program lines.

This module decides which controlled moves can safely run as rapids and
restores feed mode afterwards. Each rule is implemented as a MoveRule
that the MotionClassifier consults in order.

Rules:
- ClearancePlaneRule: X/Y moves that stay at or above the clearance plane
- SafeRetractRule: upward Z-only moves that finish at or above clearance

Usage:
    from gcode_post.utils.safety import create_motion_classifier, insert_modal_resets

    classifier = create_motion_classifier()
    lines = [classifier.classify_line(line) for line in tracked_lines]
    retained = insert_modal_resets(lines)
"""
from .base import (
    CLEARANCE_Z,
    MoveContext,
    MoveDecision,
    MoveRule,
    MotionClassifier,
    create_motion_classifier,
)
from .clearance_plane import ClearancePlaneRule
from .safe_retract import SafeRetractRule
from .modal_reset import insert_modal_resets, make_reset_line, RESET_MNEMONIC

__all__ = [
    'CLEARANCE_Z',
    'MoveContext',
    'MoveDecision',
    'MoveRule',
    'MotionClassifier',
    'create_motion_classifier',
    'ClearancePlaneRule',
    'SafeRetractRule',
    'insert_modal_resets',
    'make_reset_line',
    'RESET_MNEMONIC',
]
