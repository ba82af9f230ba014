"""Tests for the motion classifier."""
from dataclasses import dataclass
from typing import Optional

from gcode_post.models import Coordinate, LineRecord, parse_lines
from gcode_post.position_tracker import track_lines
from gcode_post.utils.safety import (
    ClearancePlaneRule,
    MotionClassifier,
    MoveContext,
    MoveDecision,
    SafeRetractRule,
    create_motion_classifier,
)


@dataclass
class FixedRule:
    """Rule returning a fixed decision, for ordering tests."""
    decision: Optional[MoveDecision]
    enabled: bool = True

    def evaluate(self, context):
        return self.decision

    def is_enabled(self):
        return self.enabled


def classify_sequence(*raw_lines):
    tracked, _ = track_lines(parse_lines(raw_lines))
    classifier = create_motion_classifier()
    return [classifier.classify_line(line) for line in tracked]


class TestMotionClassifier:
    """Tests for MotionClassifier."""

    def test_register_rule(self):
        classifier = MotionClassifier()
        classifier.register(ClearancePlaneRule())
        assert len(classifier.rules) == 1

    def test_no_rules_means_not_fast(self):
        classifier = MotionClassifier()
        context = MoveContext(True, False, Coordinate(0, 0, 5), Coordinate(1, 0, 5))

        assert classifier.classify(context).is_fast is False

    def test_first_decision_wins(self):
        classifier = MotionClassifier()
        classifier.register(FixedRule(MoveDecision(is_fast=False, reason='first')))
        classifier.register(FixedRule(MoveDecision(is_fast=True, reason='second')))

        decision = classifier.classify(MoveContext(True, False, Coordinate(), Coordinate()))

        assert decision.reason == 'first'

    def test_deferring_rule_passes_on(self):
        classifier = MotionClassifier()
        classifier.register(FixedRule(None))
        classifier.register(FixedRule(MoveDecision(is_fast=True, reason='second')))

        decision = classifier.classify(MoveContext(True, False, Coordinate(), Coordinate()))

        assert decision.reason == 'second'

    def test_disabled_rule_skipped(self):
        classifier = MotionClassifier()
        classifier.register(FixedRule(MoveDecision(is_fast=True), enabled=False))

        decision = classifier.classify(MoveContext(True, False, Coordinate(), Coordinate()))

        assert decision.is_fast is False


class TestCreateMotionClassifier:
    """Tests for create_motion_classifier factory function."""

    def test_rules_in_priority_order(self):
        classifier = create_motion_classifier()

        assert len(classifier.rules) == 2
        assert isinstance(classifier.rules[0], ClearancePlaneRule)
        assert isinstance(classifier.rules[1], SafeRetractRule)

    def test_reference_sequence(self):
        """Rapid over, plunge, then retract."""
        lines = classify_sequence('G0 Z5', 'G1 X10 Y10', 'G1 Z-2', 'G1 Z5')

        assert lines[1].is_fast is True    # horizontal at clearance
        assert lines[2].is_fast is False   # plunge
        assert lines[3].is_fast is True    # retract to clearance

    def test_reason_recorded_for_clearance_plane_only(self):
        lines = classify_sequence('G1 X10 Y10', 'G1 Z-2', 'G1 Z5')

        assert lines[0].fast_reason == 'anyXY{True} && start.z{5} >= 0 && end.z{5} >= 0'
        assert lines[2].is_fast is True
        assert lines[2].fast_reason == ''

    def test_horizontal_cut_below_surface(self):
        lines = classify_sequence('G1 Z-2', 'G1 X10 Y10')
        assert lines[1].is_fast is False

    def test_classify_line_keeps_coordinates(self):
        line = LineRecord('G1 X1').with_coordinates(Coordinate(0, 0, 5), Coordinate(1, 0, 5))
        classified = create_motion_classifier().classify_line(line)

        assert classified.is_fast is True
        assert classified.end == Coordinate(1, 0, 5)
