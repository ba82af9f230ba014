"""Tests for gcode_post/utils formatting, tags and number helpers."""
import pytest

from gcode_post.models import Bounds, Coordinate, LineRecord
from gcode_post.utils.gcode_format import (
    apply_feed_rate,
    apply_rapid,
    format_content_line,
    format_coordinate,
    format_header_entry,
    format_position,
    generate_filename,
    generate_footer,
    generate_preamble,
    generate_stats_block,
    setup_folder_name,
)
from gcode_post.utils.numbers import format_number, parse_leading_float
from gcode_post.utils.tags import derive_tags, parse_filter, passes_filter, tag_line


class TestNumbers:
    """Tests for number helpers."""

    @pytest.mark.parametrize('text,expected', [
        ('10', 10.0),
        ('-2.5', -2.5),
        ('.25', 0.25),
        ('+3', 3.0),
        ('10.5)', 10.5),
        ('1e2', 100.0),
    ])
    def test_parse_leading_float(self, text, expected):
        assert parse_leading_float(text) == pytest.approx(expected)

    @pytest.mark.parametrize('text', ['', 'abc', '-', '.', 'O=12.5'])
    def test_parse_leading_float_none(self, text):
        assert parse_leading_float(text) is None

    def test_format_number(self):
        assert format_number(500.0) == '500'
        assert format_number(250.5) == '250.5'
        assert format_number(800) == '800'


class TestFormatting:
    """Tests for line formatting helpers."""

    def test_format_coordinate(self):
        assert format_coordinate(0) == '   0.000'
        assert format_coordinate(-2.5) == '  -2.500'
        assert format_coordinate(1234.5678) == '1234.568'

    def test_format_position(self):
        assert format_position(Coordinate(1, -2, 5)) == '   1.000   -2.000    5.000'

    def test_preamble(self):
        assert generate_preamble(500.0) == ['', 'G90 G94 G17 G21 G54 F500', '']
        assert generate_preamble(750.5)[1] == 'G90 G94 G17 G21 G54 F750.5'

    def test_stats_block(self):
        bounds = Bounds(Coordinate(0, 0, -2), Coordinate(20, 10, 5))

        block = generate_stats_block('FILE 1 STATS', bounds)

        assert block[0] == '; FILE 1 STATS'
        assert block[1] == '(' + ' ' * 46 + 'MIN: ' + ' ' * 26 + '   0.000    0.000   -2.000)'
        assert block[2] == '(' + ' ' * 46 + 'MAX: ' + ' ' * 26 + '  20.000   10.000    5.000)'
        assert block[3] == ''

    def test_footer(self):
        assert generate_footer() == ['G0 Z5', 'G0 X0 Y0']

    def test_header_entry(self):
        assert format_header_entry(11, 'op1.nc') == '(   11 - op1.nc)'

    def test_filename(self):
        assert generate_filename(1, 'T3', '6.00', 2) == 'Op 1  - 6.00mm T3  -  2 file(s).nc'
        assert generate_filename(12, 'T10', 'unknown', 11) == 'Op 12 - unknownmm T10 - 11 file(s).nc'

    def test_setup_folder_name(self):
        assert setup_folder_name(2, 'Bottom') == 'Setup 2 - Bottom'


class TestFeedRateSubstitution:
    """Tests for apply_feed_rate."""

    def test_replaces_every_feed_word(self):
        assert apply_feed_rate('G1 X1 F300', 800) == 'G1 X1 F800'
        assert apply_feed_rate('G1 f300.5 Y1 F20', 800) == 'G1 F800 Y1 F800'

    def test_no_override(self):
        assert apply_feed_rate('G1 X1 F300', None) == 'G1 X1 F300'

    def test_idempotent(self):
        once = apply_feed_rate('G1 X1 F300', 812.5)
        assert apply_feed_rate(once, 812.5) == once

    def test_leaves_other_words(self):
        assert apply_feed_rate('G1 X1 Y2', 800) == 'G1 X1 Y2'


class TestApplyRapid:
    """Tests for apply_rapid."""

    @pytest.mark.parametrize('text,expected', [
        ('G1 X10 Y10', 'G0 X10 Y10'),
        ('G01 X10', 'G0 X10'),
        ('g1 X10', 'G0 X10'),
        ('G0 X10', 'G0 X10'),
        ('G00 X10', 'G00 X10'),
        ('X10 Y10', 'G0 X10 Y10'),
        ('  Z5', 'G0 Z5'),
    ])
    def test_apply_rapid(self, text, expected):
        assert apply_rapid(text) == expected


class TestFormatContentLine:
    """Tests for format_content_line."""

    def make_line(self, raw, fast):
        line = (LineRecord(raw)
                .with_coordinates(Coordinate(0, 0, 5), Coordinate(10, 10, 5))
                .with_classification(fast))
        return tag_line(line)

    def test_fast_line(self):
        text = format_content_line(self.make_line('G1 X10 Y10 F300', True))

        assert text == (
            'G0 X10 Y10 F300'.ljust(50)
            + '; ' + '   0.000    0.000    5.000' + '\t' + '  10.000   10.000    5.000'
            + ' # FAST XY UNENGAGED'
        )

    def test_feed_override_applied(self):
        text = format_content_line(self.make_line('G1 X10 Y10 F300', False), feed_rate=900)
        assert text.startswith('G1 X10 Y10 F900 ')

    def test_drilling_lines_keep_mnemonic(self):
        line = self.make_line('G1 X10 Y10', True)
        text = format_content_line(line, allow_fast_moves=False)
        assert text.startswith('G1 X10 Y10 ')

    def test_long_line_not_truncated(self):
        raw = 'G1 X1.23456789 Y1.23456789 Z-1.23456789 F1234.5678 (trailing note)'
        text = format_content_line(self.make_line(raw, False))
        assert text.startswith(raw + '; ')


class TestTags:
    """Tests for tag derivation and filtering."""

    def tracked(self, raw, start_z, end_z, fast=False):
        return (LineRecord(raw)
                .with_coordinates(Coordinate(0, 0, start_z), Coordinate(0, 0, end_z))
                .with_classification(fast))

    def test_fast_horizontal(self):
        assert derive_tags(self.tracked('G1 X1 Y1', 5, 5, fast=True)) == ['FAST', 'XY', 'UNENGAGED']

    def test_engaged_cut(self):
        assert derive_tags(self.tracked('G1 X1 Z-1', 5, -1)) == ['XZ']

    def test_unengaged_independent_of_fast(self):
        assert derive_tags(self.tracked('G1 Z1', 5, 1)) == ['Z', 'UNENGAGED']

    def test_no_axes_gives_empty_tag(self):
        assert derive_tags(self.tracked('F500', -1, -1)) == ['']

    def test_tag_line_keeps_existing(self):
        line = self.tracked('G1 X1', 5, 5).with_tags(['RESET-FR'])
        assert tag_line(line).tags == ('RESET-FR', 'X', 'UNENGAGED')

    def test_parse_filter(self):
        assert parse_filter('FAST  XY') == ['FAST', 'XY']
        assert parse_filter('') == []

    def test_passes_filter(self):
        line = tag_line(self.tracked('G1 X1 Y1', 5, 5, fast=True))
        assert passes_filter(line, ['FAST', 'XY']) is True
        assert passes_filter(line, ['FAST', 'Z']) is False
        assert passes_filter(line, []) is True
