"""Tests for the tool catalog."""
import pytest

from gcode_post.tool_catalog import ToolCatalog, ToolEntry, scan_definition


class TestScanDefinition:
    """Tests for scan_definition."""

    def test_finds_definition(self):
        assert scan_definition(['(T3 D=6.00 FLAT END MILL)']) == ('T3', 6.0)

    def test_leading_space_and_case(self):
        assert scan_definition(['  ( t12 d=3.175 BALL)']) == ('T12', pytest.approx(3.175))

    def test_first_definition_only(self):
        assert scan_definition(['(T3 D=6.00)', '(T5 D=3.0)']) == ('T3', 6.0)

    def test_no_definition(self):
        assert scan_definition(['(Pocket)', 'T3 M6', 'G0 Z5']) is None


class TestToolCatalog:
    """Tests for ToolCatalog."""

    def test_build(self):
        catalog = ToolCatalog.build([
            ('/w/a.nc', ['(Pocket)', 'G0 Z5']),
            ('/w/tools.nc', ['(T3 D=6.00 FLAT)']),
        ])

        assert catalog.get('T3') == ToolEntry(diameter=6.0, definition_path='/w/tools.nc')
        assert 'T3' in catalog
        assert len(catalog) == 1
        assert catalog.is_definition('/w/tools.nc') is True
        assert catalog.is_definition('/w/a.nc') is False

    def test_first_definition_wins(self):
        catalog = ToolCatalog.build([
            ('/w/one.nc', ['(T3 D=6.00)']),
            ('/w/two.nc', ['(T3 D=8.00)']),
        ])

        assert catalog.get('T3').diameter == 6.0
        assert catalog.get('T3').definition_path == '/w/one.nc'
        # Both files are still definition files
        assert catalog.definition_paths == ['/w/one.nc', '/w/two.nc']

    def test_format_diameter(self):
        catalog = ToolCatalog.build([('/w/tools.nc', ['(T3 D=6)'])])

        assert catalog.format_diameter('T3') == '6.00'
        assert catalog.format_diameter('T9') == 'unknown'
        assert catalog.format_diameter('T?') == 'unknown'

    def test_add_source_reports_definition(self):
        catalog = ToolCatalog()
        assert catalog.add_source('/w/tools.nc', ['(T1 D=2.5)']) is True
        assert catalog.add_source('/w/op.nc', ['G0 Z5']) is False
