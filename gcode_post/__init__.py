"""Post-processing of CAM operation programs into merged per-setup, per-tool programs."""

from .models import (
    Coordinate,
    Bounds,
    LineKind,
    LineRecord,
    parse_lines
)
from .position_tracker import PositionTracker, track_lines, INITIAL_POSITION
from .program_file import ProgramFile, parse_program
from .tool_catalog import ToolCatalog, ToolEntry, scan_definition
from .merge_engine import (
    MergeEngine,
    MergeSettings,
    MergeGroup,
    MergedProgram,
    sort_by_operation,
    assign_setup_numbers,
    group_by_setup_and_tool
)
from .post_processor import (
    PostProcessor,
    PostProcessError,
    NoProgramFilesError,
    RunResult
)

__all__ = [
    # Line model
    'Coordinate',
    'Bounds',
    'LineKind',
    'LineRecord',
    'parse_lines',
    # Tracking
    'PositionTracker',
    'track_lines',
    'INITIAL_POSITION',
    # Programs and tools
    'ProgramFile',
    'parse_program',
    'ToolCatalog',
    'ToolEntry',
    'scan_definition',
    # Merge
    'MergeEngine',
    'MergeSettings',
    'MergeGroup',
    'MergedProgram',
    'sort_by_operation',
    'assign_setup_numbers',
    'group_by_setup_and_tool',
    # Orchestration
    'PostProcessor',
    'PostProcessError',
    'NoProgramFilesError',
    'RunResult',
]
