"""Shared utility modules for NC program post-processing."""

from .numbers import parse_leading_float, format_number
from .gcode_format import (
    format_coordinate,
    format_position,
    generate_preamble,
    generate_stats_block,
    generate_footer,
    apply_feed_rate,
    apply_rapid,
    format_content_line,
    format_header_entry,
    generate_filename,
    setup_folder_name
)
from .tags import (
    FAST_TAG,
    UNENGAGED_TAG,
    RESET_TAG,
    derive_tags,
    tag_line,
    parse_filter,
    passes_filter
)
from .file_manager import (
    find_program_files,
    read_program_file,
    create_setup_directory,
    write_merged_file,
    package_for_download
)

__all__ = [
    # numbers
    'parse_leading_float',
    'format_number',
    # gcode_format
    'format_coordinate',
    'format_position',
    'generate_preamble',
    'generate_stats_block',
    'generate_footer',
    'apply_feed_rate',
    'apply_rapid',
    'format_content_line',
    'format_header_entry',
    'generate_filename',
    'setup_folder_name',
    # tags
    'FAST_TAG',
    'UNENGAGED_TAG',
    'RESET_TAG',
    'derive_tags',
    'tag_line',
    'parse_filter',
    'passes_filter',
    # file_manager
    'find_program_files',
    'read_program_file',
    'create_setup_directory',
    'write_merged_file',
    'package_for_download',
]
