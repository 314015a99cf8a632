"""Display utilities for commitstreak.

This module provides rendering and output utilities for both terminal
(Rich-based) and JSON output modes.
"""
from __future__ import annotations

from commitstreak.display.json import check_result_to_dict
from commitstreak.display.json import output_json
from commitstreak.display.json import output_json_error
from commitstreak.display.json import output_json_pretty
from commitstreak.display.json import report_to_dict
from commitstreak.display.rich import format_reset
from commitstreak.display.rich import format_status_line
from commitstreak.display.rich import format_streak
from commitstreak.display.rich import render_check_result
from commitstreak.display.rich import render_methods_table
from commitstreak.display.rich import render_rate_limit

__all__ = [
    # Rich rendering
    "format_reset",
    "format_status_line",
    "format_streak",
    "render_check_result",
    "render_methods_table",
    "render_rate_limit",
    # JSON output
    "check_result_to_dict",
    "output_json",
    "output_json_error",
    "output_json_pretty",
    "report_to_dict",
]
