"""
scadsense Utilities Package.

Common utilities for error handling and source locations.
"""

from scadsense.utils.errors import (
    RuleCompileError,
    ScadSenseError,
    SourceFileError,
    SourceLocation,
    error_at,
    location_at,
    source_line_at,
)

__all__ = [
    "RuleCompileError",
    "ScadSenseError",
    "SourceFileError",
    "SourceLocation",
    "error_at",
    "location_at",
    "source_line_at",
]
