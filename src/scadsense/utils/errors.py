"""
Error types for scadsense.

Errors that point into a source file carry a ``SourceLocation`` and,
when available, the text of the offending line. They render the way
compilers report diagnostics::

    box.scad:2:7: Column 9 is outside line 2 (1-7)
      cube(1
            ^
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """
    A position in an OpenSCAD source text.

    ``line`` and ``column`` count from 1 and ``column`` is measured in
    characters. ``offset`` is the matching string index into the source.
    """

    line: int
    column: int
    offset: int = 0
    filename: Optional[str] = None

    def __str__(self) -> str:
        position = f"{self.line}:{self.column}"
        return f"{self.filename}:{position}" if self.filename else position


def location_at(source: str, offset: int, filename: Optional[str] = None) -> SourceLocation:
    """Compute the line/column of a character offset in ``source``."""
    offset = max(0, min(offset, len(source)))
    line_start = source.rfind("\n", 0, offset) + 1
    return SourceLocation(
        line=source.count("\n", 0, offset) + 1,
        column=offset - line_start + 1,
        offset=offset,
        filename=filename,
    )


def source_line_at(source: str, location: SourceLocation) -> str:
    """Return the line ``location`` points into, without its newline."""
    start = location.offset - (location.column - 1)
    end = source.find("\n", start)
    return source[start:] if end == -1 else source[start:end]


class ScadSenseError(Exception):
    """Base exception for all scadsense errors."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.message = message
        self.location = location
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location is None:
            return self.message

        header = f"{self.location}: {self.message}"
        if self.source_line is None:
            return header

        marker = " " * (self.location.column - 1) + "^"
        return f"{header}\n  {self.source_line}\n  {marker}"


def error_at(
    message: str,
    source: str,
    offset: int,
    filename: Optional[str] = None,
) -> ScadSenseError:
    """Build a ``ScadSenseError`` pointing at ``offset`` in ``source``."""
    location = location_at(source, offset, filename)
    return ScadSenseError(message, location, source_line_at(source, location))


class RuleCompileError(ScadSenseError):
    """
    Raised when a highlight rule pattern cannot be compiled.

    The rule table is static, so this only ever surfaces at import time.
    """

    def __init__(self, rule_name: str, pattern: str, reason: str) -> None:
        self.rule_name = rule_name
        self.pattern = pattern
        super().__init__(f"Invalid pattern for rule '{rule_name}': {reason} ({pattern!r})")


class SourceFileError(ScadSenseError):
    """
    Raised when an input file cannot be read.

    Undecodable files report where the first bad byte sits.
    """

    def __init__(
        self,
        path: str,
        reason: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ) -> None:
        self.path = path
        message = reason if location is not None else f"Cannot read {path}: {reason}"
        super().__init__(message, location, source_line)
