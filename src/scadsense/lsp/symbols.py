"""
User-defined symbol discovery for OpenSCAD documents.

Declarations are found with three lexical patterns (module, function and
top-level assignment) rather than a parser, so the scan works on any text,
including documents that do not currently compile.
"""

import re
from bisect import bisect_right
from dataclasses import dataclass
from enum import Enum, auto

from lsprotocol import types


class SymbolKind(Enum):
    """Kind of user-defined declaration."""

    MODULE = auto()
    FUNCTION = auto()
    VARIABLE = auto()


# Map declaration kinds to LSP symbol kinds
SYMBOL_KIND_TO_LSP: dict[SymbolKind, types.SymbolKind] = {
    SymbolKind.MODULE: types.SymbolKind.Module,
    SymbolKind.FUNCTION: types.SymbolKind.Function,
    SymbolKind.VARIABLE: types.SymbolKind.Variable,
}

IDENTIFIER = r"[a-zA-Z_][a-zA-Z0-9_]*"

# One pattern per declaration kind; group 1 is the declared name.
DECLARATION_PATTERNS: tuple[tuple[SymbolKind, re.Pattern], ...] = (
    (SymbolKind.MODULE, re.compile(rf"\bmodule\s+({IDENTIFIER})\s*\(")),
    (SymbolKind.FUNCTION, re.compile(rf"\bfunction\s+({IDENTIFIER})\s*\(")),
    (SymbolKind.VARIABLE, re.compile(rf"^[ \t]*({IDENTIFIER})\s*=(?!=)", re.MULTILINE)),
)


@dataclass(frozen=True, slots=True)
class Symbol:
    """
    A declaration discovered in a document.

    Attributes:
        name: The declared identifier
        kind: Module, function or variable
        offset: 0-indexed character offset of the name
        line: 0-indexed line of the name
        character: 0-indexed column of the name
    """

    name: str
    kind: SymbolKind
    offset: int
    line: int
    character: int

    @property
    def end_character(self) -> int:
        return self.character + len(self.name)

    def to_lsp_range(self) -> types.Range:
        """Convert to LSP Range type."""
        return types.Range(
            start=types.Position(line=self.line, character=self.character),
            end=types.Position(line=self.line, character=self.end_character),
        )

    def to_document_symbol(self) -> types.DocumentSymbol:
        """Convert to LSP DocumentSymbol."""
        range_ = self.to_lsp_range()
        return types.DocumentSymbol(
            name=self.name,
            kind=SYMBOL_KIND_TO_LSP[self.kind],
            range=range_,
            selection_range=range_,
            detail=self.kind.name.lower(),
        )


def _line_starts(text: str) -> list[int]:
    starts = [0]
    pos = text.find("\n")
    while pos != -1:
        starts.append(pos + 1)
        pos = text.find("\n", pos + 1)
    return starts


def find_declarations(text: str) -> list[Symbol]:
    """
    Scan ``text`` for module, function and variable declarations.

    Each pattern reports a name only once (compared case-insensitively);
    the first occurrence wins. Results are grouped by pattern: modules,
    then functions, then variables, each in document order.
    """
    if not text:
        return []

    line_starts = _line_starts(text)
    symbols: list[Symbol] = []

    for kind, pattern in DECLARATION_PATTERNS:
        seen: set[str] = set()
        for match in pattern.finditer(text):
            name = match.group(1)
            key = name.lower()
            if key in seen:
                continue
            seen.add(key)

            offset = match.start(1)
            line = bisect_right(line_starts, offset) - 1
            symbols.append(
                Symbol(
                    name=name,
                    kind=kind,
                    offset=offset,
                    line=line,
                    character=offset - line_starts[line],
                )
            )

    return symbols


def document_outline(text: str) -> list[Symbol]:
    """Declarations in document order, for outline views."""
    return sorted(find_declarations(text), key=lambda s: s.offset)


def lookup_declaration(text: str, name: str) -> Symbol | None:
    """Find the first declaration of ``name`` (exact match)."""
    for symbol in document_outline(text):
        if symbol.name == name:
            return symbol
    return None
