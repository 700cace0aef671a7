"""
scadsense - Lexical highlighting and code completion for OpenSCAD.

scadsense classifies OpenSCAD source into highlight spans and ranks
completion candidates drawn from the built-in catalog and from the
declarations of the document being edited. It ships a command-line tool
and a Language Server Protocol server built on pygls.
"""

__version__ = "0.1.0"

from scadsense.language.catalog import SymbolEntry, builtin_catalog, lookup_builtin
from scadsense.language.highlighter import HighlightSpan, Highlighter, classify
from scadsense.language.tokens import HighlightClass, SymbolCategory
from scadsense.lsp.completions import (
    CompletionCandidate,
    CompletionProvider,
    CompletionSettings,
    complete,
    extract_prefix,
    extract_user_defined_symbols,
)

__all__ = [
    "__version__",
    "classify",
    "extract_prefix",
    "extract_user_defined_symbols",
    "complete",
    "builtin_catalog",
    "lookup_builtin",
    "Highlighter",
    "HighlightSpan",
    "HighlightClass",
    "SymbolCategory",
    "SymbolEntry",
    "CompletionProvider",
    "CompletionCandidate",
    "CompletionSettings",
]
