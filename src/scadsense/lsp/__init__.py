"""
scadsense Language Server Protocol support.

The server itself lives in :mod:`scadsense.lsp.server` and is started with
``scadsense-lsp`` or ``python -m scadsense.lsp``.
"""

from scadsense.lsp.analyzer import SEMANTIC_TOKENS_LEGEND, DocumentAnalyzer
from scadsense.lsp.completions import (
    CompletionCandidate,
    CompletionProvider,
    CompletionSettings,
    Origin,
    WordPrefix,
    to_completion_item,
)
from scadsense.lsp.symbols import Symbol, SymbolKind, document_outline, find_declarations

__all__ = [
    "DocumentAnalyzer",
    "SEMANTIC_TOKENS_LEGEND",
    "CompletionProvider",
    "CompletionSettings",
    "CompletionCandidate",
    "Origin",
    "WordPrefix",
    "to_completion_item",
    "Symbol",
    "SymbolKind",
    "find_declarations",
    "document_outline",
]
