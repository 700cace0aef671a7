"""
Document analysis for the scadsense LSP.

This module ties the highlighter and the completion engine to one open
document and answers position-based queries:
- Completions at a cursor position
- Semantic tokens for highlighting
- Hover documentation
- Document symbols (outline)
"""

from bisect import bisect_right

from lsprotocol import types

from scadsense.language.catalog import lookup_builtin
from scadsense.language.highlighter import HighlightSpan, Highlighter
from scadsense.language.tokens import HighlightClass, is_identifier_char
from scadsense.lsp.completions import CompletionProvider, to_completion_item
from scadsense.lsp.symbols import Symbol, document_outline, lookup_declaration

SEMANTIC_TOKEN_TYPES: list[str] = [
    types.SemanticTokenTypes.Comment.value,
    types.SemanticTokenTypes.String.value,
    types.SemanticTokenTypes.Variable.value,
    types.SemanticTokenTypes.Keyword.value,
    types.SemanticTokenTypes.Function.value,
    types.SemanticTokenTypes.Number.value,
    types.SemanticTokenTypes.Operator.value,
]

SEMANTIC_TOKEN_MODIFIERS: list[str] = [
    types.SemanticTokenModifiers.DefaultLibrary.value,
]

SEMANTIC_TOKENS_LEGEND = types.SemanticTokensLegend(
    token_types=SEMANTIC_TOKEN_TYPES,
    token_modifiers=SEMANTIC_TOKEN_MODIFIERS,
)

_DEFAULT_LIBRARY = 1 << SEMANTIC_TOKEN_MODIFIERS.index("defaultLibrary")

# Highlight class -> (token type index, modifier bitset)
HIGHLIGHT_TO_SEMANTIC: dict[HighlightClass, tuple[int, int]] = {
    HighlightClass.COMMENT: (SEMANTIC_TOKEN_TYPES.index("comment"), 0),
    HighlightClass.STRING: (SEMANTIC_TOKEN_TYPES.index("string"), 0),
    HighlightClass.SPECIAL_VARIABLE: (SEMANTIC_TOKEN_TYPES.index("variable"), _DEFAULT_LIBRARY),
    HighlightClass.KEYWORD: (SEMANTIC_TOKEN_TYPES.index("keyword"), 0),
    HighlightClass.BUILTIN_FUNCTION: (SEMANTIC_TOKEN_TYPES.index("function"), _DEFAULT_LIBRARY),
    HighlightClass.NUMBER: (SEMANTIC_TOKEN_TYPES.index("number"), 0),
    HighlightClass.OPERATOR: (SEMANTIC_TOKEN_TYPES.index("operator"), 0),
}


class DocumentAnalyzer:
    """
    Analyzes one OpenSCAD document snapshot for LSP features.

    Highlight spans and declarations are computed by :meth:`analyze`.
    Completions are always computed from the current text.
    """

    def __init__(
        self,
        source: str,
        uri: str,
        provider: CompletionProvider | None = None,
        highlighter: Highlighter | None = None,
    ) -> None:
        """
        Initialize the analyzer with source code.

        Args:
            source: The OpenSCAD source code
            uri: The document URI
            provider: Completion provider (a default one if omitted)
            highlighter: Highlighter (a default one if omitted)
        """
        self.source = source
        self.uri = uri
        self._provider = provider or CompletionProvider()
        self._highlighter = highlighter or Highlighter()

        self._line_starts = [0] + [i + 1 for i, ch in enumerate(source) if ch == "\n"]

        # Analysis results
        self.spans: list[HighlightSpan] = []
        self.symbols: list[Symbol] = []

    def analyze(self) -> None:
        """Highlight the document and collect its declarations."""
        self.spans = self._highlighter.highlight(self.source)
        self.symbols = document_outline(self.source)

    # =========================================================================
    # Positions
    # =========================================================================

    def offset_at(self, line: int, character: int) -> int:
        """Convert a 0-indexed line/character to an offset, clamped to the text."""
        if line < 0:
            return 0
        if line >= len(self._line_starts):
            return len(self.source)

        line_start = self._line_starts[line]
        if line + 1 < len(self._line_starts):
            line_end = self._line_starts[line + 1] - 1
        else:
            line_end = len(self.source)
        return line_start + max(0, min(character, line_end - line_start))

    def position_at(self, offset: int) -> types.Position:
        """Convert an offset to a 0-indexed LSP position."""
        offset = max(0, min(offset, len(self.source)))
        line = bisect_right(self._line_starts, offset) - 1
        return types.Position(line=line, character=offset - self._line_starts[line])

    def _range(self, start: int, end: int) -> types.Range:
        return types.Range(start=self.position_at(start), end=self.position_at(end))

    # =========================================================================
    # Completion
    # =========================================================================

    def get_completions(self, line: int, character: int) -> list[types.CompletionItem]:
        """
        Get completion items at a position.

        Args:
            line: 0-indexed line number
            character: 0-indexed character position

        Returns:
            Completion items in rank order; each replaces the typed prefix
        """
        offset = self.offset_at(line, character)
        prefix, candidates = self._provider.complete_at(self.source, offset)
        if prefix is None:
            return []

        replace_range = self._range(prefix.start, prefix.end)
        return [
            to_completion_item(candidate, rank, replace_range)
            for rank, candidate in enumerate(candidates)
        ]

    # =========================================================================
    # Semantic Tokens
    # =========================================================================

    def get_semantic_tokens(self) -> types.SemanticTokens:
        """
        Encode the highlight spans as LSP semantic tokens.

        Spans that cross line breaks (block comments, multi-line strings)
        are split into one token per line.
        """
        data: list[int] = []
        prev_line = 0
        prev_char = 0

        for span in self.spans:
            token_type, modifiers = HIGHLIGHT_TO_SEMANTIC[span.highlight_class]
            for start, end in self._split_lines(span.start, span.end):
                pos = self.position_at(start)
                delta_line = pos.line - prev_line
                delta_char = pos.character - prev_char if delta_line == 0 else pos.character
                data.extend([delta_line, delta_char, end - start, token_type, modifiers])
                prev_line = pos.line
                prev_char = pos.character

        return types.SemanticTokens(data=data)

    def _split_lines(self, start: int, end: int) -> list[tuple[int, int]]:
        pieces: list[tuple[int, int]] = []
        while start < end:
            newline = self.source.find("\n", start, end)
            stop = end if newline == -1 else newline
            if stop > start:
                pieces.append((start, stop))
            start = stop + 1
        return pieces

    # =========================================================================
    # Hover
    # =========================================================================

    def get_hover(self, line: int, character: int) -> types.Hover | None:
        """
        Get hover information at a position.

        Built-ins show their catalog documentation; declarations found in
        the document show their kind and line.
        """
        word, start, end = self._get_word_at_offset(self.offset_at(line, character))
        if not word:
            return None

        entry = lookup_builtin(word)
        if entry is not None:
            value = f"**{entry.display_text}** ({entry.category.label})"
            if entry.documentation:
                value += f"\n\n{entry.documentation}"
        else:
            symbol = lookup_declaration(self.source, word)
            if symbol is None:
                return None
            value = f"**{symbol.name}** (user-defined {symbol.kind.name.lower()}, line {symbol.line + 1})"

        return types.Hover(
            contents=types.MarkupContent(kind=types.MarkupKind.Markdown, value=value),
            range=self._range(start, end),
        )

    def _get_word_at_offset(self, offset: int) -> tuple[str, int, int]:
        start = offset
        while start > 0 and is_identifier_char(self.source[start - 1]):
            start -= 1

        end = offset
        while end < len(self.source) and is_identifier_char(self.source[end]):
            end += 1

        return self.source[start:end], start, end

    # =========================================================================
    # Document Symbols
    # =========================================================================

    def get_document_symbols(self) -> list[types.DocumentSymbol]:
        """Get the outline of user-defined declarations."""
        return [symbol.to_document_symbol() for symbol in self.symbols]
