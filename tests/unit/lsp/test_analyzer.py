"""Tests for the scadsense LSP document analyzer."""

from lsprotocol import types

from scadsense.language.tokens import HighlightClass
from scadsense.lsp.analyzer import (
    HIGHLIGHT_TO_SEMANTIC,
    SEMANTIC_TOKEN_TYPES,
    SEMANTIC_TOKENS_LEGEND,
    DocumentAnalyzer,
)
from scadsense.lsp.symbols import SymbolKind


class TestPositions:
    """Offset and position conversion."""

    def test_offset_at(self, analyzer_factory) -> None:
        analyzer = analyzer_factory("ab\ncd")
        assert analyzer.offset_at(0, 1) == 1
        assert analyzer.offset_at(1, 1) == 4

    def test_offset_at_clamps(self, analyzer_factory) -> None:
        analyzer = analyzer_factory("ab\ncd")
        assert analyzer.offset_at(0, 10) == 2
        assert analyzer.offset_at(5, 0) == 5
        assert analyzer.offset_at(-1, 3) == 0

    def test_position_at(self, analyzer_factory) -> None:
        analyzer = analyzer_factory("ab\ncd")
        assert analyzer.position_at(4) == types.Position(line=1, character=1)
        assert analyzer.position_at(3) == types.Position(line=1, character=0)
        assert analyzer.position_at(99) == types.Position(line=1, character=2)


class TestCompletions:
    """Completion items at a position."""

    def test_completion_replaces_prefix(self, analyzer_factory) -> None:
        analyzer = analyzer_factory("translate(cub")
        items = analyzer.get_completions(0, 13)

        assert [item.label for item in items] == ["cube"]
        assert items[0].text_edit.range == types.Range(
            start=types.Position(line=0, character=10),
            end=types.Position(line=0, character=13),
        )
        assert items[0].text_edit.new_text == "cube([10, 10, 10])"
        assert items[0].sort_text == "0000"

    def test_user_defined_completion(self, analyzer_factory) -> None:
        analyzer = analyzer_factory("module widget() {}\nwid")
        items = analyzer.get_completions(1, 3)

        assert [item.label for item in items] == ["widget"]
        assert items[0].kind == types.CompletionItemKind.Module
        assert items[0].text_edit.range.start == types.Position(line=1, character=0)

    def test_sort_text_preserves_rank(self, analyzer_factory) -> None:
        items = analyzer_factory("rot").get_completions(0, 3)
        assert [(item.label, item.sort_text) for item in items] == [
            ("rotate", "0000"),
            ("rotate_extrude", "0001"),
        ]

    def test_no_prefix(self, analyzer_factory) -> None:
        assert analyzer_factory("cube(").get_completions(0, 5) == []

    def test_settings_apply(self, analyzer_factory) -> None:
        analyzer = analyzer_factory("x = c", min_prefix_length=2)
        assert analyzer.get_completions(0, 5) == []


class TestSemanticTokens:
    """Semantic token encoding."""

    def test_legend(self) -> None:
        assert SEMANTIC_TOKENS_LEGEND.token_types == [
            "comment",
            "string",
            "variable",
            "keyword",
            "function",
            "number",
            "operator",
        ]
        assert SEMANTIC_TOKENS_LEGEND.token_modifiers == ["defaultLibrary"]

    def test_every_class_is_mapped(self) -> None:
        for highlight_class in HighlightClass:
            if highlight_class is not HighlightClass.PLAIN:
                token_type, _ = HIGHLIGHT_TO_SEMANTIC[highlight_class]
                assert 0 <= token_type < len(SEMANTIC_TOKEN_TYPES)

    def test_delta_encoding(self, analyzer_factory) -> None:
        tokens = analyzer_factory("cube(10);\n$fn = 5;").get_semantic_tokens()
        assert tokens.data == [
            0, 0, 4, 4, 1,  # cube
            0, 5, 2, 5, 0,  # 10
            1, 0, 3, 2, 1,  # $fn
            0, 4, 1, 6, 0,  # =
            0, 2, 1, 5, 0,  # 5
        ]

    def test_multiline_comment_is_split(self, analyzer_factory) -> None:
        tokens = analyzer_factory("/* a\nb */").get_semantic_tokens()
        assert tokens.data == [0, 0, 4, 0, 0, 1, 0, 4, 0, 0]

    def test_empty_document(self, analyzer_factory) -> None:
        assert analyzer_factory("").get_semantic_tokens().data == []


class TestHover:
    """Hover documentation."""

    def test_hover_on_builtin(self, analyzer_factory) -> None:
        hover = analyzer_factory("cube(10);").get_hover(0, 2)
        assert hover is not None
        assert hover.contents.value.startswith("**cube()** (Primitive)")
        assert "Creates a cube" in hover.contents.value
        assert hover.range.end == types.Position(line=0, character=4)

    def test_hover_on_special_variable(self, analyzer_factory) -> None:
        hover = analyzer_factory("$fn = 64;").get_hover(0, 1)
        assert hover is not None
        assert "Special Variable" in hover.contents.value

    def test_hover_on_user_symbol(self, analyzer_factory) -> None:
        hover = analyzer_factory("module box() {}\nbox();").get_hover(1, 1)
        assert hover is not None
        assert hover.contents.value == "**box** (user-defined module, line 1)"

    def test_hover_uses_first_declaration(self, analyzer_factory) -> None:
        hover = analyzer_factory("x = 1;\nx = 2;\necho(x);").get_hover(2, 5)
        assert hover is not None
        assert hover.contents.value == "**x** (user-defined variable, line 1)"

    def test_hover_on_undeclared_name(self, analyzer_factory) -> None:
        assert analyzer_factory("echo(width);").get_hover(0, 7) is None

    def test_hover_on_number(self, analyzer_factory) -> None:
        assert analyzer_factory("cube(10);").get_hover(0, 6) is None

    def test_hover_on_punctuation(self, analyzer_factory) -> None:
        assert analyzer_factory("( )").get_hover(0, 1) is None


class TestDocumentSymbols:
    """Outline."""

    def test_outline(self, analyzer_factory, sample_model) -> None:
        analyzer = analyzer_factory(sample_model)
        assert [(s.name, s.kind, s.line) for s in analyzer.symbols] == [
            ("wall", SymbolKind.VARIABLE, 2),
            ("box", SymbolKind.MODULE, 4),
            ("inner", SymbolKind.FUNCTION, 11),
        ]

        symbols = analyzer.get_document_symbols()
        assert [s.kind for s in symbols] == [
            types.SymbolKind.Variable,
            types.SymbolKind.Module,
            types.SymbolKind.Function,
        ]

    def test_analyze_is_required_for_spans(self) -> None:
        analyzer = DocumentAnalyzer("cube(1);", "file:///a.scad")
        assert analyzer.spans == []
        analyzer.analyze()
        assert len(analyzer.spans) == 2
