"""Tests for the built-in symbol catalog and the lexical taxonomy."""

import pytest
from lsprotocol import types

from scadsense.language.catalog import builtin_catalog, catalog_index, lookup_builtin
from scadsense.language.tokens import (
    BUILTIN_FUNCTIONS,
    CATEGORY_MEMBERS,
    KEYWORDS,
    SymbolCategory,
    is_identifier_char,
    style_for,
)


class TestCatalogContents:
    """Catalog coverage and ordering."""

    def test_catalog_is_built_once(self) -> None:
        assert builtin_catalog() is builtin_catalog()

    def test_every_reserved_name_is_present(self) -> None:
        names = [entry.name for entry in builtin_catalog()]
        expected = [name for members in CATEGORY_MEMBERS.values() for name in members]
        assert names == expected
        assert len(names) == 89

    def test_names_are_unique(self) -> None:
        names = [entry.name for entry in builtin_catalog()]
        assert len(names) == len(set(names))

    def test_every_entry_is_documented(self) -> None:
        assert all(entry.documentation for entry in builtin_catalog())

    def test_user_defined_is_not_a_catalog_category(self) -> None:
        assert all(entry.category is not SymbolCategory.USER_DEFINED for entry in builtin_catalog())

    def test_keywords_are_not_builtin_calls(self) -> None:
        assert not BUILTIN_FUNCTIONS.intersection(KEYWORDS)


class TestInsertionTemplates:
    """Text inserted on acceptance."""

    @pytest.mark.parametrize(
        ("name", "template"),
        [
            ("cube", "cube([10, 10, 10])"),
            ("translate", "translate([0, 0, 0])"),
            ("union", "union() {\n    \n}"),
            ("sin", "sin()"),
            ("len", "len()"),
            ("module", "module name() {\n    \n}"),
            ("true", "true"),
            ("$fn", "$fn"),
            ("children", "children()"),
        ],
    )
    def test_template(self, name: str, template: str) -> None:
        entry = lookup_builtin(name)
        assert entry is not None
        assert entry.insertion_template == template

    def test_display_text(self) -> None:
        assert lookup_builtin("sphere").display_text == "sphere()"
        assert lookup_builtin("for").display_text == "for"
        assert lookup_builtin("$preview").display_text == "$preview"


class TestLookup:
    """Exact-name lookup."""

    def test_lookup_is_case_sensitive(self) -> None:
        assert lookup_builtin("Cube") is None

    def test_lookup_unknown(self) -> None:
        assert lookup_builtin("not_a_builtin") is None

    def test_index_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            catalog_index()["cube"] = None  # type: ignore[index]

    def test_categories(self) -> None:
        assert lookup_builtin("difference").category is SymbolCategory.BOOLEAN_OPERATION
        assert lookup_builtin("atan2").category is SymbolCategory.MATH_FUNCTION
        assert lookup_builtin("is_list").category is SymbolCategory.LIST_STRING_FUNCTION
        assert lookup_builtin("$t").category is SymbolCategory.SPECIAL_VARIABLE


class TestTaxonomy:
    """Shared helpers in the tokens module."""

    @pytest.mark.parametrize("char", ["a", "Z", "0", "_", "$"])
    def test_identifier_chars(self, char: str) -> None:
        assert is_identifier_char(char)

    @pytest.mark.parametrize("char", ["(", " ", "\n", ".", "-", '"'])
    def test_non_identifier_chars(self, char: str) -> None:
        assert not is_identifier_char(char)

    def test_category_styles(self) -> None:
        assert style_for(SymbolCategory.SPECIAL_VARIABLE).icon == "$"
        assert style_for(SymbolCategory.USER_DEFINED).icon == "u"
        assert all(style_for(category).icon for category in SymbolCategory)

    def test_category_style_label_and_kind(self) -> None:
        primitive = style_for(SymbolCategory.PRIMITIVE)
        assert primitive.label == "Primitive"
        assert primitive.completion_kind == types.CompletionItemKind.Function
        assert style_for(SymbolCategory.KEYWORD).completion_kind == types.CompletionItemKind.Keyword
        assert style_for(SymbolCategory.SPECIAL_VARIABLE).completion_kind == types.CompletionItemKind.Variable
        assert all(style_for(category).label == category.label for category in SymbolCategory)

    def test_category_labels(self) -> None:
        assert SymbolCategory.BOOLEAN_OPERATION.label == "CSG Operation"
        assert SymbolCategory.USER_DEFINED.label == "User Defined"
