"""
OpenSCAD language tables and the syntax highlighter.
"""

from scadsense.language.catalog import (
    DOCUMENTATION,
    SymbolEntry,
    builtin_catalog,
    catalog_index,
    lookup_builtin,
)
from scadsense.language.highlighter import (
    DEFAULT_RULES,
    HighlightRule,
    HighlightSpan,
    Highlighter,
    RuleGuard,
    classify,
    compile_rule,
)
from scadsense.language.tokens import (
    BUILTIN_FUNCTIONS,
    CATEGORY_MEMBERS,
    KEYWORDS,
    SPECIAL_SIGIL,
    CategoryStyle,
    HighlightClass,
    SymbolCategory,
    is_identifier_char,
    style_for,
)

__all__ = [
    # Taxonomy
    "HighlightClass",
    "SymbolCategory",
    "CategoryStyle",
    "KEYWORDS",
    "BUILTIN_FUNCTIONS",
    "CATEGORY_MEMBERS",
    "SPECIAL_SIGIL",
    "is_identifier_char",
    "style_for",
    # Catalog
    "SymbolEntry",
    "DOCUMENTATION",
    "builtin_catalog",
    "catalog_index",
    "lookup_builtin",
    # Highlighter
    "Highlighter",
    "HighlightRule",
    "HighlightSpan",
    "RuleGuard",
    "DEFAULT_RULES",
    "compile_rule",
    "classify",
]
