"""
Lexical taxonomy for OpenSCAD.

This module defines the closed sets of names the language reserves
(keywords, built-in modules and functions, special variables), the lexical
classes produced by the highlighter, and the symbol categories shared by
the highlighter and the completion engine.
"""

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType

from lsprotocol import types


class HighlightClass(Enum):
    """Lexical class assigned to a highlighted range of text."""

    COMMENT = auto()
    STRING = auto()
    SPECIAL_VARIABLE = auto()
    KEYWORD = auto()
    BUILTIN_FUNCTION = auto()
    NUMBER = auto()
    OPERATOR = auto()
    PLAIN = auto()


class SymbolCategory(Enum):
    """Category of a completable symbol."""

    KEYWORD = "Keyword"
    PRIMITIVE = "Primitive"
    TRANSFORMATION = "Transformation"
    BOOLEAN_OPERATION = "CSG Operation"
    MATH_FUNCTION = "Math Function"
    LIST_STRING_FUNCTION = "List/String Function"
    SPECIAL_VARIABLE = "Special Variable"
    # Only used for symbols discovered in a document
    USER_DEFINED = "User Defined"

    @property
    def label(self) -> str:
        return self.value


# Sigil that introduces special (environment) variables such as $fn
SPECIAL_SIGIL = "$"

# Language keywords that control program flow and structure
KEYWORDS: tuple[str, ...] = (
    "module", "function", "if", "else", "for", "let", "each",
    "assert", "echo", "use", "include", "true", "false", "undef",
)

# Built-in 3D and 2D primitives
PRIMITIVES: tuple[str, ...] = (
    # 3D
    "cube", "sphere", "cylinder", "polyhedron",
    # 2D
    "circle", "square", "polygon", "text",
)

TRANSFORMATIONS: tuple[str, ...] = (
    "translate", "rotate", "scale", "mirror", "multmatrix",
    "color", "offset", "hull", "minkowski",
    "linear_extrude", "rotate_extrude", "surface", "projection",
    "resize", "render", "children",
)

# Constructive solid geometry
BOOLEAN_OPERATIONS: tuple[str, ...] = (
    "union", "difference", "intersection",
)

MATH_FUNCTIONS: tuple[str, ...] = (
    "abs", "sign", "sin", "cos", "tan", "acos", "asin", "atan", "atan2",
    "floor", "round", "ceil", "ln", "log", "pow", "sqrt", "exp",
    "rands", "min", "max", "norm", "cross",
)

LIST_STRING_FUNCTIONS: tuple[str, ...] = (
    "concat", "lookup", "str", "chr", "ord", "search",
    "version", "version_num", "len", "parent_module",
    "is_undef", "is_bool", "is_num", "is_string", "is_list", "is_function",
)

SPECIAL_VARIABLES: tuple[str, ...] = (
    "$fn", "$fa", "$fs", "$t", "$vpr", "$vpt", "$vpd", "$vpf",
    "$children", "$preview",
)

# Names per category, in catalog order
CATEGORY_MEMBERS: MappingProxyType = MappingProxyType({
    SymbolCategory.KEYWORD: KEYWORDS,
    SymbolCategory.PRIMITIVE: PRIMITIVES,
    SymbolCategory.TRANSFORMATION: TRANSFORMATIONS,
    SymbolCategory.BOOLEAN_OPERATION: BOOLEAN_OPERATIONS,
    SymbolCategory.MATH_FUNCTION: MATH_FUNCTIONS,
    SymbolCategory.LIST_STRING_FUNCTION: LIST_STRING_FUNCTIONS,
    SymbolCategory.SPECIAL_VARIABLE: SPECIAL_VARIABLES,
})

# Everything that is highlighted as a built-in call
BUILTIN_FUNCTIONS: frozenset[str] = frozenset(
    PRIMITIVES
    + TRANSFORMATIONS
    + BOOLEAN_OPERATIONS
    + MATH_FUNCTIONS
    + LIST_STRING_FUNCTIONS
)

OPERATOR_CHARS = "+-*/%<>=!&|?:"


def is_identifier_char(char: str) -> bool:
    """Return True if ``char`` can be part of an identifier being typed."""
    return char.isalnum() or char == "_" or char == SPECIAL_SIGIL


@dataclass(frozen=True, slots=True)
class CategoryStyle:
    """How a category is presented in a completion list."""

    icon: str
    color: str
    label: str
    completion_kind: types.CompletionItemKind


_Kind = types.CompletionItemKind

# Presentation per category: icon glyph, color, label and LSP item kind
CATEGORY_STYLES: MappingProxyType = MappingProxyType({
    category: CategoryStyle(icon=icon, color=color, label=category.label, completion_kind=kind)
    for category, icon, color, kind in (
        (SymbolCategory.KEYWORD, "k", "purple", _Kind.Keyword),
        (SymbolCategory.PRIMITIVE, "P", "blue", _Kind.Function),
        (SymbolCategory.TRANSFORMATION, "T", "blue", _Kind.Function),
        (SymbolCategory.BOOLEAN_OPERATION, "C", "blue", _Kind.Function),
        (SymbolCategory.MATH_FUNCTION, "f", "orange", _Kind.Function),
        (SymbolCategory.LIST_STRING_FUNCTION, "f", "orange", _Kind.Function),
        (SymbolCategory.SPECIAL_VARIABLE, "$", "teal", _Kind.Variable),
        (SymbolCategory.USER_DEFINED, "u", "gray", _Kind.Text),
    )
})


def style_for(category: SymbolCategory) -> CategoryStyle:
    """Get the presentation style for a category."""
    return CATEGORY_STYLES[category]
