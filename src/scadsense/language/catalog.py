"""
Built-in symbol catalog for OpenSCAD.

The catalog pairs every reserved name from :mod:`scadsense.language.tokens`
with the text inserted when a completion is accepted and a one-line
description. It is built once, on first use, and shared read-only by every
caller.
"""

from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Optional

from scadsense.language.tokens import CATEGORY_MEMBERS, SymbolCategory

# Insertion templates that differ from the plain name / call
KEYWORD_TEMPLATES = {
    "module": "module name() {\n    \n}",
    "function": "function name() = ",
    "if": "if () {\n    \n}",
    "else": "else {\n    \n}",
    "for": "for (i = [0:1:10]) {\n    \n}",
    "let": "let () ",
    "use": "use <>",
    "include": "include <>",
    "assert": 'assert(, "")',
    "echo": "echo()",
}

PRIMITIVE_TEMPLATES = {
    "cube": "cube([10, 10, 10])",
    "sphere": "sphere(r = 5)",
    "cylinder": "cylinder(h = 10, r = 5)",
    "polyhedron": "polyhedron(points = [], faces = [])",
    "circle": "circle(r = 5)",
    "square": "square([10, 10])",
    "polygon": "polygon(points = [])",
    "text": 'text("")',
}

TRANSFORMATION_TEMPLATES = {
    "translate": "translate([0, 0, 0])",
    "rotate": "rotate([0, 0, 0])",
    "scale": "scale([1, 1, 1])",
    "mirror": "mirror([1, 0, 0])",
    "color": 'color("")',
    "linear_extrude": "linear_extrude(height = 10)",
    "rotate_extrude": "rotate_extrude()",
    "hull": "hull() {\n    \n}",
    "minkowski": "minkowski() {\n    \n}",
    "offset": "offset(r = 1)",
    "resize": "resize([10, 10, 10])",
    "multmatrix": "multmatrix(m = [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 1, 0]])",
}

DOCUMENTATION = {
    # Keywords
    "module": "Defines a reusable module (like a function that creates geometry)",
    "function": "Defines a function that returns a value",
    "if": "Conditional statement",
    "else": "Alternative branch for conditional statement",
    "for": "Loop construct for iterating over ranges or lists",
    "let": "Assigns local variables within an expression",
    "each": "Flattens nested lists in list comprehensions",
    "assert": "Checks a condition and stops execution if false",
    "echo": "Prints values to the console for debugging",
    "use": "Imports modules and functions from another file",
    "include": "Includes all code from another file",
    "true": "Boolean true value",
    "false": "Boolean false value",
    "undef": "Undefined value",
    # Primitives
    "cube": "Creates a cube or rectangular prism. cube([x, y, z]) or cube(size)",
    "sphere": "Creates a sphere. sphere(r) or sphere(d)",
    "cylinder": "Creates a cylinder or cone. cylinder(h, r) or cylinder(h, r1, r2)",
    "polyhedron": "Creates an arbitrary polyhedron from points and faces",
    "circle": "Creates a 2D circle. circle(r) or circle(d)",
    "square": "Creates a 2D square or rectangle. square([x, y]) or square(size)",
    "polygon": "Creates a 2D polygon from a list of points",
    "text": 'Creates 2D text geometry. text("string", size, font)',
    # Transformations
    "translate": "Moves objects. translate([x, y, z])",
    "rotate": "Rotates objects. rotate([x, y, z]) or rotate(a, v)",
    "scale": "Scales objects. scale([x, y, z]) or scale(s)",
    "mirror": "Mirrors objects across a plane. mirror([x, y, z])",
    "multmatrix": "Applies a 4x4 transformation matrix",
    "color": 'Sets the color of objects. color("name") or color([r, g, b, a])',
    "offset": "Expands or contracts 2D shapes. offset(r) or offset(delta)",
    "hull": "Creates the convex hull of child objects",
    "minkowski": "Computes the Minkowski sum of child objects",
    "linear_extrude": "Extrudes 2D shapes into 3D. linear_extrude(height)",
    "rotate_extrude": "Rotates 2D shapes around the Z axis to create 3D objects",
    "surface": "Creates a surface from a data file or function",
    "projection": "Projects 3D objects onto the XY plane",
    "resize": "Resizes objects to specific dimensions",
    "render": "Forces rendering of a subtree (useful for complex CSG)",
    "children": "Accesses child objects in a module",
    # CSG
    "union": "Combines multiple objects into one",
    "difference": "Subtracts subsequent objects from the first",
    "intersection": "Keeps only the overlapping parts of objects",
    # Math
    "abs": "Returns the absolute value",
    "sign": "Returns -1, 0, or 1 based on the sign",
    "sin": "Trigonometric function (angle in degrees)",
    "cos": "Trigonometric function (angle in degrees)",
    "tan": "Trigonometric function (angle in degrees)",
    "asin": "Inverse trigonometric function (returns degrees)",
    "acos": "Inverse trigonometric function (returns degrees)",
    "atan": "Inverse trigonometric function (returns degrees)",
    "atan2": "Two-argument arctangent. atan2(y, x)",
    "floor": "Rounds down to nearest integer",
    "ceil": "Rounds up to nearest integer",
    "round": "Rounds to nearest integer",
    "ln": "Natural logarithm",
    "log": "Logarithm base 10",
    "pow": "Power function. pow(base, exponent)",
    "sqrt": "Square root",
    "exp": "Exponential function (e^x)",
    "rands": "Generates random numbers. rands(min, max, count)",
    "min": "Returns the minimum value",
    "max": "Returns the maximum value",
    "norm": "Returns the Euclidean norm of a vector",
    "cross": "Returns the cross product of two 3D vectors",
    # Lists and strings
    "concat": "Concatenates lists or values",
    "lookup": "Looks up a value in a table. lookup(key, table)",
    "str": "Converts values to a string",
    "chr": "Converts a code point to a character",
    "ord": "Converts a character to its code point",
    "search": "Searches for values in a list or string",
    "version": "Returns OpenSCAD version as a list",
    "version_num": "Returns OpenSCAD version as a number",
    "len": "Returns the length of a list or string",
    "parent_module": "Returns the name of the parent module",
    "is_undef": "Returns true if the value is undefined",
    "is_bool": "Returns true if the value is a boolean",
    "is_num": "Returns true if the value is a number",
    "is_string": "Returns true if the value is a string",
    "is_list": "Returns true if the value is a list",
    "is_function": "Returns true if the value is a function",
    # Special variables
    "$fn": "Number of fragments used to render curves (higher = smoother)",
    "$fa": "Minimum angle for each fragment",
    "$fs": "Minimum size of each fragment",
    "$t": "Animation time variable (0 to 1)",
    "$vpr": "Viewport rotation as [x, y, z] angles",
    "$vpt": "Viewport translation as [x, y, z]",
    "$vpd": "Viewport camera distance",
    "$vpf": "Viewport field of view",
    "$children": "Number of child objects in current module",
    "$preview": "True if in preview mode, false if rendering",
}

# Categories whose members are called with parentheses
CALLABLE_CATEGORIES = frozenset({
    SymbolCategory.PRIMITIVE,
    SymbolCategory.TRANSFORMATION,
    SymbolCategory.BOOLEAN_OPERATION,
    SymbolCategory.MATH_FUNCTION,
    SymbolCategory.LIST_STRING_FUNCTION,
})


@dataclass(frozen=True, slots=True)
class SymbolEntry:
    """
    A built-in symbol known independently of any document.

    Attributes:
        name: Identifier as written in source (special variables keep the ``$``)
        category: The symbol's category
        insertion_template: Text inserted when the completion is accepted
        documentation: Short human-readable description
    """

    name: str
    category: SymbolCategory
    insertion_template: str
    documentation: Optional[str] = None

    @property
    def display_text(self) -> str:
        """Label shown in completion lists, e.g. ``cube()``."""
        if self.category in CALLABLE_CATEGORIES:
            return f"{self.name}()"
        return self.name


def _insertion_template(name: str, category: SymbolCategory) -> str:
    if category is SymbolCategory.KEYWORD:
        return KEYWORD_TEMPLATES.get(name, name)
    if category is SymbolCategory.PRIMITIVE:
        return PRIMITIVE_TEMPLATES.get(name, f"{name}()")
    if category is SymbolCategory.TRANSFORMATION:
        return TRANSFORMATION_TEMPLATES.get(name, f"{name}()")
    if category is SymbolCategory.BOOLEAN_OPERATION:
        return f"{name}() {{\n    \n}}"
    if category in CALLABLE_CATEGORIES:
        return f"{name}()"
    return name


@lru_cache(maxsize=None)
def builtin_catalog() -> tuple[SymbolEntry, ...]:
    """
    Get every built-in symbol, grouped by category in a fixed order.

    The tuple is constructed on the first call and the same object is
    returned afterwards.
    """
    entries: list[SymbolEntry] = []

    for category, names in CATEGORY_MEMBERS.items():
        for name in names:
            entries.append(
                SymbolEntry(
                    name=name,
                    category=category,
                    insertion_template=_insertion_template(name, category),
                    documentation=DOCUMENTATION.get(name),
                )
            )

    return tuple(entries)


@lru_cache(maxsize=None)
def catalog_index() -> MappingProxyType:
    """Map of exact name to catalog entry."""
    return MappingProxyType({entry.name: entry for entry in builtin_catalog()})


def lookup_builtin(name: str) -> SymbolEntry | None:
    """Look up a built-in symbol by its exact (case-sensitive) name."""
    return catalog_index().get(name)
