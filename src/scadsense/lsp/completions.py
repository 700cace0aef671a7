"""
Completion engine for OpenSCAD.

Given the identifier being typed and the surrounding document, this module
produces a ranked list of suggestions drawn from:
- the built-in catalog (keywords, primitives, transformations, CSG
  operations, math and list/string functions, special variables)
- modules, functions and variables declared in the document itself

It also converts the ranked candidates to LSP completion items.
"""

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from lsprotocol import types

from scadsense.language.catalog import CALLABLE_CATEGORIES, SymbolEntry, builtin_catalog
from scadsense.language.tokens import (
    SPECIAL_SIGIL,
    SymbolCategory,
    is_identifier_char,
    style_for,
)
from scadsense.lsp.symbols import SymbolKind, find_declarations

DEFAULT_MAX_RESULTS = 20

SYMBOL_KIND_TO_LSP_KIND: dict[SymbolKind, types.CompletionItemKind] = {
    SymbolKind.MODULE: types.CompletionItemKind.Module,
    SymbolKind.FUNCTION: types.CompletionItemKind.Function,
    SymbolKind.VARIABLE: types.CompletionItemKind.Variable,
}


class Origin(Enum):
    """Where a completion candidate came from."""

    BUILTIN = "built-in"
    USER_DEFINED = "user-defined"


@dataclass(frozen=True, slots=True)
class CompletionSettings:
    """
    Tunable completion policy.

    Attributes:
        min_prefix_length: Shortest prefix that triggers completion
        sigil_bypasses_minimum: Prefixes starting with ``$`` always trigger
        max_results: Default cap on returned candidates
        max_scan_length: Only the first N characters of a document are
            scanned for declarations (None scans everything)
    """

    min_prefix_length: int = 1
    sigil_bypasses_minimum: bool = True
    max_results: int = DEFAULT_MAX_RESULTS
    max_scan_length: int | None = None

    def __post_init__(self) -> None:
        if self.min_prefix_length < 1:
            raise ValueError("min_prefix_length must be at least 1")
        if self.max_results < 0:
            raise ValueError("max_results must not be negative")
        if self.max_scan_length is not None and self.max_scan_length < 0:
            raise ValueError("max_scan_length must not be negative")

    def with_overrides(self, **changes: Any) -> "CompletionSettings":
        """Return a copy with the given fields replaced (None values ignored)."""
        return dataclasses.replace(
            self, **{key: value for key, value in changes.items() if value is not None}
        )

    @classmethod
    def from_init_options(
        cls,
        options: Mapping[str, Any] | None,
        base: "CompletionSettings | None" = None,
    ) -> "CompletionSettings":
        """
        Build settings from LSP ``initializationOptions``.

        Recognized keys are ``minPrefixLength``, ``sigilBypassesMinimum``,
        ``maxResults`` and ``maxScanLength``; they override ``base`` (the
        defaults if omitted). Unknown keys and values of the wrong type or
        range are ignored.
        """
        base = base or cls()
        if not options:
            return base

        changes: dict[str, Any] = {}

        min_prefix = options.get("minPrefixLength")
        if _is_int(min_prefix) and min_prefix >= 1:
            changes["min_prefix_length"] = min_prefix

        bypass = options.get("sigilBypassesMinimum")
        if isinstance(bypass, bool):
            changes["sigil_bypasses_minimum"] = bypass

        max_results = options.get("maxResults")
        if _is_int(max_results) and max_results >= 0:
            changes["max_results"] = max_results

        max_scan = options.get("maxScanLength")
        if _is_int(max_scan) and max_scan >= 0:
            changes["max_scan_length"] = max_scan

        return dataclasses.replace(base, **changes)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class WordPrefix:
    """The partial identifier before the cursor and where it starts."""

    text: str
    start: int

    @property
    def end(self) -> int:
        return self.start + len(self.text)


@dataclass(frozen=True, slots=True)
class CompletionCandidate:
    """
    A single suggestion.

    Attributes:
        name: Identifier to complete to
        category: Symbol category (USER_DEFINED for document symbols)
        insertion_template: Text that replaces the prefix on acceptance
        documentation: Short description, if any
        origin: Built-in catalog or current document
        kind: Declaration kind for user-defined symbols
    """

    name: str
    category: SymbolCategory
    insertion_template: str
    documentation: str | None = None
    origin: Origin = Origin.BUILTIN
    kind: SymbolKind | None = None

    @classmethod
    def from_entry(cls, entry: SymbolEntry) -> "CompletionCandidate":
        return cls(
            name=entry.name,
            category=entry.category,
            insertion_template=entry.insertion_template,
            documentation=entry.documentation,
        )

    @property
    def display_text(self) -> str:
        if self.category in CALLABLE_CATEGORIES:
            return f"{self.name}()"
        return self.name


def _match_tier(name: str, needle: str) -> int | None:
    """0 = exact, 1 = prefix, 2 = substring, None = no match (case-insensitive)."""
    lowered = name.lower()
    if lowered == needle:
        return 0
    if lowered.startswith(needle):
        return 1
    if needle in lowered:
        return 2
    return None


class CompletionProvider:
    """
    Provides ranked completion candidates for OpenSCAD documents.

    The provider holds only its settings; every call works from the text it
    is given and the shared built-in catalog, so one instance can serve any
    number of documents and threads.
    """

    def __init__(self, settings: CompletionSettings | None = None) -> None:
        self.settings = settings or CompletionSettings()

    def extract_prefix(self, text: str, cursor_offset: int) -> WordPrefix | None:
        """
        Find the identifier being typed immediately before the cursor.

        Args:
            text: The full document text
            cursor_offset: 0-indexed character offset of the cursor

        Returns:
            The prefix and its start offset, or None when there is nothing
            to complete
        """
        if cursor_offset < 1 or cursor_offset > len(text):
            return None

        start = cursor_offset
        while start > 0 and is_identifier_char(text[start - 1]):
            start -= 1

        if start == cursor_offset:
            return None

        word = text[start:cursor_offset]

        bypass = self.settings.sigil_bypasses_minimum and word.startswith(SPECIAL_SIGIL)
        if len(word) < self.settings.min_prefix_length and not bypass:
            return None

        return WordPrefix(text=word, start=start)

    def extract_user_defined_symbols(
        self, document_text: str, prefix: str = ""
    ) -> list[CompletionCandidate]:
        """
        Get declarations from the document whose name starts with ``prefix``.

        Args:
            document_text: The full document text
            prefix: Case-insensitive name prefix; empty matches everything

        Returns:
            Candidates with origin USER_DEFINED, modules first, then
            functions, then variables
        """
        if self.settings.max_scan_length is not None:
            document_text = document_text[: self.settings.max_scan_length]

        needle = prefix.lower()
        candidates: list[CompletionCandidate] = []

        for symbol in find_declarations(document_text):
            if not symbol.name.lower().startswith(needle):
                continue
            candidates.append(
                CompletionCandidate(
                    name=symbol.name,
                    category=SymbolCategory.USER_DEFINED,
                    insertion_template=symbol.name,
                    documentation=f"User-defined {symbol.kind.name.lower()}",
                    origin=Origin.USER_DEFINED,
                    kind=symbol.kind,
                )
            )

        return candidates

    def complete(
        self,
        prefix: str,
        document_text: str,
        max_results: int | None = None,
    ) -> list[CompletionCandidate]:
        """
        Rank completions for ``prefix``.

        Ranking, best first: exact match, then prefix matches before
        substring matches, then shorter names, then alphabetical. A document
        symbol that shares a name with a built-in is dropped in favour of
        the built-in.

        Args:
            prefix: The partial identifier being typed
            document_text: The full document text
            max_results: Cap on results (defaults to the settings value)

        Returns:
            Candidates in rank order
        """
        if not prefix:
            return []

        limit = self.settings.max_results if max_results is None else max_results
        if limit <= 0:
            return []

        needle = prefix.lower()
        pool: dict[str, CompletionCandidate] = {}

        for entry in builtin_catalog():
            if _match_tier(entry.name, needle) is not None:
                pool.setdefault(entry.name.lower(), CompletionCandidate.from_entry(entry))

        for candidate in self.extract_user_defined_symbols(document_text):
            if _match_tier(candidate.name, needle) is not None:
                pool.setdefault(candidate.name.lower(), candidate)

        ranked = sorted(
            pool.values(),
            key=lambda c: (_match_tier(c.name, needle), len(c.name), c.name.lower(), c.name),
        )
        return ranked[:limit]

    def complete_at(
        self,
        document_text: str,
        cursor_offset: int,
        max_results: int | None = None,
    ) -> tuple[WordPrefix | None, list[CompletionCandidate]]:
        """Extract the prefix at the cursor and complete it in one step."""
        prefix = self.extract_prefix(document_text, cursor_offset)
        if prefix is None:
            return None, []
        return prefix, self.complete(prefix.text, document_text, max_results)


def to_completion_item(
    candidate: CompletionCandidate,
    rank: int,
    replace_range: types.Range | None = None,
) -> types.CompletionItem:
    """
    Convert a candidate to an LSP completion item.

    Args:
        candidate: The candidate to convert
        rank: Position in the ranked list; preserved through ``sort_text``
        replace_range: Range of the typed prefix, replaced on acceptance

    Returns:
        The completion item
    """
    if candidate.kind is not None:
        kind = SYMBOL_KIND_TO_LSP_KIND[candidate.kind]
        detail = f"user-defined {candidate.kind.name.lower()}"
    else:
        style = style_for(candidate.category)
        kind = style.completion_kind
        detail = style.label

    documentation = None
    if candidate.documentation:
        documentation = types.MarkupContent(
            kind=types.MarkupKind.Markdown,
            value=f"**{candidate.display_text}**\n\n{candidate.documentation}",
        )

    text_edit = None
    insert_text = None
    if replace_range is not None:
        text_edit = types.TextEdit(range=replace_range, new_text=candidate.insertion_template)
    else:
        insert_text = candidate.insertion_template

    return types.CompletionItem(
        label=candidate.name,
        kind=kind,
        detail=detail,
        documentation=documentation,
        sort_text=f"{rank:04d}",
        filter_text=candidate.name,
        insert_text=insert_text,
        insert_text_format=types.InsertTextFormat.PlainText,
        text_edit=text_edit,
    )


_DEFAULT_PROVIDER = CompletionProvider()


def extract_prefix(text: str, cursor_offset: int) -> WordPrefix | None:
    """Extract the prefix at ``cursor_offset`` using default settings."""
    return _DEFAULT_PROVIDER.extract_prefix(text, cursor_offset)


def extract_user_defined_symbols(document_text: str, prefix: str = "") -> list[CompletionCandidate]:
    """Extract document declarations matching ``prefix`` using default settings."""
    return _DEFAULT_PROVIDER.extract_user_defined_symbols(document_text, prefix)


def complete(
    prefix: str,
    document_text: str,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> list[CompletionCandidate]:
    """Rank completions for ``prefix`` using default settings."""
    return _DEFAULT_PROVIDER.complete(prefix, document_text, max_results)
