"""
OpenSCAD syntax highlighter.

Splits source text into highlight spans (comments, strings, keywords,
built-in calls, numbers, special variables, operators) by running an
ordered list of pattern rules over the text. Earlier rules may lock the
characters they claim so that later rules cannot reclassify them.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Iterator

from scadsense.language.tokens import (
    BUILTIN_FUNCTIONS,
    KEYWORDS,
    HighlightClass,
)
from scadsense.utils.errors import RuleCompileError


class RuleGuard(Enum):
    """When a rule must give way to characters already locked."""

    NONE = auto()     # always writes
    START = auto()    # skipped if the match begins on a locked character
    OVERLAP = auto()  # skipped if the match touches any locked character


@dataclass(frozen=True, slots=True)
class HighlightRule:
    """
    A single classification pass.

    Attributes:
        name: Rule name used in error messages
        highlight_class: Class assigned to every match
        pattern: Compiled pattern; each non-empty match is one claim
        protected: Whether claimed characters are locked against later rules
        guard: How the rule reacts to characters locked by earlier rules
    """

    name: str
    highlight_class: HighlightClass
    pattern: re.Pattern
    protected: bool = False
    guard: RuleGuard = RuleGuard.OVERLAP


@dataclass(frozen=True, slots=True)
class HighlightSpan:
    """A half-open range ``[start, end)`` of text with its lexical class."""

    start: int
    end: int
    highlight_class: HighlightClass

    @property
    def length(self) -> int:
        return self.end - self.start

    def text(self, source: str) -> str:
        """Slice the span's text out of the snapshot it was produced from."""
        return source[self.start:self.end]


def compile_rule(
    name: str,
    highlight_class: HighlightClass,
    pattern: str,
    *,
    protected: bool = False,
    guard: RuleGuard = RuleGuard.OVERLAP,
    flags: int = 0,
) -> HighlightRule:
    """
    Build a rule from a pattern string.

    Raises:
        RuleCompileError: If the pattern is not a valid regular expression
    """
    try:
        compiled = re.compile(pattern, flags)
    except re.error as e:
        raise RuleCompileError(name, pattern, str(e)) from e

    return HighlightRule(
        name=name,
        highlight_class=highlight_class,
        pattern=compiled,
        protected=protected,
        guard=guard,
    )


def _alternation(names: Iterable[str]) -> str:
    # Longest first so that e.g. rotate_extrude is tried before rotate
    ordered = sorted(names, key=lambda n: (-len(n), n))
    return "|".join(re.escape(name) for name in ordered)


DEFAULT_RULES: tuple[HighlightRule, ...] = (
    compile_rule(
        "comment",
        HighlightClass.COMMENT,
        r"/\*[\s\S]*?(?:\*/|\Z)|//[^\n]*",
        protected=True,
        guard=RuleGuard.NONE,
    ),
    compile_rule(
        "string",
        HighlightClass.STRING,
        r'"(?:[^"\\]|\\[\s\S])*(?:"|\\?\Z)',
        protected=True,
        guard=RuleGuard.START,
    ),
    compile_rule(
        "special-variable",
        HighlightClass.SPECIAL_VARIABLE,
        r"\$[a-zA-Z_][a-zA-Z0-9_]*",
    ),
    compile_rule(
        "keyword",
        HighlightClass.KEYWORD,
        rf"\b(?:{_alternation(KEYWORDS)})\b",
    ),
    compile_rule(
        "builtin-function",
        HighlightClass.BUILTIN_FUNCTION,
        rf"\b(?:{_alternation(BUILTIN_FUNCTIONS)})\b(?=\s*\()",
    ),
    compile_rule(
        "number",
        HighlightClass.NUMBER,
        r"\b-?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\b",
    ),
    compile_rule(
        "operator",
        HighlightClass.OPERATOR,
        r"[+\-*/%<>=!&|?:]+",
    ),
)


class Highlighter:
    """
    Rule-driven highlighter for OpenSCAD source.

    Rules run in order. Each match claims its characters by writing its span
    id into a per-character owner array:

    - protected rules (comments, strings) also lock their characters;
    - unprotected rules skip any match that touches a locked character,
      and otherwise overwrite what earlier unprotected rules claimed;
    - if an unprotected match covers exactly an intact earlier claim,
      the earlier claim is kept.

    Usage:
        highlighter = Highlighter()
        spans = highlighter.highlight(source)
        # or iterate lazily: for span in highlighter.iter_spans(source): ...
    """

    def __init__(self, rules: tuple[HighlightRule, ...] = DEFAULT_RULES) -> None:
        self.rules = rules

    def highlight(self, text: str) -> list[HighlightSpan]:
        """Classify ``text`` and return its spans in source order."""
        return list(self.iter_spans(text))

    def iter_spans(self, text: str) -> Iterator[HighlightSpan]:
        """
        Lazily classify ``text``.

        Nothing is computed until the first span is requested; each call
        starts from scratch.
        """
        if not text:
            return

        owner, claims = self._claim(text)

        pos = 0
        length = len(owner)
        while pos < length:
            span_id = owner[pos]
            end = pos + 1
            while end < length and owner[end] == span_id:
                end += 1
            if span_id >= 0:
                yield HighlightSpan(pos, end, claims[span_id][2])
            pos = end

    def _claim(self, text: str) -> tuple[list[int], list[tuple[int, int, HighlightClass]]]:
        length = len(text)
        owner = [-1] * length
        locked = bytearray(length)
        claims: list[tuple[int, int, HighlightClass]] = []

        for rule in self.rules:
            pos = 0
            while pos < length:
                match = rule.pattern.search(text, pos)
                if match is None:
                    break
                start, end = match.span()
                if start == end:
                    pos = end + 1
                    continue

                # Resume after the locked run, not after the rejected match
                if rule.guard is not RuleGuard.NONE and locked[start]:
                    pos = self._end_of_locked_run(locked, start)
                    continue
                pos = end
                if rule.guard is RuleGuard.OVERLAP and locked.find(1, start, end) != -1:
                    continue
                if not rule.protected and self._is_intact_claim(owner, claims, start, end):
                    continue

                span_id = len(claims)
                claims.append((start, end, rule.highlight_class))
                owner[start:end] = [span_id] * (end - start)
                if rule.protected:
                    locked[start:end] = b"\x01" * (end - start)

        return owner, claims

    @staticmethod
    def _end_of_locked_run(locked: bytearray, start: int) -> int:
        end = locked.find(0, start)
        return len(locked) if end == -1 else end

    @staticmethod
    def _is_intact_claim(
        owner: list[int],
        claims: list[tuple[int, int, HighlightClass]],
        start: int,
        end: int,
    ) -> bool:
        span_id = owner[start]
        if span_id < 0:
            return False
        claim_start, claim_end, _ = claims[span_id]
        if (claim_start, claim_end) != (start, end):
            return False
        return owner[start:end].count(span_id) == end - start


_DEFAULT_HIGHLIGHTER = Highlighter()


def classify(text: str) -> Iterator[HighlightSpan]:
    """Classify ``text`` with the default OpenSCAD rules."""
    return _DEFAULT_HIGHLIGHTER.iter_spans(text)
