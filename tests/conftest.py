"""
Pytest configuration and shared fixtures for scadsense tests.
"""

from pathlib import Path

import pytest

from scadsense.language.highlighter import Highlighter
from scadsense.language.tokens import HighlightClass
from scadsense.lsp.analyzer import DocumentAnalyzer
from scadsense.lsp.completions import CompletionProvider, CompletionSettings


SAMPLE_MODEL = """\
// Parametric box
$fn = 64;
wall = 2;

module box(size, lid = true) {
    difference() {
        cube(size);
        translate([wall, wall, wall]) cube(size - 2 * wall);
    }
}

function inner(size) = size - 2 * wall;

box([40, 30, 20]);
echo("inner:", inner(40));
"""


@pytest.fixture
def sample_model() -> str:
    """A small but realistic OpenSCAD document."""
    return SAMPLE_MODEL


@pytest.fixture
def highlight():
    """Fixture to highlight source as (text, class) pairs."""

    def _highlight(source: str, highlighter: Highlighter | None = None) -> list[tuple[str, HighlightClass]]:
        spans = (highlighter or Highlighter()).highlight(source)
        return [(span.text(source), span.highlight_class) for span in spans]

    return _highlight


@pytest.fixture
def provider_factory():
    """Factory fixture for creating completion providers."""

    def _create_provider(**settings) -> CompletionProvider:
        return CompletionProvider(CompletionSettings(**settings))

    return _create_provider


@pytest.fixture
def analyzer_factory():
    """Factory fixture for creating analyzed documents."""

    def _create_analyzer(source: str, uri: str = "file:///test.scad", **settings) -> DocumentAnalyzer:
        provider = CompletionProvider(CompletionSettings(**settings))
        analyzer = DocumentAnalyzer(source, uri, provider=provider)
        analyzer.analyze()
        return analyzer

    return _create_analyzer


@pytest.fixture
def scad_file(tmp_path: Path):
    """Factory fixture for writing a .scad file to a temp directory."""

    def _write(source: str, name: str = "model.scad") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return _write

