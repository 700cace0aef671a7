"""
scadsense Command-Line Interface.

Provides commands to inspect how OpenSCAD source is highlighted and
completed.

Usage:
    scadsense tokens model.scad                      # Highlight spans
    scadsense complete model.scad --offset 42        # Completions at an offset
    scadsense complete model.scad --line 3 --column 8
    scadsense symbols model.scad                     # User declarations
    scadsense info                                   # Catalog summary
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from scadsense import __version__
from scadsense.language.catalog import builtin_catalog
from scadsense.language.highlighter import classify
from scadsense.language.tokens import CATEGORY_MEMBERS, SymbolCategory, style_for
from scadsense.lsp.completions import CompletionProvider, CompletionSettings, Origin
from scadsense.lsp.symbols import document_outline
from scadsense.utils.errors import (
    ScadSenseError,
    SourceFileError,
    error_at,
    location_at,
    source_line_at,
)


# =============================================================================
# ANSI Color Codes for Terminal Output
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    # Text colors
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"

    # Styles
    BOLD = "\033[1m"

    # Reset
    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors (for non-TTY output)."""
        cls.RED = ""
        cls.GREEN = ""
        cls.YELLOW = ""
        cls.BLUE = ""
        cls.MAGENTA = ""
        cls.CYAN = ""
        cls.GRAY = ""
        cls.BOLD = ""
        cls.RESET = ""


def _init_colors() -> None:
    """Initialize colors based on terminal capabilities."""
    # Disable colors if not a TTY or if NO_COLOR is set
    import os

    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


# Initialize on module load
_init_colors()


def _category_color(category: SymbolCategory) -> str:
    return {
        "purple": Colors.MAGENTA,
        "blue": Colors.BLUE,
        "orange": Colors.YELLOW,
        "teal": Colors.CYAN,
    }.get(style_for(category).color, Colors.GRAY)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="scadsense",
        description="scadsense - OpenSCAD highlighting and code completion",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Tokens command
    tokens_parser = subparsers.add_parser(
        "tokens",
        help="Show highlight spans for an OpenSCAD file",
    )
    tokens_parser.add_argument(
        "input",
        type=Path,
        help="Input OpenSCAD file (.scad)",
    )

    # Complete command
    complete_parser = subparsers.add_parser(
        "complete",
        aliases=["c"],
        help="Show ranked completions at a cursor position",
    )
    complete_parser.add_argument(
        "input",
        type=Path,
        help="Input OpenSCAD file (.scad)",
    )
    complete_parser.add_argument(
        "--offset",
        type=int,
        default=None,
        help="0-indexed character offset of the cursor",
    )
    complete_parser.add_argument(
        "--line",
        type=int,
        default=None,
        help="1-indexed cursor line (use with --column)",
    )
    complete_parser.add_argument(
        "--column",
        type=int,
        default=None,
        help="1-indexed cursor column (use with --line)",
    )
    complete_parser.add_argument(
        "--max-results",
        type=int,
        default=None,
        help="Maximum number of candidates (default: 20)",
    )
    complete_parser.add_argument(
        "--min-prefix",
        type=int,
        default=None,
        help="Minimum prefix length that triggers completion (default: 1)",
    )

    # Symbols command
    symbols_parser = subparsers.add_parser(
        "symbols",
        help="List modules, functions and variables declared in a file",
    )
    symbols_parser.add_argument(
        "input",
        type=Path,
        help="Input OpenSCAD file (.scad)",
    )

    # Info command
    subparsers.add_parser(
        "info",
        help="Show the built-in catalog summary",
    )

    return parser


def _read_source(input_path: Path) -> str:
    """Read a source file, raising SourceFileError on failure."""
    if not input_path.exists():
        raise SourceFileError(str(input_path), "file not found")
    try:
        raw = input_path.read_bytes()
    except OSError as e:
        raise SourceFileError(str(input_path), str(e)) from e

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        readable = raw[: e.start].decode("utf-8")
        location = location_at(readable, len(readable), str(input_path))
        raise SourceFileError(
            str(input_path),
            f"invalid UTF-8 byte 0x{raw[e.start]:02x}",
            location,
            source_line_at(readable, location),
        ) from e


def _offset_for(source: str, line: int, column: int, filename: str) -> int:
    """Convert a 1-indexed line/column to an offset."""
    lines = source.split("\n")
    if not 1 <= line <= len(lines):
        raise error_at(
            f"Line {line} is outside the file (1-{len(lines)})", source, len(source), filename
        )

    line_start = sum(len(text) + 1 for text in lines[: line - 1])
    width = len(lines[line - 1])
    if not 1 <= column <= width + 1:
        raise error_at(
            f"Column {column} is outside line {line} (1-{width + 1})",
            source,
            line_start + width,
            filename,
        )
    return line_start + column - 1


def cmd_tokens(args: argparse.Namespace) -> int:
    """Handle the tokens command."""
    input_path: Path = args.input

    try:
        source = _read_source(input_path)

        for span in classify(source):
            loc = location_at(source, span.start)
            print(
                f"{Colors.GRAY}{loc.line}:{loc.column}{Colors.RESET} "
                f"{Colors.CYAN}{span.highlight_class.name}{Colors.RESET} "
                f"{span.text(source)!r}"
            )

        return 0

    except ScadSenseError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1


def cmd_complete(args: argparse.Namespace) -> int:
    """Handle the complete command."""
    input_path: Path = args.input

    if args.offset is None and (args.line is None or args.column is None):
        print(
            f"{Colors.RED}Error:{Colors.RESET} give either --offset or both --line and --column",
            file=sys.stderr,
        )
        return 1

    try:
        settings = CompletionSettings().with_overrides(
            min_prefix_length=args.min_prefix,
            max_results=args.max_results,
        )
    except ValueError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1

    try:
        source = _read_source(input_path)

        if args.offset is not None:
            offset = args.offset
        else:
            offset = _offset_for(source, args.line, args.column, str(input_path))

        provider = CompletionProvider(settings)
        prefix, candidates = provider.complete_at(source, offset)
        if prefix is None:
            return 0

        print(f"{Colors.BOLD}Completions for '{prefix.text}':{Colors.RESET}")
        for candidate in candidates:
            style = style_for(candidate.category)
            color = _category_color(candidate.category)
            origin = "" if candidate.origin is Origin.BUILTIN else f" {Colors.GRAY}[{candidate.origin.value}]{Colors.RESET}"
            line = (
                f"  {color}{style.icon}{Colors.RESET} {candidate.display_text:<20} "
                f"{Colors.GRAY}{style.label}{Colors.RESET}{origin}"
            )
            if candidate.documentation:
                line += f"  {candidate.documentation}"
            print(line)

        return 0

    except ScadSenseError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1


def cmd_symbols(args: argparse.Namespace) -> int:
    """Handle the symbols command."""
    input_path: Path = args.input

    try:
        source = _read_source(input_path)
    except ScadSenseError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1

    symbols = document_outline(source)
    if not symbols:
        print(f"{Colors.GRAY}No declarations found in {input_path}{Colors.RESET}")
        return 0

    for symbol in symbols:
        print(
            f"  {Colors.GRAY}{symbol.line + 1:>4}{Colors.RESET}  "
            f"{Colors.CYAN}{symbol.kind.name.lower():<8}{Colors.RESET} {symbol.name}"
        )

    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Handle the info command - show catalog information."""
    print(f"\n{Colors.BOLD}scadsense{Colors.RESET} {__version__}\n")
    print(f"{Colors.CYAN}Built-in catalog:{Colors.RESET}")
    for category, names in CATEGORY_MEMBERS.items():
        style = style_for(category)
        print(f"  {_category_color(category)}{style.icon}{Colors.RESET} {style.label:<22} {len(names):>3}")
    print(f"  {'':<2}{'Total':<22} {len(builtin_catalog()):>3}")
    print(f"""
{Colors.CYAN}Commands:{Colors.RESET}
  scadsense tokens <file>                  Show highlight spans
  scadsense complete <file> --offset N     Rank completions at a cursor
  scadsense symbols <file>                 List user declarations
  scadsense-lsp                            Start the language server
""")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    command_handlers = {
        "tokens": cmd_tokens,
        "complete": cmd_complete,
        "c": cmd_complete,
        "symbols": cmd_symbols,
        "info": cmd_info,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
