"""
scadsense Language Server Protocol (LSP) Server.

This module implements an LSP server for OpenSCAD using pygls. It provides:

- Document synchronization (open, change, save, close)
- Completion suggestions (built-ins and document declarations)
- Semantic token highlighting
- Hover documentation
- Document symbols (outline)

Usage:
    # Start the server in stdio mode (for IDE integration)
    scadsense-lsp

    # Start in TCP mode (for debugging)
    scadsense-lsp --tcp --port 2088
"""

import logging

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from scadsense import __version__
from scadsense.lsp.analyzer import SEMANTIC_TOKENS_LEGEND, DocumentAnalyzer
from scadsense.lsp.completions import CompletionProvider, CompletionSettings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("scadsense-lsp")

# Characters that re-trigger completion besides identifier characters
TRIGGER_CHARACTERS = ["$"]


class ScadSenseLanguageServer(LanguageServer):
    """
    Language Server Protocol implementation for OpenSCAD.

    This class handles LSP requests and notifications, keeping one
    analyzer per open document.
    """

    def __init__(self, settings: CompletionSettings | None = None) -> None:
        """Initialize the language server."""
        super().__init__(
            name="scadsense-lsp",
            version=f"v{__version__}",
        )

        # Document analyzers cache (uri -> analyzer)
        self._analyzers: dict[str, DocumentAnalyzer] = {}

        self.apply_settings(settings or CompletionSettings())

        # Register all handlers
        self._register_handlers()

    @property
    def completion_settings(self) -> CompletionSettings:
        return self._provider.settings

    def apply_settings(self, settings: CompletionSettings) -> None:
        """Replace the completion settings; open documents are re-analyzed lazily."""
        self._provider = CompletionProvider(settings)
        self._analyzers.clear()
        logger.debug(f"Completion settings: {settings}")

    def _register_handlers(self) -> None:
        """Register all LSP request and notification handlers."""
        # Document synchronization
        self.feature(types.TEXT_DOCUMENT_DID_OPEN)(self._on_did_open)
        self.feature(types.TEXT_DOCUMENT_DID_CHANGE)(self._on_did_change)
        self.feature(types.TEXT_DOCUMENT_DID_SAVE)(self._on_did_save)
        self.feature(types.TEXT_DOCUMENT_DID_CLOSE)(self._on_did_close)

        # Completion
        self.feature(
            types.TEXT_DOCUMENT_COMPLETION,
            types.CompletionOptions(
                trigger_characters=TRIGGER_CHARACTERS,
                resolve_provider=False,
            ),
        )(self._on_completion)

        # Semantic tokens
        self.feature(
            types.TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
            SEMANTIC_TOKENS_LEGEND,
        )(self._on_semantic_tokens)

        # Hover
        self.feature(types.TEXT_DOCUMENT_HOVER)(self._on_hover)

        # Document symbols (outline)
        self.feature(types.TEXT_DOCUMENT_DOCUMENT_SYMBOL)(self._on_document_symbol)

    def _get_analyzer(self, uri: str) -> DocumentAnalyzer | None:
        """Get the cached analyzer, analyzing the workspace copy if needed."""
        analyzer = self._analyzers.get(uri)
        if analyzer is not None:
            return analyzer

        doc = self.workspace.text_documents.get(uri)
        if doc is None:
            return None
        return self._analyze_document(uri, doc.source)

    def _analyze_document(self, uri: str, text: str) -> DocumentAnalyzer:
        """Analyze a document and cache the result."""
        analyzer = DocumentAnalyzer(text, uri, provider=self._provider)
        analyzer.analyze()
        self._analyzers[uri] = analyzer
        return analyzer

    # =========================================================================
    # Document Synchronization
    # =========================================================================

    def _on_did_open(self, params: types.DidOpenTextDocumentParams) -> None:
        """Handle document open notification."""
        document = params.text_document
        logger.info(f"Document opened: {document.uri}")

        self._analyze_document(document.uri, document.text)

    def _on_did_change(self, params: types.DidChangeTextDocumentParams) -> None:
        """Handle document change notification."""
        uri = params.text_document.uri

        # Get the current document text
        doc = self.workspace.text_documents.get(uri)
        if doc is None:
            return

        logger.debug(f"Document changed: {uri}")

        self._analyze_document(uri, doc.source)

    def _on_did_save(self, params: types.DidSaveTextDocumentParams) -> None:
        """Handle document save notification."""
        uri = params.text_document.uri
        logger.info(f"Document saved: {uri}")

        if params.text is not None:
            self._analyze_document(uri, params.text)

    def _on_did_close(self, params: types.DidCloseTextDocumentParams) -> None:
        """Handle document close notification."""
        uri = params.text_document.uri
        logger.info(f"Document closed: {uri}")

        # Clean up analyzer
        self._analyzers.pop(uri, None)

    # =========================================================================
    # Language Features
    # =========================================================================

    def _on_completion(
        self, params: types.CompletionParams
    ) -> types.CompletionList | None:
        """Handle completion request."""
        uri = params.text_document.uri
        position = params.position

        analyzer = self._get_analyzer(uri)
        if analyzer is None:
            return None

        items = analyzer.get_completions(position.line, position.character)
        logger.debug(f"Completion at {uri}:{position.line}:{position.character}: {len(items)} items")

        # The list is capped, so the client must ask again as the prefix grows
        return types.CompletionList(
            is_incomplete=len(items) >= self.completion_settings.max_results,
            items=items,
        )

    def _on_semantic_tokens(
        self, params: types.SemanticTokensParams
    ) -> types.SemanticTokens | None:
        """Handle full-document semantic tokens request."""
        analyzer = self._get_analyzer(params.text_document.uri)
        if analyzer is None:
            return None

        return analyzer.get_semantic_tokens()

    def _on_hover(self, params: types.HoverParams) -> types.Hover | None:
        """Handle hover request."""
        analyzer = self._get_analyzer(params.text_document.uri)
        if analyzer is None:
            return None

        return analyzer.get_hover(params.position.line, params.position.character)

    def _on_document_symbol(
        self, params: types.DocumentSymbolParams
    ) -> list[types.DocumentSymbol] | None:
        """Handle document symbols request (for outline view)."""
        analyzer = self._get_analyzer(params.text_document.uri)
        if analyzer is None:
            return None

        return analyzer.get_document_symbols()


# =============================================================================
# Server Creation and Main Entry Point
# =============================================================================


def create_server(settings: CompletionSettings | None = None) -> ScadSenseLanguageServer:
    """Create and configure a scadsense language server instance."""
    server = ScadSenseLanguageServer(settings)

    @server.feature(types.INITIALIZE)
    def on_initialize(params: types.InitializeParams) -> None:
        """Pick up completion settings from the client's initialization options."""
        logger.info("Initializing scadsense Language Server")

        options = params.initialization_options
        if isinstance(options, dict):
            server.apply_settings(
                CompletionSettings.from_init_options(options, base=server.completion_settings)
            )

    @server.feature(types.INITIALIZED)
    def on_initialized(
        params: types.InitializedParams,  # noqa: ARG001
    ) -> None:
        """Handle initialized notification."""
        logger.info("scadsense Language Server initialized successfully")

    @server.feature(types.SHUTDOWN)
    def on_shutdown(
        params: None,  # noqa: ARG001
    ) -> None:
        """Handle shutdown request."""
        logger.info("Shutting down scadsense Language Server")

    return server


def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for the scadsense language server.

    Starts the server in stdio mode for IDE integration.
    """
    import argparse

    parser = argparse.ArgumentParser(
        description="OpenSCAD Language Server",
        prog="scadsense-lsp",
    )
    parser.add_argument(
        "--tcp",
        action="store_true",
        help="Start server in TCP mode instead of stdio",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to in TCP mode (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=2088,
        help="Port to listen on in TCP mode (default: 2088)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Logging level (default: info)",
    )
    parser.add_argument(
        "--min-prefix",
        type=int,
        default=None,
        help="Minimum prefix length that triggers completion (default: 1)",
    )
    parser.add_argument(
        "--max-results",
        type=int,
        default=None,
        help="Maximum number of completion items (default: 20)",
    )

    args = parser.parse_args(argv)

    # Configure logging level
    log_level = getattr(logging, args.log_level.upper())
    logging.getLogger("scadsense-lsp").setLevel(log_level)

    try:
        settings = CompletionSettings().with_overrides(
            min_prefix_length=args.min_prefix,
            max_results=args.max_results,
        )
    except ValueError as e:
        parser.error(str(e))

    server = create_server(settings)

    if args.tcp:
        logger.info(f"Starting scadsense LSP in TCP mode on {args.host}:{args.port}")
        server.start_tcp(args.host, args.port)
    else:
        logger.info("Starting scadsense LSP in stdio mode")
        server.start_io()


if __name__ == "__main__":
    main()
