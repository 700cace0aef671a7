"""
Entry point for running the scadsense LSP server as a module.

Usage:
    python -m scadsense.lsp
    python -m scadsense.lsp --tcp --port 2088
"""

from scadsense.lsp.server import main

if __name__ == "__main__":
    main()
