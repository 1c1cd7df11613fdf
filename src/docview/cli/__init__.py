"""CLI package: Typer-based command-line interface.

Usage:
    docview --help
    python -m docview.cli views --help
"""

from docview.cli._app import app

# Register command modules (side-effect imports)
import docview.cli.cmd_ping  # noqa: F401
import docview.cli.cmd_views  # noqa: F401
import docview.cli.cmd_docs  # noqa: F401

__all__ = ["app"]
