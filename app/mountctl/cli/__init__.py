"""CLI package for mountctl.

This package contains the Typer application and all subcommands.
"""

from mountctl.cli.main import app

__all__ = ["app"]
