"""CLI commands for mountctl.

This package contains all subcommand implementations.
"""

from mountctl.cli.commands import config, credential, define, history, lifecycle, mounts

__all__ = ["config", "credential", "define", "history", "lifecycle", "mounts"]
