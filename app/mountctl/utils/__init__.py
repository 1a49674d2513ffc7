"""Utility modules for mountctl.

This module exports commonly used utility functions.
"""

from mountctl.utils.formatting import (
    console,
    create_catalog_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from mountctl.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_catalog_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
