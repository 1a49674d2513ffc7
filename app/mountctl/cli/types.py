"""Shared types and utilities for CLI commands.

This module provides the output format enum, access to the per-invocation
MountContext and the uniform error exit used by every command.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

import typer

from mountctl.core.config import load_config
from mountctl.core.context import MountContext, build_context
from mountctl.core.errors import InvalidDefinition, MountctlError
from mountctl.core.paths import get_config_path
from mountctl.core.privileges import require_root
from mountctl.utils.formatting import err_console, print_error, print_warning

logger = logging.getLogger(__name__)


class OutputFormat(str, Enum):
    """Output format options for read-only commands."""

    TABLE = "table"
    JSON = "json"


def get_context(ctx: typer.Context) -> MountContext:
    """Return the MountContext for this invocation, building it on first use.

    The privilege check runs before the context is built, so no command
    touches the system without root. A context placed in ``ctx.obj``
    beforehand is used as is.

    Raises:
        typer.Exit: If the caller is not root or the config cannot be loaded.
    """
    obj = ctx.ensure_object(dict)
    context = obj.get("context")
    if context is not None:
        return context

    config_path = obj.get("config_path") or get_config_path()
    with exit_on_error():
        require_root()
        config = load_config(config_path)
    context = build_context(config, config_path)
    obj["context"] = context
    if not context.system.is_available():
        print_warning("systemctl not found: unit states cannot be queried on this host")
    logger.debug("Using definitions from %s", config.definitions_dir)
    return context


def is_quiet(ctx: typer.Context) -> bool:
    """Check whether --quiet was given."""
    return bool(ctx.ensure_object(dict).get("quiet", False))


def report_error(error: MountctlError) -> None:
    """Print an error with its problems and system diagnostic."""
    print_error(error.message)
    if isinstance(error, InvalidDefinition):
        for problem in error.problems:
            err_console.print(f"  [muted]-[/] {problem}")
    if error.diagnostic:
        err_console.print(f"[muted]{error.diagnostic}[/]", highlight=False)


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Turn any MountctlError into a printed message and exit code 1.

    Raises:
        typer.Exit: With code 1 when a MountctlError escapes the block.
    """
    try:
        yield
    except MountctlError as e:
        report_error(e)
        raise typer.Exit(code=1) from e
