"""Read-only mount commands.

This module provides `mountctl list`, `mountctl status` and
`mountctl show`. None of them change anything on the system.
"""

import logging
import os
import stat
from pathlib import Path
from typing import Annotated

import typer

from mountctl.cli.display import (
    create_details_table,
    print_catalog,
    print_json,
    print_status,
    warn_unit_name_mismatch,
)
from mountctl.cli.types import OutputFormat, exit_on_error, get_context
from mountctl.models.credential import CredentialMeta
from mountctl.utils.formatting import console

logger = logging.getLogger(__name__)


def list_mounts(
    ctx: typer.Context,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """List every defined or installed mount with its state.

    Examples:
        mountctl list
        mountctl list --format json
    """
    context = get_context(ctx)
    with exit_on_error():
        entries = list(context.catalog)

    if output_format == OutputFormat.JSON:
        print_json([entry.to_dict() for entry in entries])
        return
    print_catalog(entries)


def status(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Mount name.")],
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Show the computed state of one mount."""
    context = get_context(ctx)
    with exit_on_error():
        entry = context.catalog.get(name)

    if output_format == OutputFormat.JSON:
        print_json(entry.to_dict())
        return
    print_status(entry.status)


def show(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Mount name.")],
) -> None:
    """Show the definition, installed unit and credentials of one mount."""
    context = get_context(ctx)
    with exit_on_error():
        resolved = context.reconciler.resolve(name)
        mount_status = context.reconciler.status_of(resolved)
        credential: CredentialMeta | None = None
        referenced = resolved.definition.credentials_path if resolved.definition else None
        if referenced is not None:
            credential = _describe_credential_file(referenced)
        checksum = None
        if resolved.installed_error is None:
            checksum = context.installed.checksum(name)

    table = create_details_table(
        resolved,
        mount_status,
        installed_path=str(context.installed.mount_path(name)),
        checksum=checksum,
        credential=credential,
    )
    console.print(table)
    warn_unit_name_mismatch(name, resolved.where)
    for problem in mount_status.problems:
        console.print(f"  [warning]-[/] {problem}")


def _describe_credential_file(path: str) -> CredentialMeta:
    """Describe a credential file referenced from mount options by path.

    A file that exists but cannot be inspected is reported without a mode.
    """
    name = Path(path).stem
    try:
        info = os.stat(path)
    except FileNotFoundError:
        return CredentialMeta(name=name, path=path, exists=False)
    except OSError as e:
        logger.warning("Cannot inspect credential file %s: %s", path, e)
        return CredentialMeta(name=name, path=path, exists=True)
    if not stat.S_ISREG(info.st_mode):
        return CredentialMeta(name=name, path=path, exists=False)
    return CredentialMeta(name=name, path=path, exists=True, mode=stat.S_IMODE(info.st_mode))
