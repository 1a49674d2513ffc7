"""Shared Rich display functions for mounts and operation results.

Provides the catalog table, the status and details views and the
summary printed after each lifecycle operation.
"""

import dataclasses
import json
from collections.abc import Iterable

from rich.table import Table

from mountctl.core.lifecycle import BatchResult, OperationResult
from mountctl.core.reconciler import ResolvedMount
from mountctl.models.credential import CredentialMeta
from mountctl.models.definition import systemd_unit_name_for
from mountctl.models.status import CatalogEntry, MountStatus
from mountctl.utils.formatting import (
    console,
    create_catalog_table,
    format_catalog_row,
    format_state,
    print_info,
    print_success,
    print_warning,
)


def print_catalog(entries: Iterable[CatalogEntry]) -> int:
    """Print the catalog as a table.

    Args:
        entries: Catalog entries in display order.

    Returns:
        Number of entries printed.
    """
    table = create_catalog_table()
    count = 0
    for entry in entries:
        table.add_row(*format_catalog_row(entry))
        count += 1

    if count == 0:
        print_info("No mounts defined or installed.")
        return 0

    console.print(table)
    return count


def print_json(data: object) -> None:
    """Print data as indented JSON without markup processing."""
    console.print_json(json.dumps(data))


def print_status(status: MountStatus) -> None:
    """Print the one-line status of a mount, plus any problems."""
    modifiers = ", ".join(status.modifier_values)
    suffix = f" [muted]({modifiers})[/]" if modifiers else ""
    console.print(f"[mount.name]{status.name}[/]: {format_state(status)}{suffix}")
    for problem in status.problems:
        console.print(f"  [muted]-[/] {problem}")


def create_details_table(
    resolved: ResolvedMount,
    status: MountStatus,
    installed_path: str,
    checksum: str | None,
    credential: CredentialMeta | None,
) -> Table:
    """Create a two-column table describing one mount in detail.

    Args:
        resolved: Both sides of the mount as found on disk.
        status: Computed status.
        installed_path: Path of the installed mount unit.
        checksum: sha256 of the installed unit, None if not installed.
        credential: Credential file referenced by the mount options, if any.

    Returns:
        Rich Table ready for printing.
    """
    table = Table(
        title=f"Mount {resolved.name}",
        show_header=False,
        border_style="border",
    )
    table.add_column("Field", style="bold_header", no_wrap=True)
    table.add_column("Value")

    definition = resolved.definition
    table.add_row("Provenance", resolved.provenance.value)
    table.add_row("State", format_state(status))
    table.add_row("Modifiers", ", ".join(status.modifier_values) or "-")
    if definition is not None:
        table.add_row("What", definition.what or "-")
        table.add_row("Where", definition.where or "-")
        table.add_row("Type", definition.type)
        table.add_row("Options", definition.options)
    if resolved.installed_error is not None:
        table.add_row("Installed", f"[warning]{installed_path} (unreadable)[/]")
    else:
        table.add_row("Installed", installed_path if status.installed else "[muted]no[/]")
    if checksum is not None:
        table.add_row("Checksum", f"[muted]{checksum}[/]")
    if status.installed and resolved.is_defined:
        drift = "[warning]differs from definition[/]" if status.drifted else "in sync"
        table.add_row("Drift", drift)
    table.add_row("Automount", "installed" if resolved.has_automount else "-")
    if credential is not None:
        if not credential.exists:
            value = f"[warning]{credential.path} (missing)[/]"
        elif credential.mode is None:
            value = f"[warning]{credential.path} (unreadable)[/]"
        else:
            value = f"{credential.path} (mode {credential.mode_octal})"
        table.add_row("Credentials", value)
    return table


def warn_unit_name_mismatch(name: str, where: str | None) -> None:
    """Warn when systemd would expect a different unit name for Where=."""
    if not where or not where.startswith("/"):
        return
    expected = systemd_unit_name_for(where)
    if expected != name:
        print_warning(
            f"systemd expects the unit for {where} to be named '{expected}.mount', not '{name}.mount'"
        )


def print_operation_result(result: OperationResult, quiet: bool = False) -> None:
    """Print the steps an operation took and the resulting status.

    Args:
        result: Outcome of the lifecycle operation.
        quiet: Only print the final status line.
    """
    if not quiet:
        for message in result.messages:
            console.print(f"  [muted]{message}[/]")
        if result.reloaded:
            console.print("  [muted]Reloaded systemd units[/]")
    print_success(f"{result.operation.value.replace('_', ' ')} {result.name}: done")
    print_status(result.status)


def print_batch_result(batch: BatchResult, quiet: bool = False) -> None:
    """Print each mount that succeeded in a batch, then a summary line.

    Failures are not printed here; the caller reports them as errors.
    """
    for result in batch.results:
        print_operation_result(dataclasses.replace(result, reloaded=False), quiet=quiet)
    if batch.reloaded and not quiet:
        console.print("  [muted]Reloaded systemd units once for the batch[/]")

    operation = batch.operation.value.replace("_", " ")
    summary = f"{operation}: {len(batch.results)} done, {len(batch.failures)} failed"
    if batch.success:
        print_info(summary)
    else:
        print_warning(summary)
