"""History command for viewing past operations.

This module provides the `mountctl history` command for viewing the
action log written by every lifecycle and store operation.
"""

from typing import Annotated

import typer
from rich.table import Table

from mountctl.cli.display import print_json
from mountctl.cli.types import get_context
from mountctl.models.history import ActionRecord
from mountctl.utils.formatting import console, print_info

app = typer.Typer(
    name="history",
    help="View the log of past operations.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    name: Annotated[
        str | None,
        typer.Option(
            "--name",
            help="Only show entries for this mount.",
        ),
    ] = None,
    failed: Annotated[
        bool,
        typer.Option(
            "--failed",
            help="Only show failed operations.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show past operations and their outcome.

    Examples:
        mountctl history              # Show last 20 entries
        mountctl history -n 50        # Show last 50 entries
        mountctl history --name nas1 --failed
        mountctl history --json       # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    context = get_context(ctx)
    entries = context.action_log.entries()
    if name is not None:
        entries = [e for e in entries if e.name == name]
    if failed:
        entries = [e for e in entries if not e.success]
    entries = entries[:limit]

    if not entries:
        print_info("No history entries found.")
        return

    if json_output:
        print_json([e.to_dict() for e in entries])
    else:
        _print_table(entries)


def _print_table(entries: list[ActionRecord]) -> None:
    """Print history as Rich table.

    Args:
        entries: Records to display, newest first.
    """
    table = Table(title="Operation History", header_style="bold_header", border_style="border")
    table.add_column("ID", style="dim")
    table.add_column("Timestamp", style="muted")
    table.add_column("Operation")
    table.add_column("Name", style="mount.name")
    table.add_column("Result")
    table.add_column("Message")

    for entry in entries:
        result = "[success]ok[/]" if entry.success else "[error]failed[/]"
        timestamp = entry.timestamp[:19].replace("T", " ")
        table.add_row(
            entry.id,
            timestamp,
            entry.operation.value,
            entry.name,
            result,
            entry.message,
        )

    console.print(table)
