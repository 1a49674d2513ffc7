"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from mountctl.core.theme import get_theme

if TYPE_CHECKING:
    from mountctl.models.status import CatalogEntry, MountStatus


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_catalog_table(title: str = "Mounts") -> Table:
    """Create a pre-configured table for the mount catalog.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for catalog display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Name", no_wrap=True)
    table.add_column("Provenance")
    table.add_column("State")
    table.add_column("Modifiers", style="muted")
    return table


def format_state(status: MountStatus) -> str:
    """Format the primary state of a mount with color markup.

    Args:
        status: Computed mount status.

    Returns:
        Rich markup string for the state.
    """
    value = status.state.value
    if status.is_active:
        return f"[state.active]{value}[/]"
    if status.is_error:
        return f"[state.error]{value}[/]"
    return f"[state.inactive]{value}[/]"


def format_catalog_row(entry: CatalogEntry) -> tuple[str, str, str, str]:
    """Format a catalog entry as a table row.

    Args:
        entry: The catalog entry to format.

    Returns:
        Tuple of (name, provenance, state, modifiers) with Rich markup.
    """
    style = "provenance.defined" if entry.is_defined else "provenance.system"
    provenance = f"[{style}]{entry.provenance.value}[/]"
    modifiers = ", ".join(entry.status.modifier_values) or "-"
    return (f"[mount.name]{entry.name}[/]", provenance, format_state(entry.status), modifiers)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
