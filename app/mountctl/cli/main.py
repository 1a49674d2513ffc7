"""Main CLI application entry point.

Defines the Typer application, global options and command registration.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from mountctl import __version__
from mountctl.cli.commands import config, credential, define, history, lifecycle, mounts
from mountctl.core.paths import get_config_path
from mountctl.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="mountctl",
    help="Manage systemd mount units for local, SMB and NFS filesystems.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"mountctl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging to stderr through Rich."""
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(console=err_console, show_path=verbose, rich_tracebacks=verbose)
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler])
    logging.getLogger("mountctl").setLevel(level)


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file (default: $MOUNTCTL_CONFIG or ~/.config/mountctl/config.toml).",
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """mountctl - Manage systemd mount units.

    Keep mount definitions in one directory, install them as systemd
    units, and start, stop or automount them safely. Must be run as root.
    """
    configure_logging(verbose)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path or get_config_path()


# Register commands
app.command("list")(mounts.list_mounts)
app.command("status")(mounts.status)
app.command("show")(mounts.show)
app.command("activate")(lifecycle.activate)
app.command("deactivate")(lifecycle.deactivate)
app.command("enable")(lifecycle.enable)
app.command("disable")(lifecycle.disable)
app.command("automount")(lifecycle.automount)
app.command("repair")(lifecycle.repair)
app.command("mkdir")(lifecycle.mkdir)
app.add_typer(define.app, name="define")
app.add_typer(credential.app, name="credential")
app.add_typer(config.app, name="config")
app.add_typer(history.app, name="history")


if __name__ == "__main__":
    app()
