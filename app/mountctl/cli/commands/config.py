"""Configuration commands.

This module provides `mountctl config show` and `mountctl config set`.
"""

from typing import Annotated

import typer
from rich.table import Table

from mountctl.cli.display import print_json
from mountctl.cli.types import OutputFormat, exit_on_error, get_context
from mountctl.core.config import CONFIG_KEYS, save_config, set_config_value
from mountctl.core.paths import ensure_dir, get_config_path
from mountctl.models.history import OperationType
from mountctl.utils.formatting import console, print_info, print_success, print_warning

app = typer.Typer(
    help="Show and change mountctl settings.",
    no_args_is_help=True,
)


@app.command()
def show(
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
    """Show the effective configuration."""
    context = get_context(ctx)
    config = context.config
    values = {
        "definitions_dir": str(config.definitions_dir),
        "mount_base": str(config.mount_base),
        "systemd_dir": str(config.systemd_dir),
        "credentials_dir": str(config.effective_credentials_dir),
        "action_log": str(config.effective_action_log),
    }

    if output_format == OutputFormat.JSON:
        print_json(values)
        return

    config_path = context.config_path or get_config_path()
    table = Table(title=f"Configuration ({config_path})", border_style="border")
    table.add_column("Key", style="bold_header", no_wrap=True)
    table.add_column("Value")
    for key in CONFIG_KEYS:
        table.add_row(key, values[key])
    console.print(table)


@app.command("set")
def set_value(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help=f"One of: {', '.join(CONFIG_KEYS)}.")],
    value: Annotated[str, typer.Argument(help="New value. An empty string resets the key.")],
    create: Annotated[
        bool,
        typer.Option("--create", help="Create the directory if it does not exist."),
    ] = False,
) -> None:
    """Change one configuration value.

    Examples:
        mountctl config set mount_base /mnt/net --create
        mountctl config set credentials_dir ""
    """
    context = get_context(ctx)
    config_path = context.config_path or get_config_path()

    with exit_on_error(), context.action_log.recording(OperationType.SET_CONFIG, key, value):
        updated = set_config_value(context.config, key, value)
        if key == "mount_base":
            if create:
                ensure_dir(updated.mount_base, "mount base")
            elif not updated.mount_base.is_dir():
                print_warning(f"{updated.mount_base} does not exist (use --create to create it)")
        save_config(updated, config_path)

    print_success(f"Set {key} in {config_path}")
    if value == "":
        print_info(f"{key} reset to its default")
