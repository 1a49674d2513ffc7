"""Definition commands.

This module provides `mountctl define create|edit|delete` for managing
the ``<name>.mount`` files in the definition directory. Installed units
are not touched; run `mountctl activate` to apply a changed definition.
"""

from typing import Annotated

import typer

from mountctl.cli.display import print_status, warn_unit_name_mismatch
from mountctl.cli.types import exit_on_error, get_context
from mountctl.models.definition import (
    DEFAULT_OPTIONS,
    DEFAULT_TYPE,
    MountDefinition,
    suggest_where,
)
from mountctl.models.history import OperationType
from mountctl.utils.formatting import print_error, print_info, print_success

app = typer.Typer(
    help="Create, edit and delete mount definitions.",
    no_args_is_help=True,
)


@app.command()
def create(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Mount name (file stem of <name>.mount).")],
    what: Annotated[
        str,
        typer.Option("--what", help="Mount source, e.g. //host/share or host:/export."),
    ],
    where: Annotated[
        str | None,
        typer.Option("--where", help="Mount target. Defaults to <mount_base>/<basename of --what>."),
    ] = None,
    fs_type: Annotated[
        str,
        typer.Option("--type", "-t", help="Filesystem type (cifs, nfs, ext4, ...)."),
    ] = DEFAULT_TYPE,
    options: Annotated[
        str,
        typer.Option("--options", "-o", help="Comma-separated mount options."),
    ] = DEFAULT_OPTIONS,
) -> None:
    """Create a new mount definition.

    Examples:
        mountctl define create nas1 --what //192.168.1.10/share -t cifs \\
            -o credentials=/etc/mountctl/nas1.creds
    """
    context = get_context(ctx)
    with exit_on_error():
        exists = context.definitions.exists(name)
    if exists:
        print_error(f"Definition '{name}' already exists. Use 'mountctl define edit {name}'.")
        raise typer.Exit(code=1)

    target = where or suggest_where(what, str(context.config.mount_base))
    definition = MountDefinition(
        name=name, what=what, where=target, type=fs_type, options=options
    )
    with exit_on_error(), context.action_log.recording(OperationType.WRITE_DEFINITION, name):
        path = context.definitions.save(definition)

    print_success(f"Created {path}")
    if where is None:
        print_info(f"Target defaulted to {target}")
    warn_unit_name_mismatch(name, target)
    with exit_on_error():
        print_status(context.reconciler.compute_status(name))


@app.command()
def edit(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Mount name.")],
    what: Annotated[str | None, typer.Option("--what", help="New mount source.")] = None,
    where: Annotated[str | None, typer.Option("--where", help="New mount target.")] = None,
    fs_type: Annotated[str | None, typer.Option("--type", "-t", help="New filesystem type.")] = None,
    options: Annotated[
        str | None, typer.Option("--options", "-o", help="New mount options.")
    ] = None,
) -> None:
    """Change fields of an existing definition.

    Only the given fields change. The installed unit keeps the old content
    until the mount is activated again.
    """
    context = get_context(ctx)
    with exit_on_error(), context.action_log.recording(OperationType.WRITE_DEFINITION, name):
        current = context.definitions.load(name)
        updated = current.with_changes(what=what, where=where, type=fs_type, options=options)
        path = context.definitions.save(updated)

    if updated == current:
        print_info(f"No changes to {path}")
    else:
        print_success(f"Updated {path}")
    with exit_on_error():
        mount_status = context.reconciler.compute_status(name)
    print_status(mount_status)
    if mount_status.drifted:
        print_info(f"Run 'mountctl activate {name}' to install the new definition.")


@app.command()
def delete(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Mount name.")],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete a mount definition.

    An installed unit stays in place and is then listed as system-only.
    """
    context = get_context(ctx)
    if not yes and not typer.confirm(f"Delete definition '{name}'?", default=False):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    with exit_on_error(), context.action_log.recording(OperationType.DELETE_DEFINITION, name):
        path = context.definitions.delete(name)
    print_success(f"Deleted {path}")
    if context.installed.has_mount(name):
        print_info(f"{name}.mount is still installed. Run 'mountctl deactivate {name}' to remove it.")
