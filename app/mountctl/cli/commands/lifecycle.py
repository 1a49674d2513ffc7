"""Lifecycle commands.

This module provides the commands that change the state of a mount:
`activate`, `deactivate`, `enable`, `disable`, `automount`, `repair`
and `mkdir`.
"""

from typing import Annotated

import typer

from mountctl.cli.display import print_batch_result, print_operation_result
from mountctl.cli.types import exit_on_error, get_context, is_quiet, report_error
from mountctl.core.context import MountContext
from mountctl.core.errors import MissingTarget, MountctlError
from mountctl.core.lifecycle import BatchResult
from mountctl.models.status import MountState
from mountctl.utils.formatting import print_info, print_warning

NameArgument = Annotated[str, typer.Argument(help="Mount name.")]
OptionalNameArgument = Annotated[
    str | None, typer.Argument(help="Mount name. Omit when using --all.", show_default=False)
]
AllOption = Annotated[
    bool,
    typer.Option("--all", "-a", help="Apply to every mount in the definition directory."),
]


def _single_or_all(name: str | None, all_mounts: bool) -> None:
    if all_mounts == (name is not None):
        raise typer.BadParameter("Give either a mount name or --all.")


def _finish_batch(ctx: typer.Context, batch: BatchResult) -> None:
    print_batch_result(batch, quiet=is_quiet(ctx))
    for name, error in batch.failures:
        print_warning(f"{name}:")
        report_error(error)
    if not batch.success:
        raise typer.Exit(code=1)


def activate(
    ctx: typer.Context,
    name: OptionalNameArgument = None,
    all_mounts: AllOption = False,
    enable: Annotated[
        bool,
        typer.Option("--enable", "-e", help="Also start the mount at boot."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Create a missing target directory without asking."),
    ] = False,
) -> None:
    """Install and start a mount, or every defined mount with --all.

    The definition is copied into the systemd unit directory only when it
    is missing or differs, and systemd is reloaded only after a change.
    If the target directory is missing you are offered to create it.
    With --all, systemd is reloaded once for the whole batch and missing
    target directories are only created when --yes is given.

    Examples:
        mountctl activate nas1
        mountctl activate nas1 --enable
        mountctl activate --all --yes
    """
    _single_or_all(name, all_mounts)
    context = get_context(ctx)
    lifecycle = context.lifecycle

    if name is None:
        names = context.definitions.names()
        if yes:
            _create_missing_targets(context, names)
        _finish_batch(ctx, lifecycle.activate_all(names, enable_at_boot=enable))
        return

    with exit_on_error():
        try:
            result = lifecycle.activate(name, enable_at_boot=enable)
        except MissingTarget as e:
            print_warning(e.message)
            if not yes and not typer.confirm(f"Create {e.target} now?", default=False):
                print_info("Aborted. Create the directory and run activate again.")
                raise typer.Exit(code=1) from e
            lifecycle.create_target_dir(name)
            result = lifecycle.activate(name, enable_at_boot=enable)

    print_operation_result(result, quiet=is_quiet(ctx))


def _create_missing_targets(context: MountContext, names: list[str]) -> None:
    """Create the target directory of each listed mount that lacks one."""
    for name in names:
        try:
            if context.reconciler.compute_status(name).state == MountState.MISSING_TARGET:
                context.lifecycle.create_target_dir(name)
        except MountctlError as e:
            # activate_all reports the mount again as failed
            print_warning(e.message)


def deactivate(
    ctx: typer.Context,
    name: OptionalNameArgument = None,
    all_mounts: AllOption = False,
) -> None:
    """Stop, disable and uninstall a mount and its automount.

    Refuses to touch anything while the mount point has open files. With
    --all every defined mount is deactivated and systemd is reloaded once;
    busy mounts are skipped and reported.
    """
    _single_or_all(name, all_mounts)
    context = get_context(ctx)
    if name is None:
        _finish_batch(ctx, context.lifecycle.deactivate_all(context.definitions.names()))
        return

    with exit_on_error():
        result = context.lifecycle.deactivate(name)
    print_operation_result(result, quiet=is_quiet(ctx))


def enable(ctx: typer.Context, name: NameArgument) -> None:
    """Start an installed mount at boot (does not start it now)."""
    context = get_context(ctx)
    with exit_on_error():
        result = context.lifecycle.enable_at_boot(name)
    print_operation_result(result, quiet=is_quiet(ctx))


def disable(ctx: typer.Context, name: NameArgument) -> None:
    """Stop starting an installed mount at boot (does not stop it now)."""
    context = get_context(ctx)
    with exit_on_error():
        result = context.lifecycle.disable_at_boot(name)
    print_operation_result(result, quiet=is_quiet(ctx))


def automount(ctx: typer.Context, name: NameArgument) -> None:
    """Mount on first access through a companion automount unit."""
    context = get_context(ctx)
    with exit_on_error():
        result = context.lifecycle.create_automount(name)
    print_operation_result(result, quiet=is_quiet(ctx))


def repair(ctx: typer.Context, name: NameArgument) -> None:
    """Re-validate a definition after editing it."""
    context = get_context(ctx)
    with exit_on_error():
        result = context.lifecycle.repair(name)
    print_operation_result(result, quiet=is_quiet(ctx))


def mkdir(ctx: typer.Context, name: NameArgument) -> None:
    """Create the target directory of a mount."""
    context = get_context(ctx)
    with exit_on_error():
        result = context.lifecycle.create_target_dir(name)
    print_operation_result(result, quiet=is_quiet(ctx))
