"""Credential commands.

This module provides `mountctl credential ...` for writing and
inspecting the per-mount credential files. Passwords are read from a
hidden prompt and are never printed back.
"""

from typing import Annotated

import typer
from rich.table import Table

from mountctl.cli.types import exit_on_error, get_context
from mountctl.models.credential import CredentialKind
from mountctl.models.history import OperationType
from mountctl.utils.formatting import console, print_info, print_success, print_warning

app = typer.Typer(
    help="Manage SMB and NFS credential files.",
    no_args_is_help=True,
)

PASSWORD_MASK = "********"


@app.command()
def smb(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Credential name (usually the mount name).")],
    username: Annotated[
        str | None,
        typer.Option("--username", "-u", help="SMB user name. Prompted if omitted."),
    ] = None,
    password: Annotated[
        str | None,
        typer.Option(
            "--password",
            help="SMB password. Prompted without echo if omitted.",
            show_default=False,
        ),
    ] = None,
) -> None:
    """Create or replace an SMB credential file (mode 600)."""
    context = get_context(ctx)
    with exit_on_error():
        current = context.credentials.read_credential_meta(name)

    if username is None:
        username = typer.prompt("Username", default=current.username or None)
    if password is None:
        if current.exists and current.kind == CredentialKind.SMB:
            print_info(f"Current password: {PASSWORD_MASK}")
        password = typer.prompt("Password", hide_input=True, confirmation_prompt=True)

    with exit_on_error(), context.action_log.recording(
        OperationType.WRITE_CREDENTIAL, name, "smb"
    ):
        path = context.credentials.write_smb_credential(name, username, password)
    print_success(f"Wrote {path}")
    print_info(f"Reference it from the mount options with credentials={path}")


@app.command()
def nfs(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Credential name (usually the mount name).")],
    options: Annotated[
        str,
        typer.Option("--options", "-o", help="NFS option text stored in the file."),
    ],
) -> None:
    """Create or replace an NFS option file (mode 600)."""
    context = get_context(ctx)
    with exit_on_error(), context.action_log.recording(
        OperationType.WRITE_CREDENTIAL, name, "nfs"
    ):
        path = context.credentials.write_nfs_credential(name, options)
    print_success(f"Wrote {path}")


@app.command()
def show(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Credential name.")],
) -> None:
    """Show a credential file's kind, permissions and user name."""
    context = get_context(ctx)
    with exit_on_error():
        meta = context.credentials.read_credential_meta(name)

    if not meta.exists:
        print_info(f"No credential file at {meta.path}")
        raise typer.Exit(code=1)

    table = Table(title=f"Credential {name}", show_header=False, border_style="border")
    table.add_column("Field", style="bold_header", no_wrap=True)
    table.add_column("Value")
    table.add_row("Path", meta.path)
    table.add_row("Kind", meta.kind.value if meta.kind else "-")
    table.add_row("Mode", meta.mode_octal)
    if meta.kind == CredentialKind.SMB:
        table.add_row("Username", meta.username or "-")
        table.add_row("Password", PASSWORD_MASK)
    console.print(table)

    if not meta.is_restricted:
        print_warning(f"{meta.path} is readable by other users (mode {meta.mode_octal})")


@app.command("list")
def list_credentials(ctx: typer.Context) -> None:
    """List credential files in the credential directory."""
    context = get_context(ctx)
    names = context.credentials.list_credentials()
    if not names:
        print_info(f"No credential files in {context.credentials.root}")
        return
    for entry in names:
        console.print(entry)


@app.command()
def delete(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Credential name.")],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete a credential file."""
    context = get_context(ctx)
    if not yes and not typer.confirm(f"Delete credential '{name}'?", default=False):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    with exit_on_error(), context.action_log.recording(OperationType.DELETE_CREDENTIAL, name):
        path = context.credentials.delete_credential(name)
    print_success(f"Deleted {path}")
