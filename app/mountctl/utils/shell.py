"""Subprocess helpers for the systemctl and fuser wrappers.

Commands run with a C locale so their diagnostics are stable, and the
result keeps stdout and stderr apart for callers that parse one of them.
"""

import os
import shutil
import subprocess
from dataclasses import dataclass

# systemctl and fuser must neither page nor colorize captured output
COMMAND_ENV: dict[str, str] = {
    "LC_ALL": "C",
    "SYSTEMD_PAGER": "",
    "SYSTEMD_COLORS": "0",
}


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined diagnostic text, stderr first."""
        return "\n".join(part for part in (self.stderr.strip(), self.stdout.strip()) if part)


def run_command(args: list[str], *, timeout: float | None = 60.0) -> CommandResult:
    """Execute a command and capture its output.

    A non-zero exit status is not an error here; callers inspect
    ``returncode`` and turn failures into their own exceptions.

    Args:
        args: Command and arguments to execute.
        timeout: Maximum time in seconds to wait for the command.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.TimeoutExpired: If the command exceeds the timeout.
        FileNotFoundError: If the executable is not found.
    """
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
        env={**os.environ, **COMMAND_ENV},
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH."""
    return shutil.which(name) is not None
