"""systemd implementation of the init-system interface.

Shells out to systemctl. Mutating calls run without a timeout of our own:
they block until systemctl returns, and its failure text travels back to
the caller as the diagnostic of the operation error.
"""

import logging
import subprocess

from mountctl.systemd.base import SystemManager
from mountctl.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)


class SystemctlManager(SystemManager):
    """Init-system access through the systemctl binary.

    Attributes:
        binary: systemctl executable name or path.
    """

    # Timeout for read-only queries
    _QUERY_TIMEOUT: float = 30.0

    def __init__(self, binary: str = "systemctl") -> None:
        self._binary = binary

    def is_available(self) -> bool:
        """Check if systemctl is available."""
        return command_exists(self._binary)

    def is_active(self, unit: str) -> bool:
        """Check if a unit is active via ``systemctl is-active``."""
        return self._run(["is-active", "--quiet", unit], timeout=self._QUERY_TIMEOUT).success

    def is_enabled(self, unit: str) -> bool:
        """Check if a unit is enabled via ``systemctl is-enabled``."""
        return self._run(["is-enabled", "--quiet", unit], timeout=self._QUERY_TIMEOUT).success

    def start(self, unit: str) -> CommandResult:
        """Start a unit."""
        return self._mutate("start", unit)

    def stop(self, unit: str) -> CommandResult:
        """Stop a unit."""
        return self._mutate("stop", unit)

    def enable(self, unit: str) -> CommandResult:
        """Enable a unit at boot."""
        return self._mutate("enable", unit)

    def disable(self, unit: str) -> CommandResult:
        """Disable a unit at boot."""
        return self._mutate("disable", unit)

    def reload(self) -> CommandResult:
        """Run ``systemctl daemon-reload``."""
        logger.info("Reloading systemd unit files")
        return self._run(["daemon-reload"], timeout=None)

    def status_text(self, unit: str) -> str:
        """Return ``systemctl status`` output for a unit.

        The command exits non-zero for inactive units, so the output is
        returned regardless of the exit code.
        """
        result = self._run(
            ["status", "--no-pager", "--full", "--lines=10", unit],
            timeout=self._QUERY_TIMEOUT,
        )
        return result.output

    def _mutate(self, verb: str, unit: str) -> CommandResult:
        logger.info("systemctl %s %s", verb, unit)
        result = self._run([verb, unit], timeout=None)
        if not result.success:
            logger.warning(
                "systemctl %s %s failed (rc=%d): %s",
                verb,
                unit,
                result.returncode,
                result.stderr.strip(),
            )
        return result

    def _run(self, args: list[str], timeout: float | None) -> CommandResult:
        try:
            return run_command([self._binary, *args], timeout=timeout)
        except FileNotFoundError:
            return CommandResult(stdout="", stderr=f"{self._binary}: command not found", returncode=127)
        except subprocess.TimeoutExpired as e:
            return CommandResult(stdout="", stderr=f"{self._binary} timed out: {e}", returncode=124)
