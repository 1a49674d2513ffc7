"""In-use probe backed by fuser(1)."""

import logging
import os
import subprocess

from mountctl.systemd.base import InUseProbe
from mountctl.utils.shell import run_command

logger = logging.getLogger(__name__)


class FuserProbe(InUseProbe):
    """Detect open handles on a mounted filesystem with ``fuser -vm``.

    Only mountpoints are probed: ``fuser -m`` on a plain directory reports
    users of the enclosing filesystem (usually ``/``), and nothing can hold
    a filesystem open that is not mounted.

    When fuser itself cannot run, the probe reports a holder so that
    deactivation refuses rather than guessing.
    """

    _TIMEOUT: float = 30.0

    def __init__(self, binary: str = "fuser") -> None:
        self._binary = binary

    def holders(self, path: str) -> list[str]:
        """List processes holding files open under a mountpoint."""
        if not os.path.ismount(path):
            logger.debug("%s is not a mountpoint, nothing to probe", path)
            return []

        try:
            result = run_command([self._binary, "-vm", path], timeout=self._TIMEOUT)
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            logger.warning("In-use probe for %s failed: %s", path, e)
            return [f"cannot check open handles ({self._binary}: {e})"]

        # fuser exits 1 with nothing on stderr when no process uses the filesystem
        if result.returncode == 1 and not result.stderr.strip():
            return []
        if not result.success:
            detail = result.output or f"exit status {result.returncode}"
            logger.warning("In-use probe for %s failed: %s", path, detail)
            return [f"cannot check open handles ({self._binary}: {detail})"]

        # -v writes a "USER PID ACCESS COMMAND" table to stderr
        lines = [line.strip() for line in result.stderr.splitlines() if line.strip()]
        holders = [line for line in lines[1:] if not line.startswith(f"{path}:")]
        if holders:
            return holders
        return [pid for pid in result.stdout.split() if pid]
