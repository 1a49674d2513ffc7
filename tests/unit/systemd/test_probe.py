"""Unit tests for the fuser-backed in-use probe."""

import subprocess
from unittest.mock import patch

from mountctl.systemd.probe import FuserProbe
from mountctl.utils.shell import CommandResult

FUSER_STDERR = """                     USER        PID ACCESS COMMAND
/custom-mounts/nas1: root     kernel mount /custom-mounts/nas1
                     alice      4242 ..c.. bash
"""


class TestFuserProbe:
    """Tests for FuserProbe."""

    def test_not_a_mountpoint(self) -> None:
        """Nothing mounted means nothing can be busy, and fuser is not run."""
        with (
            patch("mountctl.systemd.probe.os.path.ismount", return_value=False),
            patch("mountctl.systemd.probe.run_command") as mock_run,
        ):
            assert FuserProbe().holders("/custom-mounts/nas1") == []

        mock_run.assert_not_called()

    def test_no_users(self) -> None:
        """fuser exits 1 when nobody uses the filesystem."""
        with (
            patch("mountctl.systemd.probe.os.path.ismount", return_value=True),
            patch("mountctl.systemd.probe.run_command") as mock_run,
        ):
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=1)

            assert FuserProbe().holders("/custom-mounts/nas1") == []

    def test_holders_parsed(self) -> None:
        """Holders come from the verbose table, without the kernel mount line."""
        with (
            patch("mountctl.systemd.probe.os.path.ismount", return_value=True),
            patch("mountctl.systemd.probe.run_command") as mock_run,
        ):
            mock_run.return_value = CommandResult(stdout=" 4242", stderr=FUSER_STDERR, returncode=0)

            probe = FuserProbe()
            holders = probe.holders("/custom-mounts/nas1")

        assert holders == ["alice      4242 ..c.. bash"]
        mock_run.assert_called_once_with(["fuser", "-vm", "/custom-mounts/nas1"], timeout=30.0)

    def test_missing_fuser_reports_busy(self) -> None:
        """Without fuser the probe refuses rather than guessing."""
        with (
            patch("mountctl.systemd.probe.os.path.ismount", return_value=True),
            patch("mountctl.systemd.probe.run_command", side_effect=FileNotFoundError("fuser")),
        ):
            probe = FuserProbe()

            assert probe.is_busy("/custom-mounts/nas1")

    def test_timeout_reports_busy(self) -> None:
        """A hanging fuser is treated as busy."""
        error = subprocess.TimeoutExpired(cmd="fuser", timeout=30.0)
        with (
            patch("mountctl.systemd.probe.os.path.ismount", return_value=True),
            patch("mountctl.systemd.probe.run_command", side_effect=error),
        ):
            assert len(FuserProbe().holders("/custom-mounts/nas1")) == 1

    def test_fuser_error_reports_busy(self) -> None:
        """A failing fuser run is reported as a holder instead of as idle."""
        with (
            patch("mountctl.systemd.probe.os.path.ismount", return_value=True),
            patch("mountctl.systemd.probe.run_command") as mock_run,
        ):
            mock_run.return_value = CommandResult(
                stdout="",
                stderr="Cannot stat file /proc/4242/fd/3: Permission denied",
                returncode=1,
            )

            holders = FuserProbe().holders("/custom-mounts/nas1")

        assert len(holders) == 1
        assert "Permission denied" in holders[0]

    def test_unexpected_exit_status_reports_busy(self) -> None:
        """Exit codes other than 0 and 1 never count as idle."""
        with (
            patch("mountctl.systemd.probe.os.path.ismount", return_value=True),
            patch("mountctl.systemd.probe.run_command") as mock_run,
        ):
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=2)

            assert FuserProbe().is_busy("/custom-mounts/nas1")
