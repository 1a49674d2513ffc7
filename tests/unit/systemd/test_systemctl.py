"""Unit tests for the systemctl-backed init-system manager."""

import subprocess
from unittest.mock import patch

from mountctl.systemd.systemctl import SystemctlManager
from mountctl.utils.shell import CommandResult


class TestSystemctlManager:
    """Tests for SystemctlManager."""

    def test_is_active(self) -> None:
        """is_active maps the exit code of is-active --quiet."""
        manager = SystemctlManager()
        with patch("mountctl.systemd.systemctl.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)

            assert manager.is_active("nas1.mount") is True

        mock_run.assert_called_once_with(
            ["systemctl", "is-active", "--quiet", "nas1.mount"], timeout=30.0
        )

    def test_is_enabled_false(self) -> None:
        """A non-zero exit means not enabled."""
        manager = SystemctlManager()
        with patch("mountctl.systemd.systemctl.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=1)

            assert manager.is_enabled("nas1.mount") is False

    def test_start_has_no_timeout(self) -> None:
        """Mutating calls block until systemctl returns."""
        manager = SystemctlManager()
        with patch("mountctl.systemd.systemctl.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)

            result = manager.start("nas1.mount")

        assert result.success
        mock_run.assert_called_once_with(["systemctl", "start", "nas1.mount"], timeout=None)

    def test_failure_keeps_diagnostic(self) -> None:
        """The stderr of a failed call is returned to the caller."""
        manager = SystemctlManager()
        with patch("mountctl.systemd.systemctl.run_command") as mock_run:
            mock_run.return_value = CommandResult(
                stdout="",
                stderr="Job for nas1.mount failed.",
                returncode=1,
            )

            result = manager.stop("nas1.mount")

        assert not result.success
        assert "Job for nas1.mount failed." in result.output

    def test_reload(self) -> None:
        """reload runs daemon-reload."""
        manager = SystemctlManager()
        with patch("mountctl.systemd.systemctl.run_command") as mock_run:
            mock_run.return_value = CommandResult(stdout="", stderr="", returncode=0)

            manager.reload()

        mock_run.assert_called_once_with(["systemctl", "daemon-reload"], timeout=None)

    def test_missing_binary(self) -> None:
        """A missing systemctl becomes a failed result, not an exception."""
        manager = SystemctlManager()
        with patch("mountctl.systemd.systemctl.run_command", side_effect=FileNotFoundError):
            result = manager.enable("nas1.mount")

        assert result.returncode == 127
        assert "not found" in result.stderr

    def test_timeout(self) -> None:
        """A query that times out reports inactive."""
        manager = SystemctlManager()
        error = subprocess.TimeoutExpired(cmd="systemctl", timeout=30.0)
        with patch("mountctl.systemd.systemctl.run_command", side_effect=error):
            assert manager.is_active("nas1.mount") is False

    def test_status_text_ignores_exit_code(self) -> None:
        """status output is returned even for inactive units."""
        manager = SystemctlManager()
        with patch("mountctl.systemd.systemctl.run_command") as mock_run:
            mock_run.return_value = CommandResult(
                stdout="○ nas1.mount - Mount for /custom-mounts/nas1",
                stderr="",
                returncode=3,
            )

            text = manager.status_text("nas1.mount")

        assert "Mount for /custom-mounts/nas1" in text

    def test_is_available(self) -> None:
        """Availability is a PATH lookup."""
        with patch("mountctl.systemd.systemctl.command_exists", return_value=False):
            assert SystemctlManager().is_available() is False
