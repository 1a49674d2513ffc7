"""Unit tests for shell execution utilities."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest
from mountctl.utils.shell import CommandResult, command_exists, run_command


class TestCommandResult:
    """Tests for CommandResult."""

    def test_success(self) -> None:
        """Only exit code 0 is a success."""
        assert CommandResult(stdout="", stderr="", returncode=0).success
        assert not CommandResult(stdout="", stderr="", returncode=5).success

    def test_output_puts_stderr_first(self) -> None:
        """Diagnostics combine both streams, stderr first."""
        result = CommandResult(stdout="details\n", stderr="Job failed\n", returncode=1)

        assert result.output == "Job failed\ndetails"

    def test_output_skips_empty_streams(self) -> None:
        """Empty streams add no blank lines."""
        result = CommandResult(stdout="", stderr="  denied \n", returncode=1)

        assert result.output == "denied"


class TestRunCommand:
    """Tests for run_command."""

    @patch("mountctl.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """stdout, stderr and the exit code are returned."""
        mock_run.return_value = MagicMock(stdout="out", stderr="err", returncode=3)

        result = run_command(["systemctl", "start", "nas1.mount"])

        assert result == CommandResult(stdout="out", stderr="err", returncode=3)
        kwargs = mock_run.call_args.kwargs
        assert kwargs["capture_output"] is True
        assert kwargs["check"] is False

    @patch("mountctl.utils.shell.subprocess.run")
    def test_c_locale_without_pager(self, mock_run: MagicMock) -> None:
        """Commands run with a C locale and no pager on top of the inherited env."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["systemctl", "status", "nas1.mount"])

        env = mock_run.call_args.kwargs["env"]
        assert env["LC_ALL"] == "C"
        assert env["SYSTEMD_PAGER"] == ""
        assert "PATH" in env

    @patch("mountctl.utils.shell.subprocess.run")
    def test_passes_timeout(self, mock_run: MagicMock) -> None:
        """The timeout reaches subprocess.run."""
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["fuser", "-vm", "/mnt"], timeout=5.0)

        assert mock_run.call_args.kwargs["timeout"] == 5.0

    @patch("mountctl.utils.shell.subprocess.run")
    def test_timeout_propagates(self, mock_run: MagicMock) -> None:
        """TimeoutExpired is left to the caller."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="fuser", timeout=5.0)

        with pytest.raises(subprocess.TimeoutExpired):
            run_command(["fuser", "-vm", "/mnt"], timeout=5.0)

    def test_missing_binary(self) -> None:
        """A missing executable raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            run_command(["mountctl-no-such-binary-xyz"])


class TestCommandExists:
    """Tests for command_exists."""

    @patch("mountctl.utils.shell.shutil.which", return_value="/usr/bin/systemctl")
    def test_found(self, mock_which: MagicMock) -> None:
        """A command on PATH exists."""
        assert command_exists("systemctl")
        mock_which.assert_called_once_with("systemctl")

    @patch("mountctl.utils.shell.shutil.which", return_value=None)
    def test_missing(self, mock_which: MagicMock) -> None:
        """A command not on PATH does not exist."""
        assert not command_exists("systemctl")
