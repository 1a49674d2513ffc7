"""Unit tests for path helpers."""

from pathlib import Path

import pytest
from mountctl.core.errors import DirectoryCreateFailed
from mountctl.core.paths import (
    ensure_dir,
    get_action_log_path,
    get_config_path,
    get_default_definitions_dir,
)


class TestPaths:
    """Tests for XDG-aware path helpers."""

    def test_config_path_xdg(self, tmp_path: Path) -> None:
        """The config file lives in XDG_CONFIG_HOME/mountctl."""
        assert get_config_path() == tmp_path / "xdg-config" / "mountctl" / "config.toml"

    def test_config_path_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """$MOUNTCTL_CONFIG wins over XDG."""
        monkeypatch.setenv("MOUNTCTL_CONFIG", "/etc/mountctl/config.toml")

        assert get_config_path() == Path("/etc/mountctl/config.toml")

    def test_home_fallback(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Without XDG variables the home directory is used."""
        monkeypatch.delenv("XDG_CONFIG_HOME")
        monkeypatch.delenv("XDG_STATE_HOME")
        monkeypatch.setenv("HOME", str(tmp_path))

        assert get_default_definitions_dir() == tmp_path / ".config" / "mountctl" / "units"
        assert get_action_log_path() == tmp_path / ".local" / "state" / "mountctl" / "actions.jsonl"

    def test_ensure_dir(self, tmp_path: Path) -> None:
        """ensure_dir creates nested directories."""
        target = tmp_path / "a" / "b"

        assert ensure_dir(target, "test") == target
        assert target.is_dir()

    def test_ensure_dir_failure(self, tmp_path: Path) -> None:
        """Failures raise DirectoryCreateFailed."""
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(DirectoryCreateFailed, match="mount base"):
            ensure_dir(blocker / "sub", "mount base")
