"""Unit tests for context wiring."""

from pathlib import Path

from mountctl.core.config import MountctlConfig
from mountctl.core.context import build_context
from mountctl.systemd.probe import FuserProbe
from mountctl.systemd.systemctl import SystemctlManager


class TestBuildContext:
    """Tests for build_context."""

    def test_defaults_to_systemd(self, tmp_path: Path) -> None:
        """Without overrides the real collaborators are used."""
        config = MountctlConfig(
            definitions_dir=tmp_path / "units",
            systemd_dir=tmp_path / "systemd",
        )

        context = build_context(config)

        assert isinstance(context.system, SystemctlManager)
        assert isinstance(context.probe, FuserProbe)
        assert context.definitions.directory == tmp_path / "units"
        assert context.installed.directory == tmp_path / "systemd"
        assert context.credentials.root == tmp_path / "units"

    def test_credentials_dir_override(self, tmp_path: Path) -> None:
        """A configured credential directory is honoured."""
        config = MountctlConfig(
            definitions_dir=tmp_path / "units",
            credentials_dir=tmp_path / "creds",
            action_log=tmp_path / "log.jsonl",
        )

        context = build_context(config, tmp_path / "config.toml")

        assert context.credentials.root == tmp_path / "creds"
        assert context.action_log.path == tmp_path / "log.jsonl"
        assert context.config_path == tmp_path / "config.toml"
