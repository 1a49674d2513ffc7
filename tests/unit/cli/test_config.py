"""Unit tests for the config command group."""

import json
from pathlib import Path

from mountctl.cli.main import app
from mountctl.core.config import load_config
from mountctl.core.context import MountContext
from mountctl.models.history import OperationType
from typer.testing import CliRunner

runner = CliRunner()


def invoke(context: MountContext, *args: str):
    """Run the app with a prepared context."""
    return runner.invoke(app, list(args), obj={"context": context})


class TestConfigShow:
    """Tests for mountctl config show."""

    def test_table(self, mount_context: MountContext) -> None:
        """Every key is listed."""
        result = invoke(mount_context, "config", "show")

        assert result.exit_code == 0
        assert "definitions_dir" in result.output
        assert "action_log" in result.output

    def test_json(self, mount_context: MountContext) -> None:
        """Effective values are printed, with defaults resolved."""
        result = invoke(mount_context, "config", "show", "--format", "json")

        assert result.exit_code == 0
        data = json.loads(result.output)
        config = mount_context.config
        assert data["mount_base"] == str(config.mount_base)
        assert data["credentials_dir"] == str(config.definitions_dir)


class TestConfigSet:
    """Tests for mountctl config set."""

    def test_set_and_create(self, mount_context: MountContext, tmp_path: Path) -> None:
        """The value is saved and the directory created on request."""
        new_base = tmp_path / "net"

        result = invoke(mount_context, "config", "set", "mount_base", str(new_base), "--create")

        assert result.exit_code == 0
        assert new_base.is_dir()
        saved = load_config(mount_context.config_path)
        assert saved.mount_base == new_base
        assert saved.definitions_dir == mount_context.config.definitions_dir

    def test_missing_directory_warns(self, mount_context: MountContext, tmp_path: Path) -> None:
        """Without --create a missing directory is only warned about."""
        new_base = tmp_path / "net"

        result = invoke(mount_context, "config", "set", "mount_base", str(new_base))

        assert result.exit_code == 0
        assert "--create" in result.output
        assert not new_base.exists()

    def test_reset(self, mount_context: MountContext) -> None:
        """An empty value resets an optional key."""
        result = invoke(mount_context, "config", "set", "credentials_dir", "")

        assert result.exit_code == 0
        assert "default" in result.output
        assert load_config(mount_context.config_path).credentials_dir is None

    def test_unknown_key(self, mount_context: MountContext) -> None:
        """Unknown keys exit 1 and are logged as failures."""
        result = invoke(mount_context, "config", "set", "colour", "red")

        assert result.exit_code == 1
        assert "Unknown config key" in result.output
        entry = mount_context.action_log.entries()[0]
        assert entry.operation == OperationType.SET_CONFIG
        assert not entry.success

    def test_relative_path(self, mount_context: MountContext) -> None:
        """Relative directories are rejected."""
        result = invoke(mount_context, "config", "set", "systemd_dir", "relative/dir")

        assert result.exit_code == 1
        assert not mount_context.config_path.exists()
