"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from fakes import FakeProbe, FakeSystemManager
from mountctl.core.config import MountctlConfig
from mountctl.core.context import MountContext, build_context
from mountctl.models.definition import MountDefinition


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep every test away from the real config and state directories."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "xdg-state"))
    monkeypatch.delenv("MOUNTCTL_CONFIG", raising=False)


@pytest.fixture
def fake_system() -> FakeSystemManager:
    """Init system with nothing active or enabled."""
    return FakeSystemManager()


@pytest.fixture
def fake_probe() -> FakeProbe:
    """In-use probe reporting nothing busy."""
    return FakeProbe()


@pytest.fixture
def mount_config(tmp_path: Path) -> MountctlConfig:
    """Configuration rooted in the test's temporary directory."""
    return MountctlConfig(
        definitions_dir=tmp_path / "units",
        mount_base=tmp_path / "custom-mounts",
        systemd_dir=tmp_path / "systemd",
        action_log=tmp_path / "state" / "actions.jsonl",
    )


@pytest.fixture
def mount_context(
    tmp_path: Path,
    mount_config: MountctlConfig,
    fake_system: FakeSystemManager,
    fake_probe: FakeProbe,
) -> MountContext:
    """Fully wired context backed by the fakes."""
    mount_config.definitions_dir.mkdir(parents=True)
    mount_config.systemd_dir.mkdir(parents=True)
    mount_config.mount_base.mkdir(parents=True)
    return build_context(
        mount_config,
        tmp_path / "config.toml",
        system=fake_system,
        probe=fake_probe,
    )


@pytest.fixture
def nas1(mount_context: MountContext) -> MountDefinition:
    """Saved CIFS definition whose target directory exists."""
    definition = MountDefinition(
        name="nas1",
        what="//192.168.1.10/share",
        where=str(mount_context.config.mount_base / "nas1"),
        type="cifs",
        options="credentials=/root/.nas1.cred",
    )
    mount_context.definitions.save(definition)
    Path(definition.where).mkdir()
    return definition
