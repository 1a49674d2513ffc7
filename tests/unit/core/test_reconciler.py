"""Unit tests for status reconciliation."""

from pathlib import Path

import pytest
from fakes import FakeSystemManager
from mountctl.core.context import MountContext
from mountctl.core.errors import InvalidDefinition, InvalidName, UnknownMount
from mountctl.models.definition import MountDefinition
from mountctl.models.status import Modifier, MountState, Provenance


class TestComputeStatus:
    """Tests for Reconciler.compute_status."""

    def test_unknown(self, mount_context: MountContext) -> None:
        """A name with no definition and no installed unit is unknown."""
        with pytest.raises(UnknownMount):
            mount_context.reconciler.compute_status("ghost")

    def test_invalid_name(self, mount_context: MountContext) -> None:
        """Invalid names are rejected before any lookup."""
        with pytest.raises(InvalidName):
            mount_context.reconciler.compute_status("../etc/fstab")

    def test_defined_not_installed_is_inactive(
        self, mount_context: MountContext, nas1: MountDefinition
    ) -> None:
        """A valid definition that was never activated is inactive."""
        status = mount_context.reconciler.compute_status("nas1")

        assert status.state == MountState.INACTIVE
        assert not status.installed
        assert status.modifiers == frozenset()

    def test_active(
        self,
        mount_context: MountContext,
        nas1: MountDefinition,
        fake_system: FakeSystemManager,
    ) -> None:
        """The init system's active flag gives the active state."""
        mount_context.installed.install_mount("nas1", nas1.render())
        fake_system.active.add("nas1.mount")

        status = mount_context.reconciler.compute_status("nas1")

        assert status.state == MountState.ACTIVE
        assert status.installed
        assert not status.drifted

    def test_missing_target(self, mount_context: MountContext) -> None:
        """A missing Where= directory is reported before activity."""
        where = str(mount_context.config.mount_base / "nas2")
        mount_context.definitions.save(MountDefinition(name="nas2", what="//h/s", where=where))

        status = mount_context.reconciler.compute_status("nas2")

        assert status.state == MountState.MISSING_TARGET
        assert status.where == where

    def test_invalid_definition_wins(
        self, mount_context: MountContext, fake_system: FakeSystemManager
    ) -> None:
        """Invalid definitions are reported even when the unit is active."""
        path = mount_context.definitions.path_for("broken")
        path.write_text("[Mount]\nWhat=/dev/sdb1\n")
        fake_system.active.add("broken.mount")

        status = mount_context.reconciler.compute_status("broken")

        assert status.state == MountState.INVALID_DEFINITION
        assert "Where= is missing or empty" in status.problems

    def test_unparseable_definition(self, mount_context: MountContext) -> None:
        """Text that is not a unit file is an invalid definition."""
        mount_context.definitions.path_for("junk").write_text("just some words\n")

        status = mount_context.reconciler.compute_status("junk")

        assert status.state == MountState.INVALID_DEFINITION
        assert status.problems

    def test_hand_edited_reserved_target(self, mount_context: MountContext) -> None:
        """A definition pointing at /home is invalid."""
        mount_context.definitions.path_for("home").write_text(
            "[Mount]\nWhat=/dev/sdb1\nWhere=/home\n"
        )

        status = mount_context.reconciler.compute_status("home")

        assert status.state == MountState.INVALID_DEFINITION

    def test_modifiers(
        self,
        mount_context: MountContext,
        nas1: MountDefinition,
        fake_system: FakeSystemManager,
    ) -> None:
        """startup-enabled and on-demand are computed independently."""
        mount_context.installed.install_mount("nas1", nas1.render())
        mount_context.installed.install_automount("nas1", nas1.render_automount())
        fake_system.enabled.update({"nas1.mount", "nas1.automount"})

        status = mount_context.reconciler.compute_status("nas1")

        assert status.state == MountState.INACTIVE
        assert status.modifiers == {Modifier.STARTUP_ENABLED, Modifier.ON_DEMAND}

    def test_automount_not_running_is_not_on_demand(
        self,
        mount_context: MountContext,
        nas1: MountDefinition,
    ) -> None:
        """An installed but disabled and inactive automount adds nothing."""
        mount_context.installed.install_automount("nas1", nas1.render_automount())

        status = mount_context.reconciler.compute_status("nas1")

        assert Modifier.ON_DEMAND not in status.modifiers

    def test_drift(self, mount_context: MountContext, nas1: MountDefinition) -> None:
        """An installed unit that differs from the definition is drifted."""
        mount_context.installed.install_mount("nas1", nas1.render().replace("cifs", "smb3"))

        assert mount_context.reconciler.compute_status("nas1").drifted

    def test_undecodable_installed_unit(self, mount_context: MountContext) -> None:
        """A system-only unit that is not UTF-8 is reported as invalid."""
        path = mount_context.installed.mount_path("hand")
        path.write_bytes(b"[Mount]\nWhat=/dev/sdc1\nWhere=/srv/d\xe9p\xf4t\n")

        status = mount_context.reconciler.compute_status("hand")

        assert status.state == MountState.INVALID_DEFINITION
        assert status.installed
        assert "Cannot read installed unit" in status.problems[0]

    def test_undecodable_installed_copy_of_definition(
        self, mount_context: MountContext, nas1: MountDefinition
    ) -> None:
        """A defined mount whose installed copy is unreadable counts as installed and drifted."""
        mount_context.installed.mount_path("nas1").write_bytes(b"\xff\xfe")

        resolved = mount_context.reconciler.resolve("nas1")

        assert resolved.installed
        assert resolved.drifted
        assert resolved.installed_error is not None
        assert resolved.problems == ()


class TestResolve:
    """Tests for Reconciler.resolve."""

    def test_system_only(self, mount_context: MountContext, tmp_path: Path) -> None:
        """An installed unit without definition is resolved from the unit itself."""
        target = tmp_path / "legacy-target"
        target.mkdir()
        mount_context.installed.install_mount(
            "legacy", f"[Mount]\nWhat=/dev/sdc1\nWhere={target}\n"
        )

        resolved = mount_context.reconciler.resolve("legacy")

        assert resolved.provenance == Provenance.SYSTEM_ONLY
        assert resolved.where == str(target)
        assert not resolved.drifted
        assert resolved.problems == ()

    def test_require_valid(self, mount_context: MountContext) -> None:
        """require_valid raises with the problems attached."""
        mount_context.definitions.path_for("broken").write_text("[Mount]\nWhere=/data/x\n")

        resolved = mount_context.reconciler.resolve("broken")

        with pytest.raises(InvalidDefinition) as exc_info:
            resolved.require_valid()
        assert exc_info.value.problems == ["What= is missing or empty"]
