"""Lifecycle operations for mount units.

Each operation is a short sequence of filesystem and init-system calls
with fixed preconditions. Failures leave the installed units as they were
found: written unit files are restored from a snapshot, stopped units are
started again. Unit file writes are skipped when the content is already
identical, and a daemon reload happens at most once per operation, only
when a unit file was actually added, changed or removed.
"""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field

from mountctl.core.errors import (
    ActivationFailed,
    AutomountActivationFailed,
    DeactivationFailed,
    DirectoryCreateFailed,
    DisableFailed,
    EnableFailed,
    InvalidDefinition,
    MissingTarget,
    MountctlError,
    ResourceBusy,
    StillInvalid,
    UnknownMount,
)
from mountctl.core.reconciler import Reconciler, ResolvedMount
from mountctl.core.state import ActionLog
from mountctl.models.definition import is_reserved_target, unit_where
from mountctl.models.history import OperationType
from mountctl.models.status import MountState, MountStatus
from mountctl.systemd.base import InUseProbe, SystemManager
from mountctl.units.installed import InstalledUnitStore, UnitSnapshot
from mountctl.utils.shell import CommandResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Outcome of a successful lifecycle operation.

    Attributes:
        operation: Operation that ran.
        name: Mount name.
        status: Status after the operation.
        changed: Whether anything on the system changed.
        reloaded: Whether the init system was reloaded.
        messages: Human-readable steps taken.
    """

    operation: OperationType
    name: str
    status: MountStatus
    changed: bool = False
    reloaded: bool = False
    messages: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Outcome of a lifecycle operation applied to several mounts.

    Attributes:
        operation: Operation that ran.
        results: Results of the mounts that succeeded, in input order.
        failures: Name and error of each mount that failed, in input order.
        reloaded: Whether the init system was reloaded.
    """

    operation: OperationType
    results: tuple[OperationResult, ...] = ()
    failures: tuple[tuple[str, MountctlError], ...] = ()
    reloaded: bool = False

    @property
    def success(self) -> bool:
        """Check if every mount succeeded."""
        return not self.failures


@dataclass(slots=True)
class _Staged:
    """A mount whose unit files are prepared but not yet reloaded."""

    name: str
    snapshot: UnitSnapshot
    messages: list[str] = field(default_factory=list)
    undo: list[Callable[[], CommandResult]] = field(default_factory=list)


class _UnitChanges:
    """Coalesces daemon reloads within one logical operation."""

    def __init__(self, system: SystemManager) -> None:
        self._system = system
        self._pending = False
        self.reloaded = False

    def mark(self, changed: bool) -> None:
        self._pending = self._pending or changed

    def flush(self) -> CommandResult | None:
        """Reload if any unit file changed since the last flush."""
        if not self._pending:
            return None
        self._pending = False
        self.reloaded = True
        return self._system.reload()


class LifecycleManager:
    """Drives the state transitions of mounts.

    Attributes:
        installed: Installed unit files.
        system: Init-system control.
        probe: Open-handle check used before deactivation.
        reconciler: Status computation.
        action_log: Optional log receiving one record per operation.
    """

    def __init__(
        self,
        installed: InstalledUnitStore,
        system: SystemManager,
        probe: InUseProbe,
        reconciler: Reconciler,
        action_log: ActionLog | None = None,
    ) -> None:
        self._installed = installed
        self._system = system
        self._probe = probe
        self._reconciler = reconciler
        self._action_log = action_log

    # === Public operations ===

    def activate(self, name: str, enable_at_boot: bool = False) -> OperationResult:
        """Install (if needed) and start a mount unit.

        Args:
            name: Mount name.
            enable_at_boot: Also enable the unit at boot.

        Raises:
            UnknownMount: If the mount is neither defined nor installed.
            InvalidDefinition: If the definition fails validation.
            MissingTarget: If the Where= directory does not exist.
            ActivationFailed: If installing, reloading or starting fails.
            EnableFailed: If enabling at boot fails (the mount stays active).
        """
        return self._logged(
            OperationType.ACTIVATE, name, lambda: self._activate(name, enable_at_boot)
        )

    def deactivate(self, name: str) -> OperationResult:
        """Stop, disable and uninstall a mount and its automount.

        Raises:
            UnknownMount: If the mount is neither defined nor installed.
            ResourceBusy: If the target has open handles. Nothing is changed.
            DeactivationFailed: If stopping, disabling or removal fails.
        """
        return self._logged(OperationType.DEACTIVATE, name, lambda: self._deactivate(name))

    def activate_all(self, names: list[str], enable_at_boot: bool = False) -> BatchResult:
        """Activate several mounts with a single daemon reload.

        Every mount is validated and installed first, systemd is reloaded
        once, then each unit is started. A mount that fails does not stop
        the others; it is reported in the result and left as it was found.

        Args:
            names: Mount names, in the order to process them.
            enable_at_boot: Also enable each started unit at boot.
        """
        changes = _UnitChanges(self._system)
        failures: dict[str, MountctlError] = {}
        staged: list[_Staged] = []
        for name in names:
            try:
                staged.append(self._stage_activation(name, changes))
            except MountctlError as e:
                failures[name] = e

        try:
            self._reload_staged(changes, staged, ActivationFailed)
        except ActivationFailed as e:
            failures.update((s.name, e) for s in staged)
            staged = []

        results: dict[str, OperationResult] = {}
        for s in staged:
            try:
                results[s.name] = self._start_staged(s, changes, enable_at_boot)
            except MountctlError as e:
                failures[s.name] = e
        return self._batch(OperationType.ACTIVATE, names, results, failures, changes.reloaded)

    def deactivate_all(self, names: list[str]) -> BatchResult:
        """Deactivate several mounts with a single daemon reload.

        Each mount is checked for open handles, stopped, disabled and
        uninstalled; systemd is reloaded once at the end. A busy or failing
        mount is skipped and reported without affecting the others.
        """
        changes = _UnitChanges(self._system)
        failures: dict[str, MountctlError] = {}
        results: dict[str, OperationResult] = {}
        staged: list[_Staged] = []
        for name in names:
            try:
                s = self._stage_deactivation(name, changes)
            except MountctlError as e:
                failures[name] = e
                continue
            if s is None:
                results[name] = self._nothing_to_deactivate(name)
            else:
                staged.append(s)

        try:
            self._reload_staged(changes, staged, DeactivationFailed)
        except DeactivationFailed as e:
            failures.update((s.name, e) for s in staged)
            staged = []

        for s in staged:
            results[s.name] = self._deactivated(s, changes)
        return self._batch(OperationType.DEACTIVATE, names, results, failures, changes.reloaded)

    def create_target_dir(self, name: str) -> OperationResult:
        """Create the Where= directory of a mount (``mkdir -p``).

        Raises:
            UnknownMount: If the mount is neither defined nor installed.
            InvalidDefinition: If the definition fails validation.
            DirectoryCreateFailed: If the directory cannot be created.
        """
        return self._logged(
            OperationType.CREATE_TARGET_DIR, name, lambda: self._create_target_dir(name)
        )

    def repair(self, name: str) -> OperationResult:
        """Re-validate a definition after it was edited.

        Raises:
            UnknownMount: If the mount is neither defined nor installed.
            StillInvalid: If the definition still fails validation.
        """
        return self._logged(OperationType.REPAIR, name, lambda: self._repair(name))

    def create_automount(self, name: str) -> OperationResult:
        """Install, enable and start a companion automount unit.

        Raises:
            UnknownMount: If the mount is neither defined nor installed.
            InvalidDefinition: If the definition fails validation.
            AutomountActivationFailed: If the automount does not become active.
        """
        return self._logged(
            OperationType.CREATE_AUTOMOUNT, name, lambda: self._create_automount(name)
        )

    def enable_at_boot(self, name: str) -> OperationResult:
        """Enable an installed mount unit at boot without starting it.

        Raises:
            UnknownMount: If the mount is neither defined nor installed.
            EnableFailed: If the unit is not installed or enabling fails.
        """
        return self._logged(
            OperationType.ENABLE_AT_BOOT, name, lambda: self._toggle_boot(name, enable=True)
        )

    def disable_at_boot(self, name: str) -> OperationResult:
        """Disable an installed mount unit at boot without stopping it.

        Raises:
            UnknownMount: If the mount is neither defined nor installed.
            DisableFailed: If the unit is not installed or disabling fails.
        """
        return self._logged(
            OperationType.DISABLE_AT_BOOT, name, lambda: self._toggle_boot(name, enable=False)
        )

    # === Operation bodies ===

    def _activate(self, name: str, enable_at_boot: bool) -> OperationResult:
        changes = _UnitChanges(self._system)
        staged = self._stage_activation(name, changes)
        self._reload_staged(changes, [staged], ActivationFailed)
        return self._start_staged(staged, changes, enable_at_boot)

    def _stage_activation(self, name: str, changes: _UnitChanges) -> _Staged:
        """Validate a mount and install its unit, leaving the reload to the caller."""
        resolved = self._reconciler.resolve(name)
        definition = resolved.require_valid()
        if not os.path.isdir(definition.where):
            msg = f"Target directory {definition.where} does not exist"
            raise MissingTarget(msg, definition.where)

        staged = _Staged(name, self._installed.snapshot(name))
        if resolved.is_defined:
            try:
                copied = self._installed.install_mount(name, resolved.source_text)
            except OSError as e:
                self._restore(staged.snapshot)
                msg = f"Cannot install {definition.unit_name} into {self._installed.directory}"
                raise ActivationFailed(msg, str(e)) from e
            changes.mark(copied)
            if copied:
                staged.messages.append(f"Installed {self._installed.mount_path(name)}")
        return staged

    def _start_staged(
        self, staged: _Staged, changes: _UnitChanges, enable_at_boot: bool
    ) -> OperationResult:
        unit = f"{staged.name}.mount"
        result = self._system.start(unit)
        if not result.success:
            diagnostic = "\n".join(p for p in (result.output, self._system.status_text(unit)) if p)
            self._restore(staged.snapshot)
            raise ActivationFailed(f"Failed to start {unit}", diagnostic)
        staged.messages.append(f"Started {unit}")

        if enable_at_boot:
            enabled = self._system.enable(unit)
            if not enabled.success:
                raise EnableFailed(f"Failed to enable {unit} at boot", enabled.output)
            staged.messages.append(f"Enabled {unit} at boot")

        return OperationResult(
            operation=OperationType.ACTIVATE,
            name=staged.name,
            status=self._reconciler.compute_status(staged.name),
            changed=True,
            reloaded=changes.reloaded,
            messages=tuple(staged.messages),
        )

    def _deactivate(self, name: str) -> OperationResult:
        changes = _UnitChanges(self._system)
        staged = self._stage_deactivation(name, changes)
        if staged is None:
            return self._nothing_to_deactivate(name)
        self._reload_staged(changes, [staged], DeactivationFailed)
        return self._deactivated(staged, changes)

    def _stage_deactivation(self, name: str, changes: _UnitChanges) -> _Staged | None:
        """Stop, disable and uninstall a mount, leaving the reload to the caller.

        Returns:
            The staged mount, or None if nothing is installed or running.
        """
        resolved = self._reconciler.resolve(name)
        mount_unit = f"{name}.mount"
        automount_unit = f"{name}.automount"

        mount_active = self._system.is_active(mount_unit)
        automount_active = resolved.has_automount and self._system.is_active(automount_unit)

        if not resolved.installed and not resolved.has_automount and not mount_active:
            return None

        for where in self._busy_targets(resolved):
            holders = self._probe.holders(where)
            if holders:
                msg = f"{where} is in use, refusing to deactivate {name}"
                raise ResourceBusy(msg, "\n".join(holders))

        staged = _Staged(name, self._installed.snapshot(name))
        units = [automount_unit, mount_unit] if resolved.has_automount else [mount_unit]
        was_active = {automount_unit: automount_active, mount_unit: mount_active}
        was_enabled = {unit: self._system.is_enabled(unit) for unit in units}

        for unit in units:
            stopped = self._system.stop(unit)
            if not stopped.success:
                self._compensate(staged.undo)
                raise DeactivationFailed(f"Failed to stop {unit}", stopped.output)
            if was_active[unit]:
                staged.undo.append(lambda u=unit: self._system.start(u))
                staged.messages.append(f"Stopped {unit}")

        for unit in units:
            if not was_enabled[unit]:
                continue
            disabled = self._system.disable(unit)
            if not disabled.success:
                self._compensate(staged.undo)
                raise DeactivationFailed(f"Failed to disable {unit}", disabled.output)
            staged.undo.append(lambda u=unit: self._system.enable(u))
            staged.messages.append(f"Disabled {unit}")

        try:
            removed = self._installed.remove(name)
        except OSError as e:
            self._restore(staged.snapshot)
            self._compensate(staged.undo)
            raise DeactivationFailed(f"Cannot remove installed units of {name}", str(e)) from e
        changes.mark(bool(removed))
        staged.messages.extend(f"Removed {path}" for path in removed)
        return staged

    def _busy_targets(self, resolved: ResolvedMount) -> list[str]:
        """Paths to check for open handles before deactivating.

        The installed units decide what is actually mounted; the definition
        is only consulted when no installed unit names a target.
        """
        targets: list[str] = []
        for text in (resolved.installed_text, self._installed.read_automount(resolved.name)):
            where = unit_where(text) if text else None
            if where and where not in targets:
                targets.append(where)
        if not targets and resolved.where is not None:
            targets.append(resolved.where)
        return targets

    def _deactivated(self, staged: _Staged, changes: _UnitChanges) -> OperationResult:
        return OperationResult(
            operation=OperationType.DEACTIVATE,
            name=staged.name,
            status=self._status_after_removal(staged.name),
            changed=True,
            reloaded=changes.reloaded,
            messages=tuple(staged.messages),
        )

    def _nothing_to_deactivate(self, name: str) -> OperationResult:
        return OperationResult(
            operation=OperationType.DEACTIVATE,
            name=name,
            status=self._reconciler.compute_status(name),
            messages=(f"{name}.mount is not installed, nothing to do",),
        )

    def _create_target_dir(self, name: str) -> OperationResult:
        resolved = self._reconciler.resolve(name)
        definition = resolved.require_valid()
        target = definition.where

        if is_reserved_target(target):
            msg = f"Refusing to create reserved system path {target}"
            raise InvalidDefinition(msg, [msg])

        if os.path.isdir(target):
            return OperationResult(
                operation=OperationType.CREATE_TARGET_DIR,
                name=name,
                status=self._reconciler.compute_status(name),
                messages=(f"{target} already exists",),
            )

        try:
            os.makedirs(target, exist_ok=True)
        except OSError as e:
            raise DirectoryCreateFailed(f"Cannot create target directory {target}", str(e)) from e

        return OperationResult(
            operation=OperationType.CREATE_TARGET_DIR,
            name=name,
            status=self._reconciler.compute_status(name),
            changed=True,
            messages=(f"Created {target}",),
        )

    def _repair(self, name: str) -> OperationResult:
        resolved = self._reconciler.resolve(name)
        if resolved.problems:
            msg = f"Definition for '{name}' is still invalid: {'; '.join(resolved.problems)}"
            raise StillInvalid(msg, list(resolved.problems))
        return OperationResult(
            operation=OperationType.REPAIR,
            name=name,
            status=self._reconciler.status_of(resolved),
            messages=(f"Definition for '{name}' is valid",),
        )

    def _create_automount(self, name: str) -> OperationResult:
        resolved = self._reconciler.resolve(name)
        definition = resolved.require_valid()
        unit = definition.automount_unit_name

        changes = _UnitChanges(self._system)
        snapshot = self._installed.snapshot(name)
        messages: list[str] = []

        try:
            if resolved.is_defined:
                changes.mark(self._installed.install_mount(name, resolved.source_text))
            written = self._installed.install_automount(name, definition.render_automount())
        except OSError as e:
            self._restore(snapshot)
            raise AutomountActivationFailed(f"Cannot install {unit}", str(e)) from e
        changes.mark(written)
        if written:
            messages.append(f"Installed {self._installed.automount_path(name)}")

        reload = changes.flush()
        if reload is not None and not reload.success:
            self._restore(snapshot)
            raise AutomountActivationFailed("systemd daemon-reload failed", reload.output)

        for step in (self._system.enable, self._system.start):
            result = step(unit)
            if not result.success:
                self._rollback_automount(unit, snapshot)
                raise AutomountActivationFailed(
                    f"Failed to {step.__name__} {unit}",
                    "\n".join(p for p in (result.output, self._system.status_text(unit)) if p),
                )
        messages.extend((f"Enabled {unit}", f"Started {unit}"))

        if not self._system.is_active(unit):
            diagnostic = self._system.status_text(unit)
            self._rollback_automount(unit, snapshot)
            raise AutomountActivationFailed(f"{unit} did not become active", diagnostic)

        return OperationResult(
            operation=OperationType.CREATE_AUTOMOUNT,
            name=name,
            status=self._reconciler.compute_status(name),
            changed=True,
            reloaded=changes.reloaded,
            messages=tuple(messages),
        )

    def _toggle_boot(self, name: str, enable: bool) -> OperationResult:
        operation = OperationType.ENABLE_AT_BOOT if enable else OperationType.DISABLE_AT_BOOT
        error_cls: type[MountctlError] = EnableFailed if enable else DisableFailed
        verb = "enable" if enable else "disable"

        resolved = self._reconciler.resolve(name)
        unit = f"{name}.mount"
        if not resolved.installed:
            raise error_cls(f"Cannot {verb} {unit}: unit is not installed, activate it first")

        result = self._system.enable(unit) if enable else self._system.disable(unit)
        if not result.success:
            raise error_cls(f"Failed to {verb} {unit}", result.output)

        return OperationResult(
            operation=operation,
            name=name,
            status=self._reconciler.compute_status(name),
            changed=True,
            messages=(f"{verb.capitalize()}d {unit} at boot",),
        )

    # === Helpers ===

    def _logged(
        self,
        operation: OperationType,
        name: str,
        body: Callable[[], OperationResult],
    ) -> OperationResult:
        """Run an operation body and append its outcome to the action log."""
        try:
            result = body()
        except MountctlError as e:
            self._record_failure(operation, name, e)
            raise
        self._record_success(result)
        return result

    def _record_failure(self, operation: OperationType, name: str, error: MountctlError) -> None:
        logger.info("%s %s failed: %s", operation.value, name, error)
        if self._action_log is not None:
            metadata: dict[str, object] = {"error": type(error).__name__}
            if error.diagnostic:
                metadata["diagnostic"] = error.diagnostic
            self._action_log.record(operation, name, False, error.message, metadata)

    def _record_success(self, result: OperationResult) -> None:
        logger.info("%s %s succeeded", result.operation.value, result.name)
        if self._action_log is not None:
            self._action_log.record(
                result.operation,
                result.name,
                True,
                "; ".join(result.messages),
                {"state": result.status.state.value, "reloaded": result.reloaded},
            )

    def _batch(
        self,
        operation: OperationType,
        names: list[str],
        results: dict[str, OperationResult],
        failures: dict[str, MountctlError],
        reloaded: bool,
    ) -> BatchResult:
        """Log each mount of a batch and collect the outcomes in input order."""
        for name in names:
            if name in failures:
                self._record_failure(operation, name, failures[name])
            elif name in results:
                self._record_success(results[name])
        return BatchResult(
            operation=operation,
            results=tuple(results[n] for n in names if n in results),
            failures=tuple((n, failures[n]) for n in names if n in failures),
            reloaded=reloaded,
        )

    def _reload_staged(
        self,
        changes: _UnitChanges,
        staged: list[_Staged],
        error_cls: type[MountctlError],
    ) -> None:
        """Reload once for all staged mounts, undoing every one of them on failure."""
        reload = changes.flush()
        if reload is None or reload.success:
            return
        for s in staged:
            self._restore(s.snapshot)
            self._compensate(s.undo)
        raise error_cls("systemd daemon-reload failed", reload.output)

    def _restore(self, snapshot: UnitSnapshot) -> None:
        """Put installed units back as captured, reloading if needed."""
        try:
            changed = self._installed.restore(snapshot)
        except OSError as e:
            logger.warning("Failed to restore installed units of %s: %s", snapshot.name, e)
            return
        if changed:
            reload = self._system.reload()
            if not reload.success:
                logger.warning("daemon-reload after rollback failed: %s", reload.output)

    def _rollback_automount(self, unit: str, snapshot: UnitSnapshot) -> None:
        if snapshot.automount_text is None:
            for step in (self._system.stop, self._system.disable):
                result = step(unit)
                if not result.success:
                    logger.warning("Rollback %s %s failed: %s", step.__name__, unit, result.output)
        self._restore(snapshot)

    def _compensate(self, undo: list[Callable[[], CommandResult]]) -> None:
        """Undo completed init-system steps, newest first."""
        for step in reversed(undo):
            result = step()
            if not result.success:
                logger.warning("Compensating step failed: %s", result.output)

    def _status_after_removal(self, name: str) -> MountStatus:
        try:
            return self._reconciler.compute_status(name)
        except UnknownMount:
            # System-only mount: nothing left to describe it
            return MountStatus(name=name, state=MountState.NOT_INSTALLED)
