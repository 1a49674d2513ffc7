"""Wiring of the collaborators used by every command.

A MountContext is built once per invocation from the loaded
configuration. Tests construct one directly with fakes for the
init system and the in-use probe.
"""

from dataclasses import dataclass, field
from pathlib import Path

from mountctl.core.catalog import Catalog
from mountctl.core.config import MountctlConfig
from mountctl.core.lifecycle import LifecycleManager
from mountctl.core.reconciler import Reconciler
from mountctl.core.state import ActionLog
from mountctl.credentials.store import CredentialStore
from mountctl.systemd.base import InUseProbe, SystemManager
from mountctl.systemd.probe import FuserProbe
from mountctl.systemd.systemctl import SystemctlManager
from mountctl.units.definitions import DefinitionStore
from mountctl.units.installed import InstalledUnitStore


@dataclass
class MountContext:
    """Everything a command needs, built from one configuration.

    Attributes:
        config: Effective configuration.
        config_path: File the configuration was loaded from.
        definitions: Unit Definition Store.
        installed: Installed unit store.
        system: Init-system collaborator.
        probe: In-use probe.
        credentials: Credential Store.
        action_log: Persistent action log.
        reconciler: Status computation.
        lifecycle: Lifecycle operations.
        catalog: Catalog of defined and installed mounts.
    """

    config: MountctlConfig
    config_path: Path | None
    definitions: DefinitionStore
    installed: InstalledUnitStore
    system: SystemManager
    probe: InUseProbe
    credentials: CredentialStore
    action_log: ActionLog
    reconciler: Reconciler = field(init=False)
    lifecycle: LifecycleManager = field(init=False)
    catalog: Catalog = field(init=False)

    def __post_init__(self) -> None:
        self.reconciler = Reconciler(self.definitions, self.installed, self.system)
        self.lifecycle = LifecycleManager(
            self.installed, self.system, self.probe, self.reconciler, self.action_log
        )
        self.catalog = Catalog(self.definitions, self.installed, self.reconciler)


def build_context(
    config: MountctlConfig,
    config_path: Path | None = None,
    system: SystemManager | None = None,
    probe: InUseProbe | None = None,
) -> MountContext:
    """Build a context backed by systemctl and fuser unless overridden.

    Args:
        config: Loaded configuration.
        config_path: File the configuration came from.
        system: Init-system collaborator. Defaults to SystemctlManager.
        probe: In-use probe. Defaults to FuserProbe.

    Returns:
        Fully wired MountContext.
    """
    return MountContext(
        config=config,
        config_path=config_path,
        definitions=DefinitionStore(config.definitions_dir),
        installed=InstalledUnitStore(config.systemd_dir),
        system=system or SystemctlManager(),
        probe=probe or FuserProbe(),
        credentials=CredentialStore(config.effective_credentials_dir),
        action_log=ActionLog(config.effective_action_log),
    )
