"""Mount status and catalog models.

Status is never stored: the reconciler derives it from the definition
store, the installed unit directory and the init system on every query.
"""

from dataclasses import dataclass, field
from enum import Enum


class MountState(str, Enum):
    """Primary state of a mount. Exactly one applies at a time.

    Attributes:
        ACTIVE: The init system reports the mount unit active.
        INACTIVE: Valid and ready, but not mounted.
        INVALID_DEFINITION: What=/Where= missing or the file is malformed.
        MISSING_TARGET: The Where= directory does not exist.
        NOT_INSTALLED: No unit is installed for the definition.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"
    INVALID_DEFINITION = "error:invalid-definition"
    MISSING_TARGET = "error:missing-target"
    NOT_INSTALLED = "error:not-installed"


class Modifier(str, Enum):
    """Orthogonal status flags.

    Attributes:
        STARTUP_ENABLED: The mount unit is enabled at boot.
        ON_DEMAND: A companion automount is installed and active or enabled.
    """

    STARTUP_ENABLED = "startup-enabled"
    ON_DEMAND = "on-demand"


class Provenance(str, Enum):
    """Where a mount is known from.

    Attributes:
        DEFINED: A definition file exists in the definition store.
        SYSTEM_ONLY: Only an installed unit exists (deleted or hand-authored).
    """

    DEFINED = "defined"
    SYSTEM_ONLY = "system-only"


@dataclass(frozen=True, slots=True)
class MountStatus:
    """Derived status of a named mount.

    Attributes:
        name: Mount name.
        state: Primary state.
        modifiers: Set of orthogonal modifiers.
        installed: Whether the mount unit file is installed.
        drifted: Installed content differs from the definition.
        problems: Validation problems behind INVALID_DEFINITION.
        where: Mount target, when known.
    """

    name: str
    state: MountState
    modifiers: frozenset[Modifier] = field(default_factory=frozenset)
    installed: bool = False
    drifted: bool = False
    problems: tuple[str, ...] = ()
    where: str | None = None

    @property
    def is_active(self) -> bool:
        """Check if the mount is active."""
        return self.state == MountState.ACTIVE

    @property
    def is_error(self) -> bool:
        """Check if the primary state is one of the error states."""
        return self.state.value.startswith("error:")

    @property
    def startup_enabled(self) -> bool:
        """Check if the mount starts at boot."""
        return Modifier.STARTUP_ENABLED in self.modifiers

    @property
    def on_demand(self) -> bool:
        """Check if the mount is managed by an automount."""
        return Modifier.ON_DEMAND in self.modifiers

    @property
    def modifier_values(self) -> list[str]:
        """Modifier names in a stable order."""
        return sorted(m.value for m in self.modifiers)

    def to_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "name": self.name,
            "state": self.state.value,
            "modifiers": self.modifier_values,
            "installed": self.installed,
            "drifted": self.drifted,
            "problems": list(self.problems),
            "where": self.where,
        }


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """One row of the mount catalog.

    Attributes:
        name: Mount name.
        provenance: Whether the mount is tracked by a definition file.
        status: Status computed by the reconciler.
    """

    name: str
    provenance: Provenance
    status: MountStatus

    @property
    def is_defined(self) -> bool:
        """Check if a definition file exists for this entry."""
        return self.provenance == Provenance.DEFINED

    def to_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "name": self.name,
            "provenance": self.provenance.value,
            **{k: v for k, v in self.status.to_dict().items() if k != "name"},
        }
