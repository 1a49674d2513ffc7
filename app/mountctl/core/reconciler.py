"""Reconciler: derive the status of a mount.

Combines the declared definition (definition store) with the installed
unit and the init system's view. Read-only: the only external calls are
non-mutating status queries.
"""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

from mountctl.core.errors import DefinitionIOError, InvalidDefinition, UnknownMount
from mountctl.models.definition import MountDefinition, parse_unit_text, validate_name
from mountctl.models.status import Modifier, MountState, MountStatus, Provenance
from mountctl.systemd.base import SystemManager
from mountctl.units.definitions import DefinitionStore
from mountctl.units.installed import InstalledUnitStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedMount:
    """Both sides of a mount as found on disk.

    Attributes:
        name: Mount name.
        provenance: DEFINED if a definition file exists, else SYSTEM_ONLY.
        definition: Parsed effective definition (the definition file, or
            the installed unit for system-only mounts). None if unparseable.
        source_text: Raw text the effective definition was parsed from.
        installed_text: Raw text of the installed mount unit, if any.
        has_automount: Whether a companion automount unit is installed.
        problems: Validation problems of the effective definition.
        installed_error: Why an existing installed mount unit could not
            be read, if it could not.
    """

    name: str
    provenance: Provenance
    definition: MountDefinition | None
    source_text: str
    installed_text: str | None
    has_automount: bool
    problems: tuple[str, ...]
    installed_error: str | None = None

    @property
    def is_defined(self) -> bool:
        """Check if a definition file exists."""
        return self.provenance == Provenance.DEFINED

    @property
    def installed(self) -> bool:
        """Check if the mount unit is installed."""
        return self.installed_text is not None or self.installed_error is not None

    @property
    def drifted(self) -> bool:
        """Installed unit differs from the definition file."""
        return self.is_defined and self.installed and self.installed_text != self.source_text

    @property
    def where(self) -> str | None:
        """Mount target, if the definition could be parsed."""
        if self.definition is None or not self.definition.where:
            return None
        return self.definition.where

    def require_valid(self) -> MountDefinition:
        """Return the definition, raising if it has problems.

        Raises:
            InvalidDefinition: With the problems attached.
        """
        if self.definition is None or self.problems:
            msg = f"Invalid definition for '{self.name}': {'; '.join(self.problems)}"
            raise InvalidDefinition(msg, list(self.problems))
        return self.definition


class Reconciler:
    """Computes the authoritative status of named mounts.

    Attributes:
        definitions: Declared side.
        installed: Installed unit files.
        system: Init-system status queries.
    """

    def __init__(
        self,
        definitions: DefinitionStore,
        installed: InstalledUnitStore,
        system: SystemManager,
    ) -> None:
        self._definitions = definitions
        self._installed = installed
        self._system = system

    def resolve(self, name: str) -> ResolvedMount:
        """Load both sides of a mount.

        Args:
            name: Mount name.

        Returns:
            ResolvedMount describing what exists on disk.

        Raises:
            InvalidName: If the name is invalid.
            UnknownMount: If neither a definition nor an installed unit exists.
        """
        validate_name(name)
        defined_text, defined_error = _read_side(self._definitions.read_text, name)
        installed_text, installed_error = _read_side(self._installed.read_mount, name)

        defined = defined_text is not None or defined_error is not None
        if not defined and installed_text is None and installed_error is None:
            msg = f"Unknown mount '{name}': no definition and no installed unit"
            raise UnknownMount(msg)

        if defined:
            provenance = Provenance.DEFINED
            source_text = defined_text or ""
            source_error = defined_error
        else:
            provenance = Provenance.SYSTEM_ONLY
            source_text = installed_text or ""
            source_error = installed_error

        definition: MountDefinition | None
        if source_error is not None:
            definition = None
            problems: tuple[str, ...] = (source_error,)
        else:
            try:
                definition = parse_unit_text(name, source_text)
            except InvalidDefinition as e:
                definition = None
                problems = tuple(e.problems) or (e.message,)
            else:
                problems = self._problems_of(definition, provenance)

        return ResolvedMount(
            name=name,
            provenance=provenance,
            definition=definition,
            source_text=source_text,
            installed_text=installed_text,
            has_automount=self._installed.has_automount(name),
            problems=problems,
            installed_error=installed_error,
        )

    @staticmethod
    def _problems_of(definition: MountDefinition, provenance: Provenance) -> tuple[str, ...]:
        if provenance == Provenance.DEFINED:
            return tuple(definition.problems())
        # Hand-authored system units are not held to the reserved-path rule
        return tuple(definition.structural_problems())

    def compute_status(self, name: str) -> MountStatus:
        """Compute the status of a mount.

        Decision order (first match wins): invalid definition, missing
        target directory, active, inactive. Modifiers are computed
        independently of the primary state.

        Args:
            name: Mount name.

        Returns:
            Derived MountStatus.

        Raises:
            InvalidName: If the name is invalid.
            UnknownMount: If the mount is neither defined nor installed.
        """
        return self.status_of(self.resolve(name))

    def status_of(self, resolved: ResolvedMount) -> MountStatus:
        """Compute the status of an already resolved mount."""
        unit = f"{resolved.name}.mount"
        where = resolved.where

        if resolved.problems:
            state = MountState.INVALID_DEFINITION
        elif where is None or not os.path.isdir(where):
            state = MountState.MISSING_TARGET
        elif self._system.is_active(unit):
            state = MountState.ACTIVE
        else:
            state = MountState.INACTIVE

        modifiers: set[Modifier] = set()
        if self._system.is_enabled(unit):
            modifiers.add(Modifier.STARTUP_ENABLED)
        if resolved.has_automount:
            automount = f"{resolved.name}.automount"
            if self._system.is_active(automount) or self._system.is_enabled(automount):
                modifiers.add(Modifier.ON_DEMAND)

        logger.debug("Status of %s: %s %s", resolved.name, state.value, sorted(modifiers))
        return MountStatus(
            name=resolved.name,
            state=state,
            modifiers=frozenset(modifiers),
            installed=resolved.installed,
            drifted=resolved.drifted,
            problems=resolved.problems,
            where=where,
        )


def _read_side(read: Callable[[str], str | None], name: str) -> tuple[str | None, str | None]:
    """Read one side of a mount, turning read errors into a message."""
    try:
        return read(name), None
    except DefinitionIOError as e:
        logger.warning("%s", e.message)
        return None, e.message
