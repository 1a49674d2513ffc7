"""Abstract interfaces for the init system and the in-use probe.

The reconciler and lifecycle operations only talk to these interfaces,
so the state machine can run against fakes in tests.
"""

from abc import ABC, abstractmethod

from mountctl.utils.shell import CommandResult


class SystemManager(ABC):
    """Abstract base class for init-system access.

    All calls are synchronous. Query methods never mutate state; the
    mutating methods return a CommandResult whose failure the caller
    must turn into an operation error.

    Example:
        >>> manager = SystemctlManager()
        >>> if manager.is_available():
        ...     manager.reload()
        ...     manager.start("nas1.mount")
    """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the init system can be controlled on this host."""

    @abstractmethod
    def is_active(self, unit: str) -> bool:
        """Check if a unit is active."""

    @abstractmethod
    def is_enabled(self, unit: str) -> bool:
        """Check if a unit is enabled at boot."""

    @abstractmethod
    def start(self, unit: str) -> CommandResult:
        """Start a unit."""

    @abstractmethod
    def stop(self, unit: str) -> CommandResult:
        """Stop a unit."""

    @abstractmethod
    def enable(self, unit: str) -> CommandResult:
        """Enable a unit at boot without starting it."""

    @abstractmethod
    def disable(self, unit: str) -> CommandResult:
        """Disable a unit at boot without stopping it."""

    @abstractmethod
    def reload(self) -> CommandResult:
        """Make the init system re-read unit files."""

    @abstractmethod
    def status_text(self, unit: str) -> str:
        """Human-readable status output for diagnostics."""


class InUseProbe(ABC):
    """Abstract base class for open-handle checks on a mount point."""

    @abstractmethod
    def holders(self, path: str) -> list[str]:
        """List processes holding files open under a path.

        Args:
            path: Mount point to check.

        Returns:
            One description per holder. Empty if nothing is in use.
        """

    def is_busy(self, path: str) -> bool:
        """Check if anything holds files open under a path."""
        return bool(self.holders(path))
