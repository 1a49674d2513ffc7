"""Exception taxonomy for mount lifecycle operations.

Validation errors are recoverable: the caller can offer a guided fix
(create the target directory, edit the definition) and carry on.
Resource and system-call failures abort the current operation only and
carry the underlying diagnostic text. PermissionDenied is fatal.
"""


class MountctlError(Exception):
    """Base exception for all mountctl errors.

    Attributes:
        message: Human-readable description of the failure.
        diagnostic: Output of the failing system command, if any.
    """

    recoverable: bool = False

    def __init__(self, message: str, diagnostic: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.diagnostic = diagnostic or None

    def __str__(self) -> str:
        return self.message


# Validation errors (recoverable locally)


class InvalidName(MountctlError):
    """Raised when a mount name contains characters outside [A-Za-z0-9_.-]."""

    recoverable = True


class InvalidDefinition(MountctlError):
    """Raised when a definition is structurally unusable.

    Attributes:
        problems: Individual validation failures.
    """

    recoverable = True

    def __init__(self, message: str, problems: list[str] | None = None) -> None:
        super().__init__(message)
        self.problems = list(problems or [])


class StillInvalid(InvalidDefinition):
    """Raised when a repaired definition still fails validation."""


class MissingTarget(MountctlError):
    """Raised when the Where= directory does not exist.

    Attributes:
        target: The missing directory.
    """

    recoverable = True

    def __init__(self, message: str, target: str) -> None:
        super().__init__(message)
        self.target = target


class UnknownMount(MountctlError):
    """Raised when a name is neither defined nor installed."""


# Resource and system-call failures (abort the current operation)


class ResourceBusy(MountctlError):
    """Raised when the mount target still has open handles."""


class ActivationFailed(MountctlError):
    """Raised when starting a mount unit fails."""


class DeactivationFailed(MountctlError):
    """Raised when stopping or disabling a mount unit fails."""


class EnableFailed(MountctlError):
    """Raised when enabling a unit at boot fails."""


class DisableFailed(MountctlError):
    """Raised when disabling a unit at boot fails."""


class AutomountActivationFailed(MountctlError):
    """Raised when the companion automount unit does not come up."""


class DirectoryCreateFailed(MountctlError):
    """Raised when the target directory cannot be created."""


class CredentialError(MountctlError):
    """Raised when a credential file cannot be written or removed."""


class DefinitionIOError(MountctlError):
    """Raised when a definition file cannot be read or written."""


class ConfigIOError(MountctlError):
    """Raised when the config file cannot be read, parsed or written."""


# Fatal


class PermissionDenied(MountctlError):
    """Raised when the caller lacks the privileges to manage systemd units."""
