"""Credential models for SMB and NFS mounts."""

from dataclasses import dataclass
from enum import Enum


class CredentialKind(str, Enum):
    """Credential file flavour.

    Attributes:
        SMB: ``username=`` / ``password=`` pair read by mount.cifs.
        NFS: Free-text option string.
    """

    SMB = "smb"
    NFS = "nfs"


@dataclass(frozen=True, slots=True)
class CredentialMeta:
    """Displayable facts about a credential file.

    The secret itself is never part of this model.

    Attributes:
        name: Credential name (file stem).
        path: Credential file path.
        exists: Whether the file exists.
        kind: Detected flavour, None if absent or unrecognised.
        mode: Permission bits, None if absent.
        username: SMB username, which is shown when editing.
    """

    name: str
    path: str
    exists: bool
    kind: CredentialKind | None = None
    mode: int | None = None
    username: str | None = None

    @property
    def is_restricted(self) -> bool:
        """Check that group and other permission bits are all zero."""
        return self.mode is not None and self.mode & 0o077 == 0

    @property
    def mode_octal(self) -> str:
        """Permission bits as an octal string (e.g. "600")."""
        return "-" if self.mode is None else f"{self.mode:03o}"
