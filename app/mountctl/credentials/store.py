"""Credential Store.

Per-mount credential files (``<name>.creds``) for SMB and NFS mounts.
Files are always written with mode 600 before any content reaches disk,
and no method ever returns or logs the secret.
"""

import logging
import os
import stat
from pathlib import Path

from mountctl.core.errors import CredentialError, UnknownMount
from mountctl.models.credential import CredentialKind, CredentialMeta
from mountctl.models.definition import validate_name
from mountctl.utils.fileio import atomic_write_text

logger = logging.getLogger(__name__)

CREDENTIAL_SUFFIX = ".creds"
CREDENTIAL_MODE = 0o600


class CredentialStore:
    """Directory of credential files.

    Attributes:
        root: Directory holding the credential files.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        """Directory holding the credential files."""
        return self._root

    def path_for(self, name: str) -> Path:
        """Get the credential file path for a name.

        Raises:
            InvalidName: If the name is not a valid mount name.
        """
        return self._root / f"{validate_name(name)}{CREDENTIAL_SUFFIX}"

    def write_smb_credential(self, name: str, username: str, secret: str) -> Path:
        """Write an SMB credential file.

        Args:
            name: Credential name.
            username: SMB user name.
            secret: SMB password.

        Returns:
            Path of the written file.

        Raises:
            InvalidName: If the name is invalid.
            CredentialError: If a value spans lines or the file cannot be written.
        """
        if not username:
            msg = "SMB username cannot be empty"
            raise CredentialError(msg)
        if any("\n" in value or "\r" in value for value in (username, secret)):
            msg = "SMB username and password must be single-line values"
            raise CredentialError(msg)
        return self._write(name, f"username={username}\npassword={secret}\n")

    def write_nfs_credential(self, name: str, options_text: str) -> Path:
        """Write an NFS option file.

        Args:
            name: Credential name.
            options_text: Free-text NFS options.

        Returns:
            Path of the written file.

        Raises:
            InvalidName: If the name is invalid.
            CredentialError: If the file cannot be written.
        """
        return self._write(name, options_text.rstrip("\n") + "\n")

    def read_credential_meta(self, name: str) -> CredentialMeta:
        """Describe a credential file without exposing its secret.

        Args:
            name: Credential name.

        Returns:
            CredentialMeta; ``exists`` is False when there is no file.

        Raises:
            InvalidName: If the name is invalid.
            CredentialError: If the file exists but cannot be read.
        """
        path = self.path_for(name)
        if not path.is_file():
            return CredentialMeta(name=name, path=str(path), exists=False)

        try:
            mode = stat.S_IMODE(path.stat().st_mode)
            lines = path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Cannot read credential file {path}: {e}"
            raise CredentialError(msg) from e

        username: str | None = None
        for line in lines:
            if line.startswith("username="):
                username = line.partition("=")[2]
                break

        has_password = any(line.startswith("password=") for line in lines)
        kind = CredentialKind.SMB if username is not None or has_password else CredentialKind.NFS
        return CredentialMeta(
            name=name,
            path=str(path),
            exists=True,
            kind=kind,
            mode=mode,
            username=username,
        )

    def list_credentials(self) -> list[str]:
        """List credential names, sorted."""
        if not self._root.is_dir():
            return []
        return sorted(
            p.name.removesuffix(CREDENTIAL_SUFFIX)
            for p in self._root.glob(f"*{CREDENTIAL_SUFFIX}")
            if p.is_file()
        )

    def delete_credential(self, name: str) -> Path:
        """Delete a credential file.

        Raises:
            UnknownMount: If the credential does not exist.
            CredentialError: If the file cannot be removed.
        """
        path = self.path_for(name)
        if not path.is_file():
            msg = f"No credential named '{name}' in {self._root}"
            raise UnknownMount(msg)
        try:
            path.unlink()
        except OSError as e:
            msg = f"Cannot delete credential file {path}: {e}"
            raise CredentialError(msg) from e
        logger.info("Deleted credential file %s", path)
        return path

    def _write(self, name: str, text: str) -> Path:
        path = self.path_for(name)
        try:
            atomic_write_text(path, text, mode=CREDENTIAL_MODE)
            os.chmod(path, CREDENTIAL_MODE)
        except OSError as e:
            msg = f"Cannot write credential file {path}: {e}"
            raise CredentialError(msg) from e
        logger.info("Wrote credential file %s", path)
        return path
