"""Installed unit store.

Materialized copies of mount definitions (and their companion automount
units) in the systemd unit directory. Writes are skipped when the content
is already identical, so callers can tell whether a daemon reload is due.
"""

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path

from mountctl.core.errors import DefinitionIOError
from mountctl.models.definition import AUTOMOUNT_SUFFIX, MOUNT_SUFFIX, validate_name
from mountctl.utils.fileio import atomic_write_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UnitSnapshot:
    """Installed unit contents captured before a mutation.

    Attributes:
        name: Mount name.
        mount_text: Content of the mount unit, None if absent.
        automount_text: Content of the automount unit, None if absent.
    """

    name: str
    mount_text: str | None
    automount_text: str | None


class InstalledUnitStore:
    """Mount and automount unit files in the systemd unit directory.

    Attributes:
        directory: systemd unit directory (usually /etc/systemd/system).
    """

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        """systemd unit directory."""
        return self._directory

    def mount_path(self, name: str) -> Path:
        """Path of the installed mount unit."""
        return self._directory / f"{validate_name(name)}{MOUNT_SUFFIX}"

    def automount_path(self, name: str) -> Path:
        """Path of the installed automount unit."""
        return self._directory / f"{validate_name(name)}{AUTOMOUNT_SUFFIX}"

    def names(self) -> list[str]:
        """List installed mount unit names, sorted.

        Only regular files count; masked units (symlinks to /dev/null)
        and directories such as ``*.mount.d`` are ignored.
        """
        if not self._directory.is_dir():
            return []
        return sorted(
            p.name.removesuffix(MOUNT_SUFFIX)
            for p in self._directory.glob(f"*{MOUNT_SUFFIX}")
            if p.is_file() and not p.is_symlink()
        )

    def has_mount(self, name: str) -> bool:
        """Check if the mount unit is installed."""
        return self.mount_path(name).is_file()

    def has_automount(self, name: str) -> bool:
        """Check if the companion automount unit is installed."""
        return self.automount_path(name).is_file()

    def read_mount(self, name: str) -> str | None:
        """Read the installed mount unit, None if absent.

        Raises:
            DefinitionIOError: If the unit exists but cannot be read or decoded.
        """
        return _read_optional(self.mount_path(name))

    def read_automount(self, name: str) -> str | None:
        """Read the installed automount unit, None if absent."""
        return _read_optional(self.automount_path(name))

    def checksum(self, name: str) -> str | None:
        """SHA-256 of the installed mount unit bytes, None if absent.

        Raises:
            DefinitionIOError: If the unit exists but cannot be read.
        """
        path = self.mount_path(name)
        if not path.is_file():
            return None
        try:
            return hashlib.sha256(path.read_bytes()).hexdigest()
        except OSError as e:
            msg = f"Cannot read installed unit {path}: {e}"
            raise DefinitionIOError(msg) from e

    def install_mount(self, name: str, text: str) -> bool:
        """Install mount unit content if missing or different.

        Returns:
            True if the file was written.

        Raises:
            OSError: If the file cannot be written.
        """
        return _write_if_changed(self.mount_path(name), text)

    def install_automount(self, name: str, text: str) -> bool:
        """Install automount unit content if missing or different.

        Returns:
            True if the file was written.

        Raises:
            OSError: If the file cannot be written.
        """
        return _write_if_changed(self.automount_path(name), text)

    def remove(self, name: str) -> list[Path]:
        """Remove the mount and automount unit files.

        Returns:
            Paths that were actually removed.

        Raises:
            OSError: If an existing file cannot be removed.
        """
        removed: list[Path] = []
        for path in (self.automount_path(name), self.mount_path(name)):
            if path.is_file():
                path.unlink()
                logger.info("Removed installed unit %s", path)
                removed.append(path)
        return removed

    def snapshot(self, name: str) -> UnitSnapshot:
        """Capture the installed unit contents for a later restore."""
        return UnitSnapshot(
            name=name,
            mount_text=self.read_mount(name),
            automount_text=self.read_automount(name),
        )

    def restore(self, snapshot: UnitSnapshot) -> bool:
        """Return the installed units to a captured state.

        Returns:
            True if any file was written or removed.

        Raises:
            OSError: If a file cannot be written or removed.
        """
        changed = False
        for path, text in (
            (self.mount_path(snapshot.name), snapshot.mount_text),
            (self.automount_path(snapshot.name), snapshot.automount_text),
        ):
            if text is None:
                if path.is_file():
                    path.unlink()
                    changed = True
            else:
                changed = _write_if_changed(path, text) or changed
        return changed


def _read_optional(path: Path) -> str | None:
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Cannot read installed unit {path}: {e}"
        raise DefinitionIOError(msg) from e


def _write_if_changed(path: Path, text: str) -> bool:
    # Compare bytes so an undecodable unit is simply overwritten
    if path.is_file() and path.read_bytes() == text.encode("utf-8"):
        logger.debug("Unit %s is up to date", path)
        return False
    atomic_write_text(path, text)
    logger.info("Installed unit %s", path)
    return True
