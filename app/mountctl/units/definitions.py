"""Unit Definition Store.

Reads and writes ``<name>.mount`` definition files in the definition
directory. This is the declared side of the reconciliation.
"""

import logging
from pathlib import Path

from mountctl.core.errors import DefinitionIOError, UnknownMount
from mountctl.models.definition import (
    MOUNT_SUFFIX,
    MountDefinition,
    parse_unit_text,
    validate_name,
)
from mountctl.utils.fileio import atomic_write_text

logger = logging.getLogger(__name__)


class DefinitionStore:
    """Directory of mount definition files.

    Attributes:
        directory: Directory holding the ``*.mount`` definition files.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    @property
    def directory(self) -> Path:
        """Directory holding the definitions."""
        return self._directory

    def path_for(self, name: str) -> Path:
        """Get the definition file path for a mount name.

        Raises:
            InvalidName: If the name is not a valid mount name.
        """
        return self._directory / f"{validate_name(name)}{MOUNT_SUFFIX}"

    def names(self) -> list[str]:
        """List defined mount names, sorted.

        Returns:
            Names of all regular ``*.mount`` files. Empty if the
            directory does not exist.
        """
        if not self._directory.is_dir():
            return []
        return sorted(
            p.name.removesuffix(MOUNT_SUFFIX)
            for p in self._directory.glob(f"*{MOUNT_SUFFIX}")
            if p.is_file()
        )

    def exists(self, name: str) -> bool:
        """Check if a definition file exists for the name."""
        return self.path_for(name).is_file()

    def read_text(self, name: str) -> str | None:
        """Read the raw definition text.

        Returns:
            File content, or None if no definition exists.

        Raises:
            DefinitionIOError: If the file exists but cannot be read.
        """
        path = self.path_for(name)
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Cannot read definition {path}: {e}"
            raise DefinitionIOError(msg) from e

    def load(self, name: str) -> MountDefinition:
        """Load and parse a definition.

        Raises:
            UnknownMount: If no definition file exists.
            InvalidDefinition: If the file is not in unit file format.
        """
        text = self.read_text(name)
        if text is None:
            msg = f"No definition named '{name}' in {self._directory}"
            raise UnknownMount(msg)
        return parse_unit_text(name, text)

    def save(self, definition: MountDefinition) -> Path:
        """Validate and write a definition file.

        Args:
            definition: Definition to persist.

        Returns:
            Path of the written file.

        Raises:
            InvalidName: If the definition name is invalid.
            InvalidDefinition: If the definition fails validation,
                including the reserved-target rule.
            DefinitionIOError: If the file cannot be written.
        """
        path = self.path_for(definition.name)
        definition.validate()
        try:
            atomic_write_text(path, definition.render())
        except OSError as e:
            msg = f"Cannot write definition {path}: {e}"
            raise DefinitionIOError(msg) from e
        logger.info("Wrote definition %s", path)
        return path

    def delete(self, name: str) -> Path:
        """Delete a definition file.

        Raises:
            UnknownMount: If no definition file exists.
            DefinitionIOError: If the file cannot be removed.
        """
        path = self.path_for(name)
        if not path.is_file():
            msg = f"No definition named '{name}' in {self._directory}"
            raise UnknownMount(msg)
        try:
            path.unlink()
        except OSError as e:
            msg = f"Cannot delete definition {path}: {e}"
            raise DefinitionIOError(msg) from e
        logger.info("Deleted definition %s", path)
        return path
