"""Catalog: the union of defined and installed mounts.

Enumerates the definition store and the installed unit directory,
de-duplicates by name and tags each entry with its provenance.
"""

import logging
from collections.abc import Iterator

from mountctl.core.errors import InvalidName, UnknownMount
from mountctl.core.reconciler import Reconciler
from mountctl.models.definition import validate_name
from mountctl.models.status import CatalogEntry, Provenance
from mountctl.units.definitions import DefinitionStore
from mountctl.units.installed import InstalledUnitStore

logger = logging.getLogger(__name__)


class Catalog:
    """Read-only view of every mount the tool knows about.

    Attributes:
        definitions: Declared side.
        installed: Installed unit files.
        reconciler: Computes each entry's status.
    """

    def __init__(
        self,
        definitions: DefinitionStore,
        installed: InstalledUnitStore,
        reconciler: Reconciler,
    ) -> None:
        self._definitions = definitions
        self._installed = installed
        self._reconciler = reconciler

    def names(self) -> list[str]:
        """Union of defined and installed names, sorted.

        Installed units whose name is not a valid mount name (for example
        systemd-escaped names such as ``custom\\x2dmounts-nas1``) are skipped.
        """
        candidates = set(self._definitions.names()) | set(self._installed.names())
        names: list[str] = []
        for name in sorted(candidates):
            try:
                validate_name(name)
            except InvalidName:
                logger.debug("Skipping unit with unsupported name: %s", name)
                continue
            names.append(name)
        return names

    def list_all(self) -> Iterator[CatalogEntry]:
        """Yield one entry per known mount, sorted by name.

        A name present in both stores is yielded once with provenance
        DEFINED. Mounts that vanish between listing and resolving are
        skipped.
        """
        defined = set(self._definitions.names())
        for name in self.names():
            try:
                status = self._reconciler.compute_status(name)
            except UnknownMount:
                logger.debug("Mount %s disappeared while listing", name)
                continue
            provenance = Provenance.DEFINED if name in defined else Provenance.SYSTEM_ONLY
            yield CatalogEntry(name=name, provenance=provenance, status=status)

    def get(self, name: str) -> CatalogEntry:
        """Look up a single entry.

        Raises:
            InvalidName: If the name is invalid.
            UnknownMount: If the mount is neither defined nor installed.
        """
        resolved = self._reconciler.resolve(name)
        return CatalogEntry(
            name=name,
            provenance=resolved.provenance,
            status=self._reconciler.status_of(resolved),
        )

    def __iter__(self) -> Iterator[CatalogEntry]:
        return self.list_all()
