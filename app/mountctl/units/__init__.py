"""Unit file stores for mountctl.

This module exports the definition store (declared side) and the
installed unit store (systemd side).
"""

from mountctl.units.definitions import DefinitionStore
from mountctl.units.installed import InstalledUnitStore, UnitSnapshot

__all__ = [
    "DefinitionStore",
    "InstalledUnitStore",
    "UnitSnapshot",
]
