"""Init-system collaborators for mountctl.

This module exports the abstract interfaces and their systemd
implementations.
"""

from mountctl.systemd.base import InUseProbe, SystemManager
from mountctl.systemd.probe import FuserProbe
from mountctl.systemd.systemctl import SystemctlManager

__all__ = [
    "FuserProbe",
    "InUseProbe",
    "SystemManager",
    "SystemctlManager",
]
