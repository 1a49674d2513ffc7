"""Privilege check performed before any command runs."""

import os

from mountctl.core.errors import PermissionDenied


def require_root() -> None:
    """Ensure the process runs with an effective UID of 0.

    Raises:
        PermissionDenied: If the caller is not root.
    """
    if os.geteuid() != 0:
        msg = "mountctl manages system units and must be run as root (try sudo)"
        raise PermissionDenied(msg)
