"""Data models for mountctl.

This module exports the core data structures used throughout the application.
"""

from mountctl.models.credential import CredentialKind, CredentialMeta
from mountctl.models.definition import MountDefinition, parse_unit_text
from mountctl.models.history import ActionRecord, OperationType, create_action_record
from mountctl.models.status import (
    CatalogEntry,
    Modifier,
    MountState,
    MountStatus,
    Provenance,
)

__all__ = [
    "ActionRecord",
    "CatalogEntry",
    "CredentialKind",
    "CredentialMeta",
    "Modifier",
    "MountDefinition",
    "MountState",
    "MountStatus",
    "OperationType",
    "Provenance",
    "create_action_record",
    "parse_unit_text",
]
