"""Action log record model.

Every lifecycle and store operation appends one record with its outcome,
so failures remain visible after the interactive session is gone.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class OperationType(str, Enum):
    """Operation recorded in the action log."""

    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    CREATE_TARGET_DIR = "create_target_dir"
    REPAIR = "repair"
    CREATE_AUTOMOUNT = "create_automount"
    ENABLE_AT_BOOT = "enable_at_boot"
    DISABLE_AT_BOOT = "disable_at_boot"
    WRITE_DEFINITION = "write_definition"
    DELETE_DEFINITION = "delete_definition"
    WRITE_CREDENTIAL = "write_credential"
    DELETE_CREDENTIAL = "delete_credential"
    SET_CONFIG = "set_config"


@dataclass(frozen=True, slots=True)
class ActionRecord:
    """Record of a single operation and its outcome.

    Attributes:
        id: Unique identifier (12-character hex string from UUID).
        timestamp: When the operation finished (ISO 8601 with timezone).
        operation: Operation type.
        name: Mount, credential or config key the operation acted on.
        success: Whether the operation completed successfully.
        message: Outcome summary or error message.
        metadata: Additional context (error class, diagnostic, changes).
    """

    id: str
    timestamp: str
    operation: OperationType
    name: str
    success: bool = True
    message: str = ""
    metadata: dict[str, Any] = field(default_factory=lambda: {})

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.id:
            msg = "Action record ID cannot be empty"
            raise ValueError(msg)
        if not self.timestamp:
            msg = "Timestamp cannot be empty"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "operation": self.operation.value,
            "name": self.name,
            "success": self.success,
            "message": self.message,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActionRecord":
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If operation is invalid.
        """
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            operation=OperationType(data["operation"]),
            name=data["name"],
            success=data.get("success", True),
            message=data.get("message", ""),
            metadata=data.get("metadata", {}),
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> "ActionRecord":
        """Deserialize from a JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        return cls.from_dict(json.loads(line.strip()))


def create_action_record(
    operation: OperationType,
    name: str,
    success: bool = True,
    message: str = "",
    metadata: dict[str, Any] | None = None,
) -> ActionRecord:
    """Factory function to create a new ActionRecord.

    Automatically generates a unique ID and current timestamp.
    """
    return ActionRecord(
        id=uuid.uuid4().hex[:12],
        timestamp=datetime.now(UTC).isoformat(),
        operation=operation,
        name=name,
        success=success,
        message=message,
        metadata=metadata or {},
    )
