"""Persistent action log.

This module provides the ActionLog class for appending and querying
operation records in a JSONL file.
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from mountctl.core.errors import MountctlError
from mountctl.models.history import ActionRecord, OperationType, create_action_record

logger = logging.getLogger(__name__)


class ActionLog:
    """Append-only log of operations and their outcomes.

    The file uses JSON Lines format where each line is a complete JSON
    object representing an ActionRecord.

    Attributes:
        path: Location of the JSONL file.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        """Path to the JSONL file."""
        return self._path

    def append(self, record: ActionRecord) -> None:
        """Append a record to the log file.

        Creates the file and parent directories if they don't exist.

        Raises:
            OSError: If the file cannot be written.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open(mode="a", encoding="utf-8") as f:
            f.write(record.to_json_line() + "\n")
            f.flush()

    def record(
        self,
        operation: OperationType,
        name: str,
        success: bool = True,
        message: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> ActionRecord | None:
        """Create and append a record, never raising.

        A log that cannot be written must not mask the outcome of the
        operation being logged, so write errors only produce a warning.

        Returns:
            The record written, or None if writing failed.
        """
        entry = create_action_record(
            operation=operation,
            name=name,
            success=success,
            message=message,
            metadata=metadata,
        )
        try:
            self.append(entry)
        except OSError as e:
            logger.warning("Failed to write action log %s: %s", self._path, e)
            return None
        return entry

    @contextmanager
    def recording(
        self,
        operation: OperationType,
        name: str,
        message: str = "",
    ) -> Iterator[None]:
        """Record the outcome of the enclosed block.

        A MountctlError escaping the block is recorded as a failure and
        re-raised; normal completion is recorded as a success.
        """
        try:
            yield
        except MountctlError as e:
            metadata: dict[str, Any] = {"error": type(e).__name__}
            if e.diagnostic:
                metadata["diagnostic"] = e.diagnostic
            self.record(operation, name, False, e.message, metadata)
            raise
        self.record(operation, name, True, message)

    def entries(self, limit: int | None = None) -> list[ActionRecord]:
        """Read records, newest first.

        Args:
            limit: Maximum number of records to return. If None, returns all.

        Returns:
            List of ActionRecord, newest first. Empty if the file doesn't exist.
        """
        if not self._path.exists():
            return []

        records: list[ActionRecord] = []
        with self._path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(ActionRecord.from_json_line(line))
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning("Skipping corrupt action log line %d: %s", line_num, str(e))
                    continue

        records.reverse()
        if limit is not None:
            return records[:limit]
        return records
