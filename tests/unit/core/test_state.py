"""Unit tests for the persistent action log."""

from pathlib import Path

import pytest
from mountctl.core.errors import ResourceBusy
from mountctl.core.state import ActionLog
from mountctl.models.history import OperationType


class TestActionLog:
    """Tests for ActionLog."""

    def test_empty(self, tmp_path: Path) -> None:
        """A missing file has no entries."""
        assert ActionLog(tmp_path / "actions.jsonl").entries() == []

    def test_record_creates_parents(self, tmp_path: Path) -> None:
        """Recording creates the file and its directories."""
        log = ActionLog(tmp_path / "state" / "nested" / "actions.jsonl")

        record = log.record(OperationType.ACTIVATE, "nas1", message="Started nas1.mount")

        assert record is not None
        assert log.path.exists()

    def test_entries_newest_first(self, tmp_path: Path) -> None:
        """Entries come back newest first and limit applies."""
        log = ActionLog(tmp_path / "actions.jsonl")
        log.record(OperationType.ACTIVATE, "nas1")
        log.record(OperationType.DEACTIVATE, "nas1")
        log.record(OperationType.REPAIR, "nas2")

        entries = log.entries(limit=2)

        assert [e.operation for e in entries] == [OperationType.REPAIR, OperationType.DEACTIVATE]

    def test_corrupt_lines_skipped(self, tmp_path: Path) -> None:
        """Lines that do not parse are skipped."""
        log = ActionLog(tmp_path / "actions.jsonl")
        log.record(OperationType.ACTIVATE, "nas1")
        with log.path.open("a") as f:
            f.write("not json\n\n")
            f.write('{"id": "x"}\n')
        log.record(OperationType.DEACTIVATE, "nas1")

        assert len(log.entries()) == 2

    def test_record_never_raises(self, tmp_path: Path) -> None:
        """An unwritable log only produces a warning."""
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        log = ActionLog(blocker / "actions.jsonl")

        assert log.record(OperationType.ACTIVATE, "nas1") is None

    def test_recording_success(self, tmp_path: Path) -> None:
        """A block that completes is recorded as a success."""
        log = ActionLog(tmp_path / "actions.jsonl")

        with log.recording(OperationType.WRITE_DEFINITION, "nas1", "saved"):
            pass

        (entry,) = log.entries()
        assert entry.success
        assert entry.message == "saved"

    def test_recording_failure(self, tmp_path: Path) -> None:
        """A MountctlError is recorded with its diagnostic and re-raised."""
        log = ActionLog(tmp_path / "actions.jsonl")

        with (
            pytest.raises(ResourceBusy),
            log.recording(OperationType.DEACTIVATE, "nas1"),
        ):
            raise ResourceBusy("busy", "alice 4242 bash")

        (entry,) = log.entries()
        assert not entry.success
        assert entry.metadata == {"error": "ResourceBusy", "diagnostic": "alice 4242 bash"}
