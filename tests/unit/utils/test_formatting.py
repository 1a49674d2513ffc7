"""Unit tests for console formatting helpers."""

import pytest
from mountctl.models.status import CatalogEntry, Modifier, MountState, MountStatus, Provenance
from mountctl.utils.formatting import (
    format_catalog_row,
    format_state,
    print_error,
    print_warning,
)


class TestFormatState:
    """Tests for format_state."""

    @pytest.mark.parametrize(
        ("state", "style"),
        [
            (MountState.ACTIVE, "state.active"),
            (MountState.INACTIVE, "state.inactive"),
            (MountState.MISSING_TARGET, "state.error"),
            (MountState.INVALID_DEFINITION, "state.error"),
        ],
    )
    def test_style_per_state(self, state: MountState, style: str) -> None:
        """Each state gets its own style."""
        assert format_state(MountStatus(name="nas1", state=state)) == f"[{style}]{state.value}[/]"


class TestFormatCatalogRow:
    """Tests for format_catalog_row."""

    def test_defined_row(self) -> None:
        """Modifiers are joined in a stable order."""
        status = MountStatus(
            name="nas1",
            state=MountState.ACTIVE,
            modifiers=frozenset({Modifier.ON_DEMAND, Modifier.STARTUP_ENABLED}),
        )
        row = format_catalog_row(CatalogEntry("nas1", Provenance.DEFINED, status))

        assert "nas1" in row[0]
        assert row[1] == "[provenance.defined]defined[/]"
        assert row[3] == "on-demand, startup-enabled"

    def test_system_only_row(self) -> None:
        """System-only mounts use their own style and a dash for no modifiers."""
        status = MountStatus(name="legacy", state=MountState.INACTIVE)
        row = format_catalog_row(CatalogEntry("legacy", Provenance.SYSTEM_ONLY, status))

        assert row[1] == "[provenance.system]system-only[/]"
        assert row[3] == "-"


class TestMessages:
    """Tests for the message helpers."""

    def test_errors_go_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Errors and warnings are printed to stderr."""
        print_error("boom")
        print_warning("careful")

        captured = capsys.readouterr()
        assert "Error: boom" in captured.err
        assert "Warning: careful" in captured.err
        assert captured.out == ""
