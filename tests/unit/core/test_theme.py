"""Unit tests for theme loading."""

from pathlib import Path

import pytest
from mountctl.core.theme import ThemeColors, get_rich_theme, load_theme


class TestThemeColors:
    """Tests for ThemeColors validation."""

    def test_rejects_non_hex(self) -> None:
        """Colors must be hex codes."""
        with pytest.raises(ValueError):
            ThemeColors(success="green")

    def test_accepts_short_hex(self) -> None:
        """#RGB is accepted."""
        assert ThemeColors(success="#0f0").success == "#0f0"


class TestLoadTheme:
    """Tests for load_theme."""

    def test_bundled_theme(self) -> None:
        """The bundled theme loads without a user override."""
        assert load_theme() == ThemeColors()

    def test_user_override(self, tmp_path: Path) -> None:
        """User colors override bundled ones key by key."""
        user_theme = tmp_path / "xdg-config" / "mountctl" / "theme.toml"
        user_theme.parent.mkdir(parents=True)
        user_theme.write_text('[colors]\nstate_active = "#00ff00"\n')

        colors = load_theme()

        assert colors.state_active == "#00ff00"
        assert colors.state_error == ThemeColors().state_error

    def test_invalid_user_theme_falls_back(self, tmp_path: Path) -> None:
        """An invalid override falls back to the defaults."""
        user_theme = tmp_path / "xdg-config" / "mountctl" / "theme.toml"
        user_theme.parent.mkdir(parents=True)
        user_theme.write_text('[colors]\nerror = "red"\n')

        assert load_theme() == ThemeColors()

    def test_rich_theme_has_state_styles(self) -> None:
        """State styles are available to console markup."""
        theme = get_rich_theme(ThemeColors())

        for style in ("state.active", "state.inactive", "state.error", "mount.name"):
            assert style in theme.styles
