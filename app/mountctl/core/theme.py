"""Console theme for mountctl.

The bundled ``data/theme.toml`` defines every color; a user file at
``~/.config/mountctl/theme.toml`` may override any subset of them.
"""

import logging
import re
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from mountctl.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class ThemeColors(BaseModel):
    """Colors used by the console output. Values are #RGB or #RRGGBB."""

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    state_active: str = "#03b971"
    state_inactive: str = "#b2bec3"
    state_error: str = "#f5b332"

    provenance_defined: str = "#69B9A1"
    provenance_system: str = "#d44ebc"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        """Reject anything that is not a hex color string."""
        if not isinstance(v, str) or not HEX_COLOR.match(v.strip()):
            msg = f"{info.field_name}: expected #RGB or #RRGGBB, got {v!r}"
            raise ValueError(msg)
        return v.strip()


def get_bundled_theme_path() -> Path:
    """Path of the theme file shipped with the package."""
    return resources.files("mountctl.data").joinpath("theme.toml")  # type: ignore[return-value]


def _read_colors(path: Path) -> dict[str, object]:
    """Read the ``[colors]`` table of a theme file.

    A missing or unreadable file yields an empty table.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: 'colors' is not a table", path)
        return {}
    return colors


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Load the bundled colors with the user's overrides applied.

    Args:
        user_path: Override file. Defaults to the user theme path.

    Returns:
        Validated colors. Defaults are used if the merged result is invalid.
    """
    colors = _read_colors(Path(get_bundled_theme_path()))
    if not colors:
        logger.error("Bundled theme is missing or empty, using built-in colors")

    override_path = user_path or get_user_theme_path()
    overrides = _read_colors(override_path)
    if overrides:
        logger.debug("Applying theme overrides from %s", override_path)

    try:
        return ThemeColors(**{**colors, **overrides})
    except ValidationError as e:
        logger.warning("Invalid theme in %s, using defaults: %s", override_path, e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich style table used by console markup.

    Args:
        colors: Colors to use. Loaded from the theme files if None.
    """
    c = colors or load_theme()
    return Theme(
        {
            "text": c.text,
            "muted": c.muted,
            "dim": c.muted,
            "header": c.header,
            "bold_header": f"bold {c.header}",
            "border": c.border,
            "success": c.success,
            "warning": c.warning,
            "error": f"bold {c.error}",
            "info": c.info,
            "mount.name": f"bold {c.text}",
            "state.active": f"bold {c.state_active}",
            "state.inactive": c.state_inactive,
            "state.error": f"bold {c.state_error}",
            "provenance.defined": c.provenance_defined,
            "provenance.system": c.provenance_system,
        }
    )


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Get the Rich theme, building it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
