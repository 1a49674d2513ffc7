"""mountctl configuration and settings.

This module provides the configuration model and I/O functions. The
configuration is constructed once at startup and handed to every
component; nothing else reads the file.

Configuration is stored in ~/.config/mountctl/config.toml unless
``--config`` or ``$MOUNTCTL_CONFIG`` point elsewhere.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mountctl.core.errors import ConfigIOError
from mountctl.core.paths import (
    DEFAULT_MOUNT_BASE,
    DEFAULT_SYSTEMD_DIR,
    get_action_log_path,
    get_config_path,
    get_default_definitions_dir,
)

# Keys accepted by `mountctl config set`
CONFIG_KEYS: tuple[str, ...] = (
    "definitions_dir",
    "mount_base",
    "systemd_dir",
    "credentials_dir",
    "action_log",
)


class MountctlConfig(BaseModel):
    """Configuration for mountctl.

    Attributes:
        definitions_dir: Directory holding the ``*.mount`` definitions.
        mount_base: Base directory suggested for new mount targets.
        systemd_dir: Directory the units are installed into.
        credentials_dir: Credential root. None means definitions_dir.
        action_log: JSONL action log. None means the XDG state location.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    definitions_dir: Annotated[
        Path,
        Field(default_factory=get_default_definitions_dir, description="Definition directory"),
    ]
    mount_base: Annotated[
        Path,
        Field(description="Default base for mount targets"),
    ] = DEFAULT_MOUNT_BASE
    systemd_dir: Annotated[
        Path,
        Field(description="systemd unit directory"),
    ] = DEFAULT_SYSTEMD_DIR
    credentials_dir: Annotated[
        Path | None,
        Field(description="Credential root (None = definitions_dir)"),
    ] = None
    action_log: Annotated[
        Path | None,
        Field(description="Action log path (None = state directory)"),
    ] = None

    @field_validator("definitions_dir", "mount_base", "systemd_dir", "credentials_dir", "action_log")
    @classmethod
    def validate_absolute(cls, v: Path | None) -> Path | None:
        """Require absolute paths so the tool behaves the same from any cwd."""
        if v is None:
            return v
        expanded = v.expanduser()
        if not expanded.is_absolute():
            msg = f"path must be absolute, got '{v}'"
            raise ValueError(msg)
        return expanded

    @property
    def effective_credentials_dir(self) -> Path:
        """Credential root actually used."""
        return self.credentials_dir or self.definitions_dir

    @property
    def effective_action_log(self) -> Path:
        """Action log path actually used."""
        return self.action_log or get_action_log_path()


def load_config(path: Path | None = None) -> MountctlConfig:
    """Load configuration from a TOML file.

    A missing file is not an error: defaults apply until the first
    ``config set``.

    Args:
        path: Path to the config file. If None, uses the default location.

    Returns:
        Validated MountctlConfig object.

    Raises:
        ConfigIOError: If the file cannot be read, parsed or validated.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return MountctlConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigIOError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigIOError(f"Failed to read config {config_path}: {e}") from e

    try:
        return MountctlConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigIOError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: MountctlConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The configuration to save.
        path: Path to save the config. If None, uses the default location.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigIOError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigIOError(f"Failed to write config {config_path}: {e}") from e

    return config_path


def set_config_value(config: MountctlConfig, key: str, value: str) -> MountctlConfig:
    """Return a copy of the configuration with one key changed.

    An empty value resets an optional key to its default.

    Args:
        config: Current configuration.
        key: One of CONFIG_KEYS.
        value: New value as given on the command line.

    Returns:
        New validated configuration.

    Raises:
        ConfigIOError: If the key is unknown or the value is invalid.
    """
    if key not in CONFIG_KEYS:
        raise ConfigIOError(f"Unknown config key '{key}'. Valid keys: {', '.join(CONFIG_KEYS)}")

    data = config.model_dump()
    if value == "":
        data.pop(key, None)
    else:
        data[key] = value

    try:
        return MountctlConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigIOError(f"Invalid value for {key}: {e}") from e


def _config_to_dict(config: MountctlConfig) -> dict[str, object]:
    """Convert the configuration to a dictionary for TOML serialization.

    Only includes values that differ from the defaults.
    """
    defaults = MountctlConfig()
    result: dict[str, object] = {}
    for key in CONFIG_KEYS:
        value = getattr(config, key)
        if value is not None and value != getattr(defaults, key):
            result[key] = str(value)
    return result
