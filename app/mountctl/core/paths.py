"""XDG-compliant path management for mountctl.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and state storage, plus the system
locations the tool manages.

XDG defaults:
- Config: ~/.config/mountctl/
- State: ~/.local/state/mountctl/
"""

import os
from pathlib import Path

from mountctl.core.errors import DirectoryCreateFailed

# Application identifier for directory naming
APP_NAME = "mountctl"

# Environment variable that overrides the config file location
CONFIG_ENV_VAR = "MOUNTCTL_CONFIG"

# Installed units live here; mount units in /lib/systemd are vendor-owned
DEFAULT_SYSTEMD_DIR = Path("/etc/systemd/system")

# Base directory for new mount targets (matches the historic tool)
DEFAULT_MOUNT_BASE = Path("/custom-mounts")


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/mountctl/ (or XDG_CONFIG_HOME/mountctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data is the action log, which should persist between runs
    but is not configuration.

    Returns:
        Path to ~/.local/state/mountctl/ (or XDG_STATE_HOME/mountctl/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the config file path.

    ``$MOUNTCTL_CONFIG`` wins over the XDG location so that system-wide
    installs can keep the file under /etc.

    Returns:
        Path to the config.toml file.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return get_config_dir() / "config.toml"


def get_default_definitions_dir() -> Path:
    """Get the default Unit Definition Store directory.

    Returns:
        Path to ~/.config/mountctl/units.
    """
    return get_config_dir() / "units"


def get_action_log_path() -> Path:
    """Get the default action log path.

    Returns:
        Path to ~/.local/state/mountctl/actions.jsonl.
    """
    return get_state_dir() / "actions.jsonl"


def get_user_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to ~/.config/mountctl/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        DirectoryCreateFailed: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise DirectoryCreateFailed(msg, str(e)) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise DirectoryCreateFailed(msg, str(e)) from e
    return path
