"""User-level directory locations.

Only the global config location lives here; working copies are wherever the
caller puts them.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

__all__ = [
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "default_config_path",
    "home",
    "user_config_dir",
]

APP_NAME = "gitop"

# Overrides the config file location entirely.
CONFIG_ENV_VAR = "GITOP_CONFIG"


def _is_windows() -> bool:
    return os.name == "nt"


@lru_cache(maxsize=1)
def home() -> Path:
    """Get the user's home directory, honouring HOME/USERPROFILE first."""
    var = "USERPROFILE" if _is_windows() else "HOME"
    value = os.environ.get(var)
    if value:
        return Path(value)
    return Path.home()


@lru_cache(maxsize=1)
def user_config_dir() -> Path:
    """Get the user-level configuration directory.

    Location: ~/.config/gitop/ (Linux/macOS, or $XDG_CONFIG_HOME/gitop) and
    %APPDATA%/gitop on Windows.
    """
    if _is_windows():
        app_data = os.environ.get("APPDATA")
        if app_data:
            return Path(app_data) / APP_NAME
        return home() / "AppData" / "Roaming" / APP_NAME

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME
    return home() / ".config" / APP_NAME


def default_config_path() -> Path:
    """Config file path: $GITOP_CONFIG, else config.toml in user_config_dir()."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return user_config_dir() / "config.toml"


def clear_caches() -> None:
    """Clear cached paths (tests change HOME/XDG_CONFIG_HOME)."""
    home.cache_clear()
    user_config_dir.cache_clear()
