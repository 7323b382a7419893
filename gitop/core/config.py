"""Typed configuration loading and access.

The config file is optional; every value has a default. Layout:

    [git]
    executable = "git"          # or ["wsl", "git"] to use a command prefix
    timeout = 0                 # seconds per operation, 0 disables
    terminate_timeout = 2.0     # grace period between SIGTERM and SIGKILL
    diagnostic_lines = 20       # stderr lines kept for error messages
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_int, get_str, get_str_list, get_table

__all__ = [
    "Config",
    "ConfigError",
    "GitConfig",
    "load_config",
    "load_config_or_default",
    "DEFAULT_GIT_EXECUTABLE",
    "DEFAULT_TERMINATE_TIMEOUT",
    "DEFAULT_DIAGNOSTIC_LINES",
]

DEFAULT_GIT_EXECUTABLE = "git"
DEFAULT_TERMINATE_TIMEOUT = 2.0
DEFAULT_DIAGNOSTIC_LINES = 20


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GitConfig:
    """How the git executable is invoked.

    Attributes:
        executable: Command prefix used in place of ``git``.
        timeout: Wall-clock limit per operation, None for no limit.
        terminate_timeout: Seconds to wait after SIGTERM before SIGKILL.
        diagnostic_lines: Number of trailing stderr lines kept for errors.
    """

    executable: tuple[str, ...] = (DEFAULT_GIT_EXECUTABLE,)
    timeout: float | None = None
    terminate_timeout: float = DEFAULT_TERMINATE_TIMEOUT
    diagnostic_lines: int = DEFAULT_DIAGNOSTIC_LINES

    def command(self, *args: str) -> list[str]:
        """Build a full command line for the given git arguments."""
        return [*self.executable, *args]


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    git: GitConfig = field(default_factory=GitConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        git: StrDict = get_table(data, "git") or {}

        executable: tuple[str, ...]
        exe_list = get_str_list(git, "executable")
        if exe_list:
            executable = tuple(exe_list)
        else:
            executable = (get_str(git, "executable") or DEFAULT_GIT_EXECUTABLE,)

        timeout = get_float(git, "timeout")
        if timeout is not None and timeout < 0:
            raise ValueError(f"git.timeout must be >= 0, got {timeout}")

        terminate_timeout = get_float(git, "terminate_timeout")
        if terminate_timeout is not None and terminate_timeout <= 0:
            raise ValueError(f"git.terminate_timeout must be > 0, got {terminate_timeout}")

        diagnostic_lines = get_int(git, "diagnostic_lines")
        if diagnostic_lines is not None and diagnostic_lines < 1:
            raise ValueError(f"git.diagnostic_lines must be >= 1, got {diagnostic_lines}")

        return cls(
            git=GitConfig(
                executable=executable,
                timeout=timeout or None,
                terminate_timeout=terminate_timeout or DEFAULT_TERMINATE_TIMEOUT,
                diagnostic_lines=diagnostic_lines or DEFAULT_DIAGNOSTIC_LINES,
            )
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and syntax errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Config:
    """Load config from file, or fall back to defaults when it is unusable."""
    result = load_config(path)
    if isinstance(result, Ok):
        return result.value
    return Config()
