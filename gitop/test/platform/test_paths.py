"""Tests for gitop.platform.paths module."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from gitop.platform.paths import (
    APP_NAME,
    CONFIG_ENV_VAR,
    clear_caches,
    default_config_path,
    home,
    user_config_dir,
)


@pytest.fixture(autouse=True)
def clear_path_caches() -> Iterator[None]:
    """Clear path caches around each test."""
    clear_caches()
    yield
    clear_caches()


class TestHome:
    """Test home directory detection."""

    def test_returns_path(self) -> None:
        assert isinstance(home(), Path)

    def test_uses_home_on_unix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", "/home/testuser")
        with patch("gitop.platform.paths._is_windows", return_value=False):
            clear_caches()
            assert home() == Path("/home/testuser")

    def test_uses_userprofile_on_windows(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("USERPROFILE", r"C:\Users\TestUser")
        with patch("gitop.platform.paths._is_windows", return_value=True):
            clear_caches()
            assert home() == Path(r"C:\Users\TestUser")

    def test_is_cached(self) -> None:
        assert home() is home()


class TestUserConfigDir:
    def test_xdg_config_home(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", "/xdg")
        with patch("gitop.platform.paths._is_windows", return_value=False):
            clear_caches()
            assert user_config_dir() == Path("/xdg") / APP_NAME

    def test_falls_back_to_dot_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", "/home/u")
        with patch("gitop.platform.paths._is_windows", return_value=False):
            clear_caches()
            assert user_config_dir() == Path("/home/u/.config") / APP_NAME

    def test_appdata_on_windows(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APPDATA", r"C:\AppData")
        with patch("gitop.platform.paths._is_windows", return_value=True):
            clear_caches()
            assert user_config_dir() == Path(r"C:\AppData") / APP_NAME


class TestDefaultConfigPath:
    def test_env_override(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        target = tmp_path / "custom.toml"
        monkeypatch.setenv(CONFIG_ENV_VAR, str(target))
        assert default_config_path() == target

    def test_default_location(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        monkeypatch.setenv("XDG_CONFIG_HOME", "/xdg")
        with patch("gitop.platform.paths._is_windows", return_value=False):
            clear_caches()
            assert default_config_path() == Path("/xdg/gitop/config.toml")
