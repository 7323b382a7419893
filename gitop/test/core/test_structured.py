"""Tests for gitop.core.structured module."""

from __future__ import annotations

from gitop.core.structured import (
    as_str_dict,
    get_float,
    get_int,
    get_str,
    get_str_list,
    get_table,
    is_str_dict,
)


class TestStrDict:
    def test_is_str_dict(self) -> None:
        assert is_str_dict({"a": 1}) is True
        assert is_str_dict({1: "a"}) is False
        assert is_str_dict(["a"]) is False

    def test_as_str_dict(self) -> None:
        assert as_str_dict({"a": 1}) == {"a": 1}
        assert as_str_dict("nope") is None

    def test_get_table(self) -> None:
        assert get_table({"git": {"timeout": 1}}, "git") == {"timeout": 1}
        assert get_table({"git": "x"}, "git") is None
        assert get_table({}, "git") is None


class TestScalars:
    def test_get_str_strips(self) -> None:
        assert get_str({"k": "  git "}, "k") == "git"
        assert get_str({"k": "   "}, "k") is None
        assert get_str({"k": 1}, "k") is None

    def test_get_str_list(self) -> None:
        assert get_str_list({"k": ["wsl", " git "]}, "k") == ["wsl", "git"]
        assert get_str_list({"k": ["git", 1]}, "k") is None
        assert get_str_list({"k": "git"}, "k") is None

    def test_get_int_rejects_bool(self) -> None:
        assert get_int({"k": 3}, "k") == 3
        assert get_int({"k": True}, "k") is None
        assert get_int({"k": 1.5}, "k") is None

    def test_get_float_accepts_int(self) -> None:
        assert get_float({"k": 2}, "k") == 2.0
        assert get_float({"k": 0.5}, "k") == 0.5
        assert get_float({"k": False}, "k") is None
        assert get_float({}, "k") is None
