from __future__ import annotations

from pathlib import Path

import pytest
import typer

from gitop.cli.context import CLIContext
from gitop.core.config import Config
from gitop.core.errors import ErrorCode
from gitop.git.credentials import NoCredentials
from gitop.output.console import MockConsole, Style
from gitop.test.git._fake_git import fake_git, recorded_calls

URL = "https://example.com/org/repo.git"


def _ctx(tmp_path: Path, **fake: object) -> CLIContext:
    return CLIContext(
        config=Config(git=fake_git(tmp_path / "bin", **fake)),  # type: ignore[arg-type]
        console=MockConsole(),
        credentials=NoCredentials(),
    )


def _clone(dest: Path | None, *, quiet: bool = False, depth: int | None = None) -> None:
    import gitop.cli.commands.clone as clone_cmd

    clone_cmd.clone(
        url=URL,
        path=dest,
        branch=None,
        depth=depth,
        single_branch=False,
        recurse_submodules=False,
        quiet=quiet,
    )


def test_clone_prints_progress(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import gitop.cli.commands.clone as clone_cmd

    ctx = _ctx(tmp_path)
    monkeypatch.setattr(clone_cmd, "build_context", lambda: ctx)
    dest = tmp_path / "dest"

    _clone(dest)

    console = ctx.console
    assert isinstance(console, MockConsole)
    assert console.messages[0] == f"cloning {URL}"
    assert "Receiving objects: 100% (2/2), done." in console.messages
    assert console.messages[-1] == f"OK cloned into {dest}"


def test_clone_quiet_hides_progress(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import gitop.cli.commands.clone as clone_cmd

    ctx = _ctx(tmp_path)
    monkeypatch.setattr(clone_cmd, "build_context", lambda: ctx)

    _clone(tmp_path / "dest", quiet=True)

    console = ctx.console
    assert isinstance(console, MockConsole)
    assert console.count(Style.DIM) == 0
    assert console.count(Style.SUCCESS) == 1


def test_clone_passes_options(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import gitop.cli.commands.clone as clone_cmd

    ctx = _ctx(tmp_path)
    monkeypatch.setattr(clone_cmd, "build_context", lambda: ctx)

    _clone(tmp_path / "dest", depth=1)

    [call] = recorded_calls(tmp_path / "bin")
    assert call[call.index("--depth") + 1] == "1"


def test_clone_default_destination(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import gitop.cli.commands.clone as clone_cmd

    ctx = _ctx(tmp_path)
    monkeypatch.setattr(clone_cmd, "build_context", lambda: ctx)
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)

    _clone(None)

    assert (work / "repo" / ".git").is_dir()


def test_clone_non_empty_target_is_user_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    import gitop.cli.commands.clone as clone_cmd

    ctx = _ctx(tmp_path)
    monkeypatch.setattr(clone_cmd, "build_context", lambda: ctx)
    dest = tmp_path / "dest"
    dest.mkdir()
    (dest / "file").write_text("x")

    with pytest.raises(typer.Exit) as exc:
        _clone(dest)

    assert exc.value.exit_code == int(ErrorCode.USER_ERROR)


def test_clone_git_failure_exit_code(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import gitop.cli.commands.clone as clone_cmd

    ctx = _ctx(tmp_path, clone="fail")
    monkeypatch.setattr(clone_cmd, "build_context", lambda: ctx)

    with pytest.raises(typer.Exit) as exc:
        _clone(tmp_path / "dest")

    assert exc.value.exit_code == int(ErrorCode.GIT_ERROR)
    console = ctx.console
    assert isinstance(console, MockConsole)
    assert console.find("git failed (exit 128)")
