"""Refs command - list the references of a working copy."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer

from gitop.cli.context import build_context
from gitop.core.errors import ErrorCode
from gitop.core.result import Err, Ok
from gitop.git.references import ReferenceKind, RepositoryReference
from gitop.git.repository import Repository
from gitop.output.console import ConsoleProtocol, Style
from gitop.output.errors import print_repository_error, repository_error_exit_code


class KindFilter(str, Enum):
    all = "all"
    branch = "branch"
    remote = "remote"
    tag = "tag"

    def matches(self, ref: RepositoryReference) -> bool:
        match self:
            case KindFilter.all:
                return True
            case KindFilter.branch:
                return ref.kind is ReferenceKind.BRANCH
            case KindFilter.remote:
                return ref.kind is ReferenceKind.REMOTE_BRANCH
            case KindFilter.tag:
                return ref.kind is ReferenceKind.TAG
        return False


def print_references(refs: list[RepositoryReference], console: ConsoleProtocol) -> None:
    for ref in refs:
        console.print(f"{ref.target[:12]}  {str(ref.kind):<13}  {ref.short_name}")


def refs(
    path: Path = typer.Argument(Path("."), help="Working copy to inspect."),
    kind: KindFilter = typer.Option(KindFilter.all, "--kind", help="Filter by reference kind."),
) -> None:
    """List references of the working copy at PATH, in git's order."""
    ctx = build_context()

    repo = Repository.at_path(path, ctx.credentials, config=ctx.config.git)
    if repo is None:
        ctx.console.error(f"not a git working copy: {path}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    match repo.fetch_references():
        case Ok(references):
            selected = [ref for ref in references if kind.matches(ref)]
            if not selected:
                ctx.console.print("no references", Style.DIM)
                return
            print_references(selected, ctx.console)
        case Err(error):
            print_repository_error(error, ctx.console)
            raise typer.Exit(code=repository_error_exit_code(error))
