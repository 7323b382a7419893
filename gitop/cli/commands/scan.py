"""Scan command - reference counts for every working copy in a directory."""

from __future__ import annotations

from pathlib import Path

import typer

from gitop.cli.context import build_context
from gitop.core.errors import ErrorCode
from gitop.git.multi import find_repos, get_summary, references_all
from gitop.git.references import ReferenceKind
from gitop.output.console import Style
from gitop.output.errors import print_repository_error


def scan(
    base: Path = typer.Argument(Path("."), help="Directory holding working copies."),
) -> None:
    """Find working copies one level below BASE and count their references."""
    ctx = build_context()

    repos = find_repos(base)
    if not repos:
        ctx.console.print(f"no working copies under {base}", Style.DIM)
        return

    items = references_all(repos, ctx.credentials, config=ctx.config.git)
    for item in items:
        if item.error is not None:
            ctx.console.header(item.path.name)
            print_repository_error(item.error, ctx.console)
            continue
        branches = item.count(ReferenceKind.BRANCH)
        tags = item.count(ReferenceKind.TAG)
        ctx.console.print(f"{item.path.name}: {branches} branches, {tags} tags")

    summary = get_summary(items)
    ctx.console.print(
        f"{summary['total']} repos, {summary['branches']} branches, "
        f"{summary['tags']} tags, {summary['errors']} errors",
        Style.DIM,
    )
    if summary["errors"]:
        raise typer.Exit(code=int(ErrorCode.GIT_ERROR))
