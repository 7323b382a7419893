"""Clone command - create a working copy with live git progress."""

from __future__ import annotations

from pathlib import Path

import typer

from gitop.cli.commands._helpers import cancel_on_interrupt, default_directory_name
from gitop.cli.context import build_context
from gitop.core.result import Err, Ok
from gitop.git.options import GitCloneOptions
from gitop.git.repository import Repository, RepositoryProtocol
from gitop.output.console import ConsoleProtocol, Style
from gitop.output.errors import print_repository_error, repository_error_exit_code


class ConsoleProgress:
    """Repository delegate printing git's progress through the console."""

    def __init__(self, console: ConsoleProtocol, *, quiet: bool = False) -> None:
        self._console = console
        self._quiet = quiet
        self.lines = 0

    def will_start_task(self, repository: RepositoryProtocol, arguments: list[str]) -> None:
        if not self._quiet:
            self._console.print(f"cloning {repository.remote_url}", Style.INFO)

    def did_progress_clone(self, repository: RepositoryProtocol, progress: str) -> None:
        self.lines += 1
        if not self._quiet:
            self._console.progress(progress)


def clone(
    url: str = typer.Argument(..., help="Remote repository URL."),
    path: Path | None = typer.Argument(
        None, help="Destination (must be empty if it exists). Defaults to the repo name."
    ),
    branch: str | None = typer.Option(None, "--branch", "-b", help="Branch or tag to check out."),
    depth: int | None = typer.Option(None, "--depth", min=1, help="Shallow clone depth."),
    single_branch: bool = typer.Option(False, "--single-branch", help="Fetch one branch only."),
    recurse_submodules: bool = typer.Option(
        False, "--recurse-submodules", help="Clone submodules too."
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Hide git progress."),
) -> None:
    """Clone URL into PATH. Ctrl-C cancels the clone cleanly."""
    ctx = build_context()
    dest = path if path is not None else Path.cwd() / default_directory_name(url)

    repo = Repository.from_remote(url, ctx.credentials, config=ctx.config.git)
    progress = ConsoleProgress(ctx.console, quiet=quiet)
    repo.delegate = progress

    options = GitCloneOptions(
        branch=branch,
        depth=depth,
        single_branch=single_branch,
        recurse_submodules=recurse_submodules,
    )
    with cancel_on_interrupt(repo):
        result = repo.clone(dest, options)

    match result:
        case Ok(_):
            ctx.console.success(f"cloned into {repo.local_path}")
        case Err(error):
            print_repository_error(error, ctx.console)
            raise typer.Exit(code=repository_error_exit_code(error))
