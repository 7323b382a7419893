from __future__ import annotations

import os
from pathlib import Path

import typer

from gitop import __version__
from gitop.cli.commands.clone import clone
from gitop.cli.commands.refs import refs
from gitop.cli.commands.scan import scan
from gitop.core.errors import ErrorCode
from gitop.output.logging import configure_logging
from gitop.platform.paths import CONFIG_ENV_VAR


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command()(clone)
app.command()(refs)
app.command()(scan)


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log git commands and exits."),
    config: Path | None = typer.Option(
        None,
        "--config",
        help=f"Config file (overrides ${CONFIG_ENV_VAR} and the default location)",
    ),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(code=0)

    configure_logging(verbose=verbose)

    if config is not None:
        path = config.expanduser()
        if not path.is_file():
            typer.echo(f"error: --config '{path}' does not exist", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        os.environ[CONFIG_ENV_VAR] = str(path.resolve())


def main() -> None:
    app()
