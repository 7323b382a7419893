from __future__ import annotations

from dataclasses import dataclass

import typer

from gitop.core.config import Config, load_config
from gitop.core.errors import ErrorCode
from gitop.core.result import Err
from gitop.git.credentials import CredentialsProvider, EnvCredentialsProvider
from gitop.git.repository import git_version
from gitop.output.console import ConsoleProtocol, RichConsole
from gitop.platform.paths import default_config_path


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol
    credentials: CredentialsProvider


def build_context(*, require_git: bool = True) -> CLIContext:
    config_path = default_config_path()

    config = Config()
    if config_path.exists():
        config_result = load_config(config_path)
        if isinstance(config_result, Err):
            typer.echo(f"error: {config_result.error.message}", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
        config = config_result.value

    if require_git:
        version = git_version(config.git)
        if isinstance(version, Err):
            typer.echo(f"error: git is not usable: {version.error.diagnostic}", err=True)
            typer.echo("hint: install git or set [git].executable in the config", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(
        config=config,
        console=RichConsole(),
        credentials=EnvCredentialsProvider(),
    )
