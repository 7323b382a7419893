"""Git repository abstraction.

A ``Repository`` is bound either to a remote URL (and may then be cloned) or
to an existing working copy. It runs at most one git operation at a time;
a call made while another is in flight fails immediately with
``ActiveOperationInProgress``. Every operation returns a Result.

Usage:
    repo = Repository.from_remote("https://example.com/repo.git", NoCredentials())
    repo.delegate = printer  # will_start_task / did_progress_clone

    match repo.clone(Path("/tmp/repo")):
        case Ok(_):
            refs = repo.fetch_references().unwrap_or([])
        case Err(CloneFailed(cancelled=True)):
            print("cancelled")
        case Err(error):
            print(f"clone failed: {error}")

    # From another thread, while clone() is blocking:
    repo.cancel()

Delegate hooks are always invoked on the thread that called ``clone`` or
``fetch_references``.
"""

from __future__ import annotations

import logging
import os
import shutil
import weakref
from collections.abc import Callable
from pathlib import Path
from types import TracebackType
from typing import Protocol

from gitop.core.config import GitConfig
from gitop.core.result import Err, Ok, Result
from gitop.git.credentials import Credentials, CredentialsProvider, credentials_env
from gitop.git.delegate import DelegateHandle, RepositoryDelegate
from gitop.git.errors import (
    CANCELLED_MESSAGE,
    ActiveOperationInProgress,
    CloneDirectoryNotEmpty,
    CloneFailed,
    RepositoryError,
    RepositoryLocalPathNotExists,
    RepositoryNotInitialized,
)
from gitop.git.guard import OperationGuard, OperationState
from gitop.git.options import GitCloneOptions, clone_arguments, references_arguments
from gitop.git.references import RepositoryReference, parse_references
from gitop.platform.process import ProcessError
from gitop.platform.process import run as run_process
from gitop.platform.process import stream as stream_process

__all__ = [
    "Repository",
    "RepositoryProtocol",
    "git_version",
    "is_repository_root",
]

logger = logging.getLogger(__name__)


class RepositoryProtocol(Protocol):
    """What application code may rely on, whatever the binding."""

    @property
    def remote_url(self) -> str | None: ...

    @property
    def local_path(self) -> Path | None: ...

    @property
    def credentials_provider(self) -> CredentialsProvider: ...

    @property
    def delegate(self) -> RepositoryDelegate | None: ...

    @delegate.setter
    def delegate(self, value: RepositoryDelegate | None) -> None: ...

    def clone(
        self, at: Path, options: GitCloneOptions | None = None
    ) -> Result[None, RepositoryError]: ...

    def fetch_references(self) -> Result[list[RepositoryReference], RepositoryError]: ...

    def cancel(self) -> None: ...


def is_repository_root(path: Path) -> bool:
    """True if ``path`` holds a ``.git`` directory or gitfile (worktrees, submodules)."""
    return path.is_dir() and (path / ".git").exists()


def git_version(config: GitConfig | None = None) -> Result[str, ProcessError]:
    """Return ``git --version`` output, e.g. to check git is installed."""
    cfg = config or GitConfig()
    result = run_process(cfg.command("--version"), cwd=Path.cwd(), timeout=10.0)
    return result.map(str.strip)


class Repository:
    """A git working copy, or a remote waiting to become one.

    Build instances through ``from_remote`` or ``at_path``.

    Attributes:
        remote_url: Remote the instance was built from (immutable).
        local_path: Working copy path, set at construction or by clone.
    """

    def __init__(
        self,
        *,
        credentials_provider: CredentialsProvider,
        remote_url: str | None = None,
        local_path: Path | None = None,
        config: GitConfig | None = None,
    ) -> None:
        if (remote_url is None) == (local_path is None):
            raise ValueError("exactly one of remote_url and local_path must be given")
        self._remote_url = remote_url
        self._local_path = local_path
        self._credentials_provider = credentials_provider
        self._config = config or GitConfig()
        self._guard = OperationGuard()
        self._delegate = DelegateHandle()
        # Discarding the instance cancels whatever is still running.
        self._finalizer = weakref.finalize(self, self._guard.cancel)

    @classmethod
    def from_remote(
        cls,
        remote_url: str,
        credentials_provider: CredentialsProvider,
        *,
        config: GitConfig | None = None,
    ) -> Repository:
        """Bind a new instance to a remote. Never fails."""
        return cls(credentials_provider=credentials_provider, remote_url=remote_url, config=config)

    @classmethod
    def at_path(
        cls,
        local_path: Path | str,
        credentials_provider: CredentialsProvider,
        *,
        config: GitConfig | None = None,
    ) -> Repository | None:
        """Bind a new instance to an existing working copy.

        Returns:
            None if the path does not exist or is not a repository root.
        """
        path = Path(local_path).expanduser()
        if not is_repository_root(path):
            logger.debug("not a repository root: %s", path)
            return None
        return cls(
            credentials_provider=credentials_provider,
            local_path=path.resolve(),
            config=config,
        )

    # -------------------------------------------------------------------------
    # Identity and state
    # -------------------------------------------------------------------------

    @property
    def remote_url(self) -> str | None:
        return self._remote_url

    @property
    def local_path(self) -> Path | None:
        return self._local_path

    @property
    def credentials_provider(self) -> CredentialsProvider:
        return self._credentials_provider

    @property
    def config(self) -> GitConfig:
        return self._config

    @property
    def delegate(self) -> RepositoryDelegate | None:
        """Event receiver, held weakly."""
        return self._delegate.get()

    @delegate.setter
    def delegate(self, value: RepositoryDelegate | None) -> None:
        self._delegate.set(value)

    @property
    def state(self) -> OperationState:
        """State of the in-flight operation, IDLE when none."""
        return self._guard.state

    @property
    def last_state(self) -> OperationState:
        """How the previous operation ended (IDLE before the first one)."""
        return self._guard.last_state

    @property
    def is_busy(self) -> bool:
        return self._guard.is_busy

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def clone(
        self, at: Path, options: GitCloneOptions | None = None
    ) -> Result[None, RepositoryError]:
        """Create a working copy of the remote at ``at``.

        ``at`` is created (with parents) when missing; when it exists it must
        be an empty directory. Blocks until git exits.

        Returns:
            Ok(None) with ``local_path`` set to ``at`` on success.
            Err(ActiveOperationInProgress) if another operation is running.
            Err(RepositoryNotInitialized) if built from a local path.
            Err(CloneDirectoryNotEmpty) if ``at`` is not an empty directory.
            Err(CloneFailed) if git failed or was cancelled.
        """
        if not self._guard.try_acquire("clone"):
            return Err(self._busy())
        try:
            return self._settle(self._clone(Path(at), options or GitCloneOptions()))
        finally:
            self._guard.release()

    def fetch_references(self) -> Result[list[RepositoryReference], RepositoryError]:
        """List the working copy's references in git's native order.

        Returns:
            Ok(references), possibly empty.
            Err(ActiveOperationInProgress) if another operation is running.
            Err(RepositoryNotInitialized) if no local path is bound yet.
            Err(RepositoryLocalPathNotExists) if the working copy or its
                ``.git`` vanished.
            Err(CloneFailed) if git failed or was cancelled.
        """
        if not self._guard.try_acquire("fetch_references"):
            return Err(self._busy())
        try:
            return self._settle(self._fetch_references())
        finally:
            self._guard.release()

    def cancel(self) -> None:
        """Ask the in-flight operation to stop; no-op when idle.

        Returns without waiting. The blocked ``clone``/``fetch_references``
        call reports ``CloneFailed(cancelled=True)``.
        """
        if self._guard.cancel():
            logger.debug("cancellation requested for %r", self)

    def close(self) -> None:
        """Cancel any in-flight operation."""
        self.cancel()

    def __enter__(self) -> Repository:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        binding = self._local_path if self._local_path is not None else self._remote_url
        return f"Repository({binding!s}, state={self.state})"

    # -------------------------------------------------------------------------
    # Internals (guard held)
    # -------------------------------------------------------------------------

    def _clone(self, target: Path, options: GitCloneOptions) -> Result[None, RepositoryError]:
        if self._remote_url is None:
            return Err(RepositoryNotInitialized(required="remote"))

        target = target.expanduser().absolute()
        prepared = self._prepare_target(target)
        if isinstance(prepared, Err):
            return prepared
        created = prepared.value

        args = self._config.command(*clone_arguments(self._remote_url, target, options))
        result = self._execute(
            args,
            cwd=target.parent,
            on_line=lambda line: self._delegate.did_progress_clone(self, line),
            forward_stderr=True,
        )
        if isinstance(result, Err):
            self._restore_target(target, created=created)
            return result

        self._local_path = target
        return Ok(None)

    def _fetch_references(self) -> Result[list[RepositoryReference], RepositoryError]:
        path = self._local_path
        if path is None:
            return Err(RepositoryNotInitialized(required="local_path"))
        # git -C would otherwise walk up into an enclosing repository.
        if not is_repository_root(path):
            return Err(RepositoryLocalPathNotExists(path=path))

        output: list[str] = []
        args = self._config.command(*references_arguments(path))
        result = self._execute(args, cwd=path, on_line=output.append, forward_stderr=False)
        if isinstance(result, Err):
            return result
        return Ok(parse_references(output))

    def _execute(
        self,
        args: list[str],
        *,
        cwd: Path,
        on_line: Callable[[str], None],
        forward_stderr: bool,
    ) -> Result[None, RepositoryError]:
        """Announce, launch and await one git process."""
        operation = self._guard.active
        assert operation is not None, "guard must be held"
        token = operation.token
        if token.is_cancelled:
            return Err(CloneFailed(message=CANCELLED_MESSAGE, returncode=-1, cancelled=True))

        env = {**os.environ, **credentials_env(self._remote_url, self._resolve_credentials())}

        self._delegate.will_start_task(self, args)
        self._guard.transition(OperationState.RUNNING)
        logger.debug("%s: running %s", operation.kind, " ".join(args))

        result = stream_process(
            args,
            cwd=cwd,
            on_line=on_line,
            env=env,
            cancel=token,
            forward_stderr=forward_stderr,
            tail_lines=self._config.diagnostic_lines,
            terminate_timeout=self._config.terminate_timeout,
            timeout=self._config.timeout,
        )
        match result:
            case Ok(_):
                return Ok(None)
            case Err(error):
                logger.debug("%s: %s", operation.kind, error)
                return Err(_clone_failed(error))

    def _resolve_credentials(self) -> Credentials | None:
        if self._remote_url is None:
            return None
        return self._credentials_provider.credentials_for(self._remote_url)

    def _prepare_target(self, target: Path) -> Result[Path | None, RepositoryError]:
        """Check or create the clone target.

        Returns:
            Ok(topmost directory created), or Ok(None) when ``target`` existed.
        """
        try:
            if target.exists():
                if not target.is_dir() or any(target.iterdir()):
                    return Err(CloneDirectoryNotEmpty(path=target))
                return Ok(None)
            topmost = target
            while not topmost.parent.exists() and topmost.parent != topmost:
                topmost = topmost.parent
            target.mkdir(parents=True)
        except OSError as e:
            return Err(CloneFailed(message=f"cannot prepare {target}: {e}", returncode=-1))
        return Ok(topmost)

    def _restore_target(self, target: Path, *, created: Path | None) -> None:
        """Leave the filesystem as clone() found it so a retry is accepted."""
        try:
            if created is not None:
                shutil.rmtree(created)
                return
            for child in target.iterdir():
                if child.is_dir() and not child.is_symlink():
                    shutil.rmtree(child)
                else:
                    child.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("could not clean up %s after failed clone: %s", target, e)

    def _busy(self) -> ActiveOperationInProgress:
        active = self._guard.active
        return ActiveOperationInProgress(active=active.kind if active else "operation")

    def _settle[T](self, result: Result[T, RepositoryError]) -> Result[T, RepositoryError]:
        match result:
            case Ok(_):
                state = OperationState.COMPLETED
            case Err(CloneFailed(cancelled=True)):
                state = OperationState.CANCELLED
            case _:
                state = OperationState.FAILED
        self._guard.transition(state)
        return result


def _clone_failed(error: ProcessError) -> CloneFailed:
    if error.cancelled:
        return CloneFailed(message=CANCELLED_MESSAGE, returncode=error.returncode, cancelled=True)
    return CloneFailed(message=error.diagnostic, returncode=error.returncode)
