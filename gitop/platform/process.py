"""Subprocess execution with Result-based error handling.

Two entry points:

- ``run`` executes a short command to completion and returns its stdout.
- ``stream`` executes a long-running command, hands every output line to a
  callback as soon as it is produced and honours a ``CancelToken``.

``stream`` reads stdout and stderr on two daemon threads that feed a queue;
the calling thread drains the queue, so callbacks always run on the caller's
thread and a slow callback never stalls the child on a full pipe.

Usage:
    token = CancelToken()
    result = stream(["git", "clone", "--progress", url, dest], cwd=parent,
                    on_line=print, cancel=token, forward_stderr=True)
    match result:
        case Ok(_):
            print("done")
        case Err(error) if error.cancelled:
            print("cancelled")
        case Err(error):
            print(error.stderr)
"""

from __future__ import annotations

import logging
import os
import queue
import signal
import subprocess
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from gitop.core.result import Err, Ok, Result
from gitop.platform.cancel import CancelToken

__all__ = ["ProcessError", "run", "stream"]

logger = logging.getLogger(__name__)

_POSIX = os.name == "posix"
_POLL_INTERVAL = 0.05
_STDOUT = "stdout"
_STDERR = "stderr"


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, -1 when the process could not be started or
            had to be abandoned.
        stdout: Standard output (only the tail for streamed commands).
        stderr: Standard error (only the tail for streamed commands).
        cancelled: Termination was requested through a CancelToken.
        timed_out: The wall-clock timeout expired.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    cancelled: bool = False
    timed_out: bool = False

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        if self.cancelled:
            return f"{cmd_str} cancelled"
        return f"{cmd_str} failed (exit {self.returncode})"

    @property
    def diagnostic(self) -> str:
        """Best human-readable explanation of the failure."""
        return self.stderr.strip() or self.stdout.strip() or str(self)


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=e.stdout if isinstance(e.stdout, str) else "",
                stderr=f"Command timed out after {timeout}s",
                timed_out=True,
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


class _Terminator:
    """Signals a child (and, on POSIX, its whole process group) at most
    until it has been reaped."""

    def __init__(self, proc: subprocess.Popen[str]) -> None:
        self._proc = proc
        self._lock = threading.Lock()
        self._reaped = False

    def terminate(self) -> None:
        self._send(force=False)

    def kill(self) -> None:
        self._send(force=True)

    def reaped(self) -> None:
        with self._lock:
            self._reaped = True

    def _send(self, *, force: bool) -> None:
        with self._lock:
            if self._reaped or self._proc.returncode is not None:
                return
            try:
                if _POSIX:
                    sig = signal.SIGKILL if force else signal.SIGTERM
                    # start_new_session makes the child its own group leader.
                    os.killpg(self._proc.pid, sig)
                elif force:
                    self._proc.kill()
                else:
                    self._proc.terminate()
            except OSError as e:
                logger.debug("signal to pid %s failed: %s", self._proc.pid, e)


def _pump(pipe: IO[str], kind: str, sink: queue.Queue[tuple[str, str | None]]) -> None:
    """Forward non-blank lines from ``pipe`` into ``sink``, then an EOF marker.

    Text mode uses universal newlines, so carriage-return progress updates
    arrive as separate lines.
    """
    try:
        for raw in pipe:
            line = raw.rstrip("\n")
            if line.strip():
                sink.put((kind, line))
    except (OSError, ValueError) as e:
        logger.debug("%s reader stopped: %s", kind, e)
    finally:
        sink.put((kind, None))
        try:
            pipe.close()
        except OSError:
            pass


def stream(
    cmd: list[str],
    cwd: Path,
    on_line: Callable[[str], None],
    *,
    env: dict[str, str] | None = None,
    cancel: CancelToken | None = None,
    forward_stderr: bool = False,
    tail_lines: int = 20,
    terminate_timeout: float = 2.0,
    timeout: float | None = None,
) -> Result[None, ProcessError]:
    """Execute a command, streaming its output line by line.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        on_line: Called on the calling thread for each stdout line (and each
            stderr line when ``forward_stderr`` is set), in arrival order.
        env: Full environment for the child (current env if None).
        cancel: Token whose cancellation terminates the child.
        forward_stderr: Also hand stderr lines to ``on_line``.
        tail_lines: Number of trailing lines kept per stream for errors.
        terminate_timeout: Seconds between SIGTERM and SIGKILL.
        timeout: Wall-clock limit (None for no limit).

    Returns:
        Ok(None) if the command exited 0, Err(ProcessError) otherwise. A
        command stopped through ``cancel`` yields ``cancelled=True``.
    """
    command = tuple(cmd)
    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(cwd),
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            start_new_session=_POSIX,
        )
    except OSError as e:
        return Err(ProcessError(command=command, returncode=-1, stdout="", stderr=str(e)))

    assert proc.stdout is not None and proc.stderr is not None
    terminator = _Terminator(proc)
    lines: queue.Queue[tuple[str, str | None]] = queue.Queue()
    for pipe, kind in ((proc.stdout, _STDOUT), (proc.stderr, _STDERR)):
        threading.Thread(
            target=_pump,
            args=(pipe, kind, lines),
            name=f"gitop-{kind}-{proc.pid}",
            daemon=True,
        ).start()

    if cancel is not None:
        cancel.on_cancel(terminator.terminate)

    stdout_tail: deque[str] = deque(maxlen=tail_lines)
    stderr_tail: deque[str] = deque(maxlen=tail_lines)
    deadline = time.monotonic() + timeout if timeout else None
    kill_at: float | None = None
    abandon_at: float | None = None
    timed_out = False
    open_streams = 2

    try:
        while True:
            now = time.monotonic()
            if kill_at is None and cancel is not None and cancel.is_cancelled:
                kill_at = now + terminate_timeout
            if deadline is not None and not timed_out and now >= deadline:
                timed_out = True
                terminator.terminate()
                kill_at = now + terminate_timeout
            if kill_at is not None and abandon_at is None and now >= kill_at:
                logger.debug("pid %s ignored SIGTERM, killing", proc.pid)
                terminator.kill()
                abandon_at = now + terminate_timeout
            if abandon_at is not None and now >= abandon_at:
                logger.warning("pid %s still holds its pipes after SIGKILL, abandoning", proc.pid)
                break

            if open_streams == 0:
                if proc.poll() is not None:
                    break
                time.sleep(_POLL_INTERVAL)
                continue

            try:
                kind, line = lines.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                continue

            if line is None:
                open_streams -= 1
                continue
            if kind == _STDERR:
                stderr_tail.append(line)
                if not forward_stderr:
                    continue
            else:
                stdout_tail.append(line)
            on_line(line)
    finally:
        if proc.poll() is None:
            terminator.kill()
            try:
                proc.wait(timeout=terminate_timeout)
            except subprocess.TimeoutExpired:
                logger.warning("pid %s did not exit after SIGKILL", proc.pid)
        terminator.reaped()

    returncode = proc.returncode if proc.returncode is not None else -1
    if returncode == 0:
        return Ok(None)

    cancelled = cancel is not None and cancel.is_cancelled
    stderr = "\n".join(stderr_tail)
    if timed_out and not cancelled:
        stderr = f"Command timed out after {timeout}s"
    return Err(
        ProcessError(
            command=command,
            returncode=returncode,
            stdout="\n".join(stdout_tail),
            stderr=stderr,
            cancelled=cancelled,
            timed_out=timed_out and not cancelled,
        )
    )
