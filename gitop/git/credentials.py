"""Credentials supply for remote operations.

Providers are asked on demand; the repository never caches what they return.
Credentials reach git only through the child environment, never through the
argument list (which is reported to delegates):

- HTTP(S): an ``Authorization: Basic`` header injected with
  ``GIT_CONFIG_COUNT``/``GIT_CONFIG_KEY_n``/``GIT_CONFIG_VALUE_n``
  (git >= 2.31), scoped to the remote's ``scheme://host[:port]``.
- SSH: a private key selected through ``GIT_SSH_COMMAND``.

``GIT_TERMINAL_PROMPT=0`` is always set so git fails instead of waiting on a
prompt nobody can answer.
"""

from __future__ import annotations

import base64
import os
import shlex
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol
from urllib.parse import urlsplit

__all__ = [
    "Credentials",
    "CredentialsProvider",
    "EnvCredentialsProvider",
    "NoCredentials",
    "StaticCredentialsProvider",
    "credentials_env",
]


@dataclass(frozen=True, slots=True)
class Credentials:
    """Authentication material.

    Attributes:
        username: User name for HTTP(S) remotes.
        password: Password or access token for HTTP(S) remotes.
        ssh_key_path: Private key for SSH remotes.
    """

    username: str | None = None
    password: str | None = field(default=None, repr=False)
    ssh_key_path: Path | None = None

    @property
    def has_basic_auth(self) -> bool:
        return self.password is not None

    def __bool__(self) -> bool:
        return self.has_basic_auth or self.ssh_key_path is not None


class CredentialsProvider(Protocol):
    """Supplies credentials for a remote URL, or None for anonymous access."""

    def credentials_for(self, url: str) -> Credentials | None: ...


class NoCredentials:
    """Anonymous access only."""

    def credentials_for(self, url: str) -> Credentials | None:
        return None


class StaticCredentialsProvider:
    """Returns the same credentials for every URL, optionally per host."""

    def __init__(self, credentials: Credentials, *, host: str | None = None) -> None:
        self._credentials = credentials
        self._host = host.lower() if host else None

    def credentials_for(self, url: str) -> Credentials | None:
        if self._host is not None and _host_of(url) != self._host:
            return None
        return self._credentials


class EnvCredentialsProvider:
    """Reads credentials from environment variables at request time.

    Variables: ``GITOP_USERNAME``, ``GITOP_PASSWORD`` (or ``GITOP_TOKEN``)
    and ``GITOP_SSH_KEY``.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def credentials_for(self, url: str) -> Credentials | None:
        env = self._environ if self._environ is not None else os.environ
        password = env.get("GITOP_PASSWORD") or env.get("GITOP_TOKEN")
        key = env.get("GITOP_SSH_KEY")
        creds = Credentials(
            username=env.get("GITOP_USERNAME") or None,
            password=password or None,
            ssh_key_path=Path(key).expanduser() if key else None,
        )
        return creds or None


def _host_of(url: str) -> str | None:
    host = urlsplit(url).hostname
    if host:
        return host.lower()
    # scp-like syntax: git@host:org/repo.git
    if "@" in url and ":" in url.split("@", 1)[1]:
        return url.split("@", 1)[1].split(":", 1)[0].lower()
    return None


def _is_http(url: str) -> bool:
    return urlsplit(url).scheme.lower() in ("http", "https")


def _origin_of(url: str) -> str:
    """``scheme://host[:port]`` of an HTTP(S) URL, without user info."""
    parts = urlsplit(url)
    origin = f"{parts.scheme.lower()}://{parts.hostname or ''}"
    if parts.port is not None:
        origin += f":{parts.port}"
    return origin


def credentials_env(url: str | None, credentials: Credentials | None) -> dict[str, str]:
    """Environment additions that hand ``credentials`` to git for ``url``."""
    env = {"GIT_TERMINAL_PROMPT": "0"}
    if url is None or not credentials:
        return env

    if credentials.has_basic_auth and _is_http(url):
        user = credentials.username or "x-access-token"
        token = base64.b64encode(f"{user}:{credentials.password}".encode()).decode("ascii")
        env["GIT_CONFIG_COUNT"] = "1"
        env["GIT_CONFIG_KEY_0"] = f"http.{_origin_of(url)}/.extraHeader"
        env["GIT_CONFIG_VALUE_0"] = f"Authorization: Basic {token}"
    elif credentials.ssh_key_path is not None and not _is_http(url):
        key = shlex.quote(str(credentials.ssh_key_path))
        env["GIT_SSH_COMMAND"] = f"ssh -i {key} -o IdentitiesOnly=yes"

    return env
