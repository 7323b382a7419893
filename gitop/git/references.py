"""Repository references as listed by ``git for-each-ref``."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto

__all__ = ["ReferenceKind", "RepositoryReference", "parse_references"]

logger = logging.getLogger(__name__)


class ReferenceKind(Enum):
    BRANCH = auto()
    REMOTE_BRANCH = auto()
    TAG = auto()
    OTHER = auto()

    def __str__(self) -> str:
        return self.name.lower()


_PREFIXES: tuple[tuple[str, ReferenceKind], ...] = (
    ("refs/heads/", ReferenceKind.BRANCH),
    ("refs/remotes/", ReferenceKind.REMOTE_BRANCH),
    ("refs/tags/", ReferenceKind.TAG),
)


@dataclass(frozen=True, slots=True)
class RepositoryReference:
    """A named pointer into the repository's ref namespace.

    Attributes:
        name: Full refname (e.g. "refs/heads/main")
        target: Object id the ref points to
        object_type: Type of the target object ("commit", "tag", ...)
    """

    name: str
    target: str
    object_type: str = "commit"

    @property
    def kind(self) -> ReferenceKind:
        for prefix, kind in _PREFIXES:
            if self.name.startswith(prefix):
                return kind
        return ReferenceKind.OTHER

    @property
    def short_name(self) -> str:
        """Refname without its namespace prefix ("main", "origin/main", "v1.0")."""
        for prefix, _ in _PREFIXES:
            if self.name.startswith(prefix):
                return self.name[len(prefix) :]
        return self.name.removeprefix("refs/")

    @property
    def is_symbolic_head(self) -> bool:
        """True for ``refs/remotes/<remote>/HEAD``."""
        return self.kind is ReferenceKind.REMOTE_BRANCH and self.name.endswith("/HEAD")


def parse_references(lines: list[str]) -> list[RepositoryReference]:
    """Parse ``for-each-ref`` output lines, keeping git's order."""
    refs: list[RepositoryReference] = []
    for line in lines:
        parts = line.strip().split(" ", 2)
        if len(parts) != 3 or not all(parts):
            logger.debug("skipping unparsable reference line: %r", line)
            continue
        target, object_type, name = parts
        refs.append(RepositoryReference(name=name, target=target, object_type=object_type))
    return refs
