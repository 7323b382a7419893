"""Operations over several working copies.

Each working copy gets its own ``Repository`` instance, so the one-operation
guard never serialises unrelated repositories.

Usage:
    from gitop.git.multi import find_repos, references_all

    for item in references_all(find_repos(Path("~/src").expanduser()), NoCredentials()):
        print(f"{item.path.name}: {len(item.references)} refs")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from gitop.core.config import GitConfig
from gitop.core.result import Err, Ok
from gitop.git.credentials import CredentialsProvider
from gitop.git.errors import RepositoryError, RepositoryNotInitialized
from gitop.git.references import ReferenceKind, RepositoryReference
from gitop.git.repository import Repository, is_repository_root

__all__ = [
    "RepoReferences",
    "find_repos",
    "get_summary",
    "references_all",
]


@dataclass(frozen=True, slots=True)
class RepoReferences:
    """References of one working copy.

    Attributes:
        path: Working copy path
        references: References on success, empty on error
        error: Error if listing failed, None on success
    """

    path: Path
    references: tuple[RepositoryReference, ...] = field(default_factory=tuple)
    error: RepositoryError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def count(self, kind: ReferenceKind) -> int:
        return sum(1 for ref in self.references if ref.kind is kind)


def find_repos(base: Path) -> list[Path]:
    """Find working copies directly below ``base`` (one level deep).

    Returns:
        Repository paths sorted case-insensitively by name
    """
    if not base.is_dir():
        return []

    repos = [child for child in base.iterdir() if is_repository_root(child)]
    return sorted(repos, key=lambda p: p.name.lower())


def references_all(
    repos: list[Path],
    credentials_provider: CredentialsProvider,
    *,
    config: GitConfig | None = None,
) -> list[RepoReferences]:
    """List references of every working copy, one result per path."""
    results: list[RepoReferences] = []

    for path in repos:
        repo = Repository.at_path(path, credentials_provider, config=config)
        if repo is None:
            results.append(
                RepoReferences(path=path, error=RepositoryNotInitialized(required="local_path"))
            )
            continue

        match repo.fetch_references():
            case Ok(refs):
                results.append(RepoReferences(path=path, references=tuple(refs)))
            case Err(error):
                results.append(RepoReferences(path=path, error=error))

    return results


def get_summary(items: list[RepoReferences]) -> dict[str, int]:
    """Counts: total, errors, branches, tags."""
    return {
        "total": len(items),
        "errors": sum(1 for i in items if not i.ok),
        "branches": sum(i.count(ReferenceKind.BRANCH) for i in items),
        "tags": sum(i.count(ReferenceKind.TAG) for i in items),
    }
