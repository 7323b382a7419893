"""Git operations module.

- Repository: one working copy (or remote), one operation at a time
- Multi-repo helpers for directories of working copies

Usage:
    from gitop.git import GitCloneOptions, NoCredentials, Repository

    repo = Repository.from_remote("https://example.com/repo.git", NoCredentials())
    result = repo.clone(Path("/tmp/repo"), GitCloneOptions(depth=1))
    if result.is_ok():
        for ref in repo.fetch_references().unwrap_or([]):
            print(ref.short_name)
"""

from gitop.git.credentials import (
    Credentials,
    CredentialsProvider,
    EnvCredentialsProvider,
    NoCredentials,
    StaticCredentialsProvider,
)
from gitop.git.delegate import RepositoryDelegate
from gitop.git.errors import (
    ActiveOperationInProgress,
    CloneDirectoryNotEmpty,
    CloneFailed,
    RepositoryError,
    RepositoryLocalPathNotExists,
    RepositoryNotInitialized,
)
from gitop.git.guard import OperationGuard, OperationState
from gitop.git.multi import RepoReferences, find_repos, get_summary, references_all
from gitop.git.options import GitCloneOptions
from gitop.git.references import ReferenceKind, RepositoryReference
from gitop.git.repository import Repository, RepositoryProtocol, git_version

__all__ = [
    # Credentials
    "Credentials",
    "CredentialsProvider",
    "EnvCredentialsProvider",
    "NoCredentials",
    "StaticCredentialsProvider",
    # Errors
    "ActiveOperationInProgress",
    "CloneDirectoryNotEmpty",
    "CloneFailed",
    "RepositoryError",
    "RepositoryLocalPathNotExists",
    "RepositoryNotInitialized",
    # Repository
    "GitCloneOptions",
    "OperationGuard",
    "OperationState",
    "ReferenceKind",
    "Repository",
    "RepositoryDelegate",
    "RepositoryProtocol",
    "RepositoryReference",
    "git_version",
    # Multi
    "RepoReferences",
    "find_repos",
    "get_summary",
    "references_all",
]
