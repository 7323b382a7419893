"""git argument construction.

The repository layer treats these argument lists as opaque; it only reports
them to the delegate and hands them to the process runner.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

__all__ = [
    "GitCloneOptions",
    "REFERENCE_FORMAT",
    "clone_arguments",
    "references_arguments",
]

# objectname, objecttype and refname separated by single spaces; refnames
# cannot contain spaces.
REFERENCE_FORMAT = "%(objectname) %(objecttype) %(refname)"


@dataclass(frozen=True, slots=True)
class GitCloneOptions:
    """Options influencing a clone.

    Attributes:
        branch: Branch or tag to check out instead of the remote HEAD.
        depth: Create a shallow clone with this many commits.
        single_branch: Fetch only the history of ``branch`` (or HEAD).
        recurse_submodules: Initialise and clone submodules.
        origin: Name for the remote instead of ``origin``.
        extra_args: Additional raw arguments placed before the URL.
    """

    branch: str | None = None
    depth: int | None = None
    single_branch: bool = False
    recurse_submodules: bool = False
    origin: str | None = None
    extra_args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.depth is not None and self.depth < 1:
            raise ValueError(f"depth must be >= 1, got {self.depth}")

    def to_arguments(self) -> list[str]:
        args: list[str] = []
        if self.branch:
            args.extend(["--branch", self.branch])
        if self.depth is not None:
            args.extend(["--depth", str(self.depth)])
        if self.single_branch:
            args.append("--single-branch")
        if self.recurse_submodules:
            args.append("--recurse-submodules")
        if self.origin:
            args.extend(["--origin", self.origin])
        args.extend(self.extra_args)
        return args


def clone_arguments(remote_url: str, local_path: Path, options: GitCloneOptions) -> list[str]:
    """git arguments (without the executable) for cloning into ``local_path``."""
    return ["clone", "--progress", *options.to_arguments(), "--", remote_url, str(local_path)]


def references_arguments(local_path: Path) -> list[str]:
    """git arguments listing every reference of the working copy."""
    return ["-C", str(local_path), "for-each-ref", f"--format={REFERENCE_FORMAT}"]
