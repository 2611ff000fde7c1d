"""Worktree data models."""

import os
from dataclasses import dataclass, asdict
from typing import Optional


@dataclass
class Worktree:
    """A checkout listed by `git worktree list --porcelain`."""

    path: str
    head_commit: Optional[str] = None
    branch: Optional[str] = None
    is_bare: bool = False
    is_detached: bool = False

    @property
    def name(self) -> str:
        """Display name: the worktree's folder name."""
        return os.path.basename(self.path.rstrip("/")) or self.path

    @property
    def has_branch(self) -> bool:
        return bool(self.branch) and not self.is_bare and not self.is_detached

    def __str__(self) -> str:
        if self.is_bare:
            state = "bare"
        elif self.is_detached:
            state = f"detached at {(self.head_commit or '')[:7]}"
        else:
            state = self.branch or "no branch"
        return f"{self.path} [{state}]"


@dataclass
class WorktreeListItem:
    """One row of `list` output."""

    name: str
    path: str
    branch: Optional[str]
    status: Optional[str]
    pr_number: Optional[int] = None

    def to_dict(self) -> dict:
        """Serialize with the field names of the JSON output."""
        data = asdict(self)
        data["prNumber"] = data.pop("pr_number")
        return data


@dataclass
class RepositoryContext:
    """Where the command was run from, relative to the repository."""

    in_git_repo: bool
    repo_root: Optional[str] = None
    current_branch: Optional[str] = None
    in_worktrees_parent: bool = False
    workable_repo_path: Optional[str] = None
    branch_mismatch_warning: Optional[str] = None

    @property
    def is_usable(self) -> bool:
        return self.workable_repo_path is not None
