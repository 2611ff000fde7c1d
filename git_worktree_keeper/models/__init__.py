"""Data models for git-worktree-keeper."""

from .worktree import Worktree, WorktreeListItem, RepositoryContext
from .review import Review, ReviewState
from .status import WorktreeStatus, BranchStatus

__all__ = [
    "Worktree",
    "WorktreeListItem",
    "RepositoryContext",
    "Review",
    "ReviewState",
    "WorktreeStatus",
    "BranchStatus",
]
