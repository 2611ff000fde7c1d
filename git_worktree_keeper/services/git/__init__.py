"""Git-related services for git-worktree-keeper."""

from .worktrees import WorktreeService, parse_worktree_porcelain
from .branch_queries import BranchQueries
from .repository import RepositoryInspector

__all__ = [
    "WorktreeService",
    "parse_worktree_porcelain",
    "BranchQueries",
    "RepositoryInspector",
]
