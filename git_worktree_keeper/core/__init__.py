"""Core functionality for git-worktree-keeper."""

from .worktree_keeper import WorktreeKeeper, SweepSummary, find_worktrees_root

__all__ = ["WorktreeKeeper", "SweepSummary", "find_worktrees_root"]
