"""Worktree status model"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class WorktreeStatus(Enum):
    """Review status of a worktree's branch. Values are the display strings."""
    NO_PR = "No PR"
    OPEN = "Open"
    MERGED = "Merged"
    CLOSED = "Closed"
    CHANGES_SINCE_MERGE = "Changes since Merge"
    MAIN = "Main"
    MODIFIED = "Modified"  # Merged, but the worktree has uncommitted changes


@dataclass(frozen=True)
class BranchStatus:
    """Reconciled status of one branch."""
    status: WorktreeStatus
    review_number: Optional[int] = None
