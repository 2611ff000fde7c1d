"""Worktree row formatting utilities."""

from typing import Optional

from git_worktree_keeper.constants import BARE_MARKER, DETACHED_MARKER
from git_worktree_keeper.models.status import BranchStatus
from git_worktree_keeper.models.worktree import Worktree
from git_worktree_keeper.formatters.status import format_status_markup


def format_short_sha(sha: Optional[str]) -> str:
    """Abbreviate a commit SHA to 7 characters."""
    return (sha or "")[:7]


def format_status_cell(worktree: Worktree, branch_status: Optional[BranchStatus]) -> str:
    """
    Format the status column of a worktree row.

    Bare and detached worktrees have no status; they show a literal marker
    instead.

    Args:
        worktree: Worktree to describe
        branch_status: Reconciled status of its branch, if any

    Returns:
        Rich markup string

    Example:
        "[blue]Merged[/blue]", "[dim](bare)[/dim]", "[yellow](detached at 1a2b3c4)[/yellow]"
    """
    if worktree.is_bare:
        return f"[dim]{BARE_MARKER}[/dim]"
    if not worktree.has_branch:
        marker = DETACHED_MARKER.format(sha=format_short_sha(worktree.head_commit))
        return f"[yellow]{marker}[/yellow]"
    return format_status_markup(branch_status.status if branch_status else None)


def format_worktree_count(count: int) -> str:
    """Format the total line under the table."""
    return f"Total: {count} worktree(s)"
