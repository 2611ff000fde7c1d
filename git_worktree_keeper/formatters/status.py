"""Status formatting utilities."""

from typing import Optional

from git_worktree_keeper.constants import STATUS_COLORS, UNKNOWN_STATUS
from git_worktree_keeper.models.status import BranchStatus, WorktreeStatus


def format_status(status: Optional[WorktreeStatus]) -> str:
    """
    Format a worktree status as plain display text.

    Args:
        status: Status enum value, or None if it could not be computed

    Returns:
        Display text for status
    """
    if status is None:
        return UNKNOWN_STATUS
    return status.value


def format_status_markup(status: Optional[WorktreeStatus]) -> str:
    """
    Format a worktree status with its Rich color.

    Args:
        status: Status enum value, or None if it could not be computed

    Returns:
        Rich markup string
    """
    text = format_status(status)
    color = STATUS_COLORS.get(status) if status is not None else "dim"
    return f"[{color}]{text}[/{color}]" if color else text


def format_pr_number(branch_status: Optional[BranchStatus]) -> str:
    """
    Format the review id of a branch as "#N".

    Args:
        branch_status: Reconciled status, may be None

    Returns:
        "#N", or an empty string when no PR is known
    """
    if branch_status is None or branch_status.review_number is None:
        return ""
    return f"#{branch_status.review_number}"
