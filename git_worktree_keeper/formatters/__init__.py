"""Formatting utilities for git-worktree-keeper.

- status: Status text, colors and PR numbers
- worktree: Status cells, bare/detached markers and totals
"""

# Status formatters
from .status import (
    format_status,
    format_status_markup,
    format_pr_number,
)

# Worktree formatters
from .worktree import (
    format_short_sha,
    format_status_cell,
    format_worktree_count,
)

__all__ = [
    # Status
    "format_status",
    "format_status_markup",
    "format_pr_number",
    # Worktree
    "format_short_sha",
    "format_status_cell",
    "format_worktree_count",
]
