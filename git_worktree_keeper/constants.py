"""Shared constants for git-worktree-keeper."""

from dataclasses import dataclass
from typing import List

from git_worktree_keeper.models.status import WorktreeStatus


# Files kept in the directory that holds all worktrees of a repository
CACHE_FILENAME = ".wtm-cache.json"
CONFIG_FILENAME = ".wtmrc.json"

# Branches that `sweep` never removes, whatever the remote says
PROTECTED_BRANCHES = ("main", "master")


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("name", "Worktree", 20),
    ColumnDefinition("branch", "Branch", 30),
    ColumnDefinition("status", "Status", 20),
    ColumnDefinition("pr", "PR", 8),
]


# Markers for worktrees that have no branch
BARE_MARKER = "(bare)"
DETACHED_MARKER = "(detached at {sha})"
UNKNOWN_STATUS = "(unknown)"


# CLI colors (Rich color names)
STATUS_COLORS = {
    WorktreeStatus.NO_PR: "dim",
    WorktreeStatus.OPEN: "green",
    WorktreeStatus.MERGED: "blue",
    WorktreeStatus.CLOSED: "red",
    WorktreeStatus.CHANGES_SINCE_MERGE: "yellow",
    WorktreeStatus.MAIN: "cyan",
    WorktreeStatus.MODIFIED: "yellow",
}


NOT_IN_REPOSITORY_HELP = """
Run this command from:
  • Inside a git worktree (e.g., project/main or project/feature-x)
  • A project directory containing worktrees
"""

GH_INSTALL_HELP = """
The sweep command uses the GitHub CLI to check whether pull requests have been merged.
Without gh, it cannot determine which worktrees are safe to remove.

To install gh:
  • macOS: brew install gh
  • Ubuntu: sudo apt install gh
  • Other: https://cli.github.com/

After installing, authenticate with: gh auth login
"""
