"""
git-worktree-keeper - Keep git worktrees in step with their pull requests
"""

from .__version__ import __version__
from .core import WorktreeKeeper
from .cli import main

__all__ = ["WorktreeKeeper", "main", "__version__"]
