"""Services used by git-worktree-keeper."""

from .process_executor import ProcessExecutor, CommandResult
from .git import RepositoryInspector, WorktreeService, BranchQueries
from .github_service import GitHubService
from .cache_service import CacheService
from .status_reconciler import StatusReconciler, ReconciliationResult
from .display_service import DisplayService

__all__ = [
    "ProcessExecutor",
    "CommandResult",
    "RepositoryInspector",
    "WorktreeService",
    "BranchQueries",
    "GitHubService",
    "CacheService",
    "StatusReconciler",
    "ReconciliationResult",
    "DisplayService",
]
