"""Core functionality for git-worktree-keeper"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from rich.console import Console
from rich.markup import escape

from git_worktree_keeper.config import Config
from git_worktree_keeper.constants import PROTECTED_BRANCHES
from git_worktree_keeper.exceptions import (
    GitHubCLIUnavailableError,
    NoRepositoryContextError,
    NotGitHubRepositoryError,
)
from git_worktree_keeper.models.review import Review
from git_worktree_keeper.models.status import BranchStatus
from git_worktree_keeper.models.worktree import Worktree, WorktreeListItem
from git_worktree_keeper.services.cache_service import CacheService
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.services.git import RepositoryInspector
from git_worktree_keeper.services.github_service import GitHubService
from git_worktree_keeper.services.process_executor import ProcessExecutor
from git_worktree_keeper.services.status_reconciler import StatusReconciler, changed_branches
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def find_worktrees_root(cwd: str, executor: Optional[ProcessExecutor] = None) -> str:
    """Guess the directory holding all worktrees before any config is loaded.

    Inside a checkout this is the parent of its top-level directory; anywhere
    else `cwd` itself is assumed to be that directory.
    """
    root = RepositoryInspector(None, executor).repo_root(cwd)
    if root:
        return os.path.abspath(os.path.join(root, os.pardir))
    return os.path.abspath(cwd)


@dataclass
class SweepSummary:
    """What a sweep removed, or would have removed in dry-run mode."""

    dry_run: bool = False
    swept: List[str] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.swept)


class WorktreeKeeper:
    """Main class for listing and sweeping the worktrees of one repository."""

    def __init__(
        self,
        cwd: str,
        config: Union[Config, dict],
        console: Optional[Console] = None,
        inspector: Optional[RepositoryInspector] = None,
        github_service: Optional[GitHubService] = None,
        cache_service: Optional[CacheService] = None,
    ):
        """Initialize WorktreeKeeper.

        Args:
            cwd: Directory the command was run from; a checkout or the
                directory holding the worktrees
            config: Configuration dict or Config object
            console: Rich console for output
            inspector: Git query service (built from the context if omitted)
            github_service: Pull request lookups (built if omitted)
            cache_service: PR number cache (built beside the worktrees if omitted)

        Raises:
            NoRepositoryContextError: If `cwd` is neither inside a repository
                nor a directory holding its worktrees
        """
        self.cwd = os.path.abspath(cwd)
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config
        self.console = console or Console()
        self.display_service = DisplayService(self.console)

        executor = ProcessExecutor()
        probe = inspector or RepositoryInspector(None, executor, self.config.remote_name)
        self.context = probe.resolve_context(self.cwd, self.config.main_folder)
        if not self.context.is_usable:
            raise NoRepositoryContextError("resolve_context")

        self.repo_path = self.context.workable_repo_path
        logger.debug(f"Using repository at {self.repo_path}")

        self.inspector = inspector or RepositoryInspector(
            self.repo_path, ProcessExecutor(self.repo_path), self.config.remote_name
        )
        self.github_service = github_service or GitHubService(self.repo_path)
        self.cache_service = cache_service or CacheService(
            self.inspector.worktrees_root(), self.config.cache_filename
        )
        self.reconciler = StatusReconciler(self.inspector, self.github_service)

    def _show_context(self) -> None:
        self.display_service.display_context_notes(
            self.context.workable_repo_path,
            self.context.in_worktrees_parent,
            self.context.branch_mismatch_warning,
        )

    def get_worktree_statuses(self, worktrees: List[Worktree]) -> Dict[str, BranchStatus]:
        """Reconcile every branch against GitHub, saving the cache once if it changed."""
        default_branch = self.inspector.default_branch()
        logger.debug(f"Default branch: {default_branch}")

        branches = [wt.branch for wt in worktrees if wt.has_branch]
        cached = self.cache_service.get_cached_numbers(branches)
        result = self.reconciler.reconcile(worktrees, default_branch, cached)
        if result.cache_changed:
            changed = changed_branches(cached, result.cache)
            logger.debug(f"Updating cached PR numbers for: {', '.join(changed)}")
            self.cache_service.update(result.cache_updates, result.cache_removals)
        return result.statuses

    @staticmethod
    def build_list_items(
        worktrees: List[Worktree], statuses: Dict[str, BranchStatus]
    ) -> List[WorktreeListItem]:
        """Pair every worktree with its reconciled status.

        Bare and detached worktrees get no status and no PR number.
        """
        items = []
        for wt in worktrees:
            branch_status = statuses.get(wt.branch) if wt.has_branch else None
            items.append(
                WorktreeListItem(
                    name=wt.name,
                    path=wt.path,
                    branch=wt.branch,
                    status=branch_status.status.value if branch_status else None,
                    pr_number=branch_status.review_number if branch_status else None,
                )
            )
        return items

    def list_worktrees(self) -> List[WorktreeListItem]:
        """List all worktrees with their PR status, as a table or as JSON."""
        json_output = self.config.json_output

        if self.config.fetch:
            if not json_output:
                self.console.print(f"[dim]Fetching {self.config.remote_name}...[/dim]")
            result = self.inspector.fetch()
            if not result.success:
                logger.warning(f"Fetch failed: {result.error}")

        if not json_output:
            self._show_context()

        worktrees = self.inspector.list_worktrees()
        statuses = self.get_worktree_statuses(worktrees) if worktrees else {}
        items = self.build_list_items(worktrees, statuses)

        if json_output:
            self.display_service.display_json(items)
        else:
            self.display_service.display_worktree_table(worktrees, statuses)
        return items

    def _check_sweep_requirements(self) -> None:
        if not self.github_service.is_available():
            raise GitHubCLIUnavailableError()
        if not self.inspector.is_github_repo():
            raise NotGitHubRepositoryError(self.inspector.remote_url())

    def _is_current_worktree(self, wt: Worktree) -> bool:
        path = os.path.realpath(wt.path)
        cwd = os.path.realpath(self.cwd)
        return cwd == path or cwd.startswith(path + os.sep)

    def _merged_since(self, branch: str, review: Review) -> bool:
        """True if the local branch holds nothing beyond the merged PR head."""
        local_head = self.inspector.head_commit(branch)
        pr_head = review.head_commit
        if not local_head or not pr_head:
            return True
        return local_head == pr_head or self.inspector.is_ancestor(local_head, pr_head)

    def sweep(self) -> SweepSummary:
        """Remove worktrees and branches whose pull request has been merged.

        Raises:
            GitHubCLIUnavailableError: If gh cannot be run
            NotGitHubRepositoryError: If the remote is not on GitHub
        """
        dry_run = self.config.dry_run
        summary = SweepSummary(dry_run=dry_run)

        self._show_context()
        self._check_sweep_requirements()

        worktrees = self.inspector.list_worktrees()
        if not worktrees:
            self.console.print("[yellow]No worktrees found.[/yellow]")
            return summary

        protected = set(PROTECTED_BRANCHES) | {self.inspector.default_branch()}
        self.console.print("[blue]Scanning worktrees for merged PRs...[/blue]\n")

        for wt in worktrees:
            if not wt.has_branch or wt.branch in protected:
                continue

            branch = wt.branch
            if self._is_current_worktree(wt):
                summary.skipped[branch] = "current working directory"
                self.console.print(f"[dim]Skipping '{escape(branch)}' (current working directory)[/dim]")
                continue

            self.console.print(f"[dim]Checking '{escape(branch)}'...[/dim]")
            review = self.github_service.find_merged_review_for_branch(branch)
            if review is None:
                continue

            if not self._merged_since(branch, review):
                reason = f"has local changes since PR #{review.number} was merged"
                summary.skipped[branch] = reason
                self.console.print(f"[dim]Skipping '{escape(branch)}' ({reason})[/dim]")
                continue

            action = "would remove" if dry_run else "removing"
            self.console.print(
                f"[yellow]Branch '{escape(branch)}' has a merged PR #{review.number} "
                f"→ {action} worktree and branch[/yellow]"
            )

            if dry_run:
                self.console.print(f"[dim]  Would remove: {escape(wt.path)}[/dim]")
                self.console.print(f"[dim]  Would delete branch: {escape(branch)}[/dim]")
                summary.swept.append(branch)
                continue

            if not self._remove(wt, summary):
                continue
            summary.swept.append(branch)

        if summary.swept and not dry_run:
            self.cache_service.remove_branches(summary.swept)

        self._print_sweep_summary(summary)
        return summary

    def _remove(self, wt: Worktree, summary: SweepSummary) -> bool:
        result = self.inspector.remove_worktree(wt.path, force=self.config.force)
        if not result.success:
            summary.failed[wt.branch] = result.error or "unknown error"
            self.console.print(
                f"[red]  Failed to remove worktree '{escape(wt.path)}': {escape(str(result.error))}[/red]"
            )
            return False
        self.console.print(f"[green]  Removed worktree: {escape(wt.path)}[/green]")

        result = self.inspector.delete_branch(wt.branch, force=True)
        if result.success:
            self.console.print(f"[green]  Deleted branch: {escape(wt.branch)}[/green]")
        else:
            self.console.print(
                f"[red]  Failed to delete branch '{escape(wt.branch)}': {escape(str(result.error))}[/red]"
            )
        return True

    def _print_sweep_summary(self, summary: SweepSummary) -> None:
        self.console.print()
        if summary.count == 0:
            self.console.print("[green]No worktrees with merged PRs found.[/green]")
        elif summary.dry_run:
            self.console.print(
                f"[yellow]Dry run complete. Would remove {summary.count} worktree(s).[/yellow]"
            )
            self.console.print("[dim]Run without --dry-run to actually remove them.[/dim]")
        else:
            self.console.print(f"[green]Sweep complete. Removed {summary.count} worktree(s).[/green]")
