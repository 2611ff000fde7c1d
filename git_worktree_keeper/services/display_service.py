"""Display service for worktree listings"""
import json
from typing import Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from git_worktree_keeper.constants import COLUMNS
from git_worktree_keeper.formatters import (
    format_pr_number,
    format_status_cell,
    format_worktree_count,
)
from git_worktree_keeper.models.status import BranchStatus
from git_worktree_keeper.models.worktree import Worktree, WorktreeListItem


class DisplayService:
    """Renders reconciled worktrees as a Rich table or as JSON."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def display_worktree_table(
        self,
        worktrees: List[Worktree],
        statuses: Dict[str, BranchStatus],
    ) -> None:
        """Display a table of worktrees and the status of their pull requests."""
        if not worktrees:
            self.console.print("[yellow]No worktrees found.[/yellow]")
            return

        table = Table(title="Worktrees:", title_justify="left")

        for col in COLUMNS:
            table.add_column(col.label, min_width=col.width or None, no_wrap=True)

        for wt in worktrees:
            branch_status = statuses.get(wt.branch) if wt.has_branch else None
            cells = self._row_cells(wt, branch_status)
            table.add_row(*(cells[col.key] for col in COLUMNS))

        self.console.print(table)
        self.console.print(f"[dim]{format_worktree_count(len(worktrees))}[/dim]")

    @staticmethod
    def _row_cells(wt: Worktree, branch_status: Optional[BranchStatus]) -> Dict[str, str]:
        """Rendered cells of one row, keyed like COLUMNS."""
        pr_number = format_pr_number(branch_status)
        return {
            "name": f"[cyan]{escape(wt.name)}[/cyan]",
            "branch": escape(wt.branch) if wt.has_branch else "",
            "status": format_status_cell(wt, branch_status),
            "pr": f"[dim]{pr_number}[/dim]" if pr_number else "",
        }

    def display_json(self, items: List[WorktreeListItem]) -> None:
        """Print list items as a JSON array of {name, path, branch, status, prNumber}."""
        payload = json.dumps([item.to_dict() for item in items], indent=2)
        self.console.out(payload, highlight=False)

    def display_context_notes(
        self, workable_repo_path: Optional[str], in_worktrees_parent: bool, warning: Optional[str]
    ) -> None:
        """Tell the user which checkout is used and whether its folder looks wrong."""
        if in_worktrees_parent and workable_repo_path:
            self.console.print(f"[dim]Using repository: {workable_repo_path}[/dim]\n")
        if warning:
            self.console.print(f"[yellow]{warning}[/yellow]\n")
