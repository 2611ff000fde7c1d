"""Command-line interface for git-worktree-keeper"""

import os
import sys
from typing import List, Optional

from rich.console import Console

from git_worktree_keeper.cli.args import parse_args
from git_worktree_keeper.config import Config, load_file_config
from git_worktree_keeper.constants import GH_INSTALL_HELP, NOT_IN_REPOSITORY_HELP
from git_worktree_keeper.core import WorktreeKeeper, find_worktrees_root
from git_worktree_keeper.exceptions import (
    GitHubCLIUnavailableError,
    NoRepositoryContextError,
    NotGitHubRepositoryError,
    WorktreeKeeperError,
)
from git_worktree_keeper.logging_config import setup_logging

console = Console()
error_console = Console(stderr=True)


def build_config(parsed_args, cwd: str) -> Config:
    """Merge .wtmrc.json settings with command-line flags."""
    settings = load_file_config(find_worktrees_root(cwd))
    settings.update(
        verbose=parsed_args.verbose,
        debug=parsed_args.debug,
        json_output=parsed_args.json,
        fetch=parsed_args.fetch,
        dry_run=parsed_args.dry_run,
        force=parsed_args.force,
    )
    return Config.from_dict(settings)


def _report_error(error: WorktreeKeeperError) -> None:
    if isinstance(error, NoRepositoryContextError):
        error_console.print("[red]Error: Not inside a git repository or a directory of worktrees.[/red]")
        error_console.print(f"[dim]{NOT_IN_REPOSITORY_HELP}[/dim]")
    elif isinstance(error, GitHubCLIUnavailableError):
        error_console.print("[red]Error: GitHub CLI 'gh' is required for sweep.[/red]")
        error_console.print(f"[dim]{GH_INSTALL_HELP}[/dim]")
    elif isinstance(error, NotGitHubRepositoryError):
        error_console.print(f"[red]Error: {error}[/red]")
        error_console.print("[dim]\nThe sweep command only works with GitHub repositories.[/dim]")
    else:
        error_console.print(f"[red]Error: {error}[/red]")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)

    # Setup logging before creating WorktreeKeeper
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        cwd = os.getcwd()
        config = build_config(parsed_args, cwd)

        if config.debug:
            error_console.print("[yellow]Debug mode enabled[/yellow]")
            error_console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                error_console.print(f"  {key}: {value}")

        keeper = WorktreeKeeper(cwd, config, console=console)

        if parsed_args.command == "sweep":
            summary = keeper.sweep()
            return 1 if summary.failed else 0

        keeper.list_worktrees()
        return 0
    except KeyboardInterrupt:
        error_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except WorktreeKeeperError as e:
        _report_error(e)
        if parsed_args.debug:
            error_console.print_exception()
        return 1
    except ValueError as e:
        # Invalid configuration values
        error_console.print(f"[red]Error: {e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
