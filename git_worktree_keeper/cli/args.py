"""Command-line argument parsing for git-worktree-keeper."""

import argparse
from typing import List, Optional

from git_worktree_keeper.__version__ import __version__

# Defaults for options that only some commands define
COMMAND_DEFAULTS = {
    "verbose": False,
    "debug": False,
    "json": False,
    "fetch": False,
    "dry_run": False,
    "force": False,
}


def _output_options() -> argparse.ArgumentParser:
    """Options accepted both before and after the command name."""
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "-v", "--verbose", action="store_true", default=argparse.SUPPRESS, help="Show verbose output"
    )
    parent.add_argument(
        "--debug",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Show debug information for troubleshooting",
    )
    return parent


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    output_options = _output_options()
    parser = argparse.ArgumentParser(
        prog="git-worktree-keeper",
        description="Show which git worktrees have open, merged or closed GitHub pull requests",
        epilog="PR detection requires the GitHub CLI: https://cli.github.com/ (then run 'gh auth login')",
        parents=[output_options],
    )
    parser.add_argument("--version", action="version", version=f"git-worktree-keeper {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    list_parser = subparsers.add_parser(
        "list",
        parents=[output_options],
        help="List worktrees with the status of their pull requests (default)",
    )
    list_parser.add_argument("--json", action="store_true", help="Print worktrees as JSON")
    list_parser.add_argument(
        "--fetch",
        action="store_true",
        help="Run 'git fetch --prune' first so merged PR commits are known locally",
    )

    sweep_parser = subparsers.add_parser(
        "sweep",
        parents=[output_options],
        help="Remove worktrees and branches whose pull request has been merged",
    )
    sweep_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview mode - show what would be removed without removing anything",
    )
    sweep_parser.add_argument(
        "--force",
        action="store_true",
        help="Remove worktrees even if they have uncommitted changes",
    )

    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments. Without a command, 'list' is assumed."""
    args = build_parser().parse_args(argv)
    if args.command is None:
        args.command = "list"
    for name, default in COMMAND_DEFAULTS.items():
        if not hasattr(args, name):
            setattr(args, name, default)
    return args
