"""Worktree operations service for git-worktree-keeper."""

import os
from typing import Dict, Any, List, Optional

from git_worktree_keeper.exceptions import NoRepositoryContextError
from git_worktree_keeper.models.worktree import Worktree
from git_worktree_keeper.services.process_executor import ProcessExecutor, CommandResult
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


def parse_worktree_porcelain(output: str) -> List[Worktree]:
    """Parse the output of `git worktree list --porcelain`.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name    (or "bare", or "detached")
        (blank line between worktrees)

    The last record does not need a trailing blank line.

    Args:
        output: Raw porcelain output

    Returns:
        List of Worktree objects in listing order
    """
    worktrees: List[Worktree] = []
    current: Dict[str, Any] = {}

    def flush():
        if current.get("path"):
            worktrees.append(Worktree(**current))

    for line in output.split("\n"):
        line = line.rstrip("\r")

        if not line.strip():
            # Empty line marks end of worktree entry
            flush()
            current = {}
            continue

        if line.startswith("worktree "):
            # A new record without a separating blank line still starts fresh
            flush()
            current = {"path": line[len("worktree "):]}
        elif line.startswith("HEAD "):
            current["head_commit"] = line[len("HEAD "):].strip()
        elif line.startswith("branch "):
            branch_ref = line[len("branch "):].strip()
            if branch_ref.startswith("refs/heads/"):
                branch_ref = branch_ref[len("refs/heads/"):]
            current["branch"] = branch_ref
        elif line.strip() == "bare":
            current["is_bare"] = True
        elif line.strip() == "detached":
            current["is_detached"] = True
        # locked/prunable annotations are not needed

    # Handle last entry if no trailing blank line
    flush()
    return worktrees


class WorktreeService:
    """Service for querying and removing git worktrees."""

    def __init__(self, repo_path: Optional[str], executor: Optional[ProcessExecutor] = None):
        """Initialize the worktree service.

        Args:
            repo_path: Path inside the git repository (None means the process cwd)
            executor: Command runner shared with the other git services
        """
        self.repo_path = repo_path
        self.executor = executor or ProcessExecutor(repo_path)

    def _git(self, *args: str, cwd: Optional[str] = None) -> CommandResult:
        return self.executor.run(["git", *args], cwd=cwd or self.repo_path)

    def list_worktrees(self) -> List[Worktree]:
        """Get all worktrees of the repository.

        Returns:
            List of Worktree objects, empty if git fails
        """
        result = self._git("worktree", "list", "--porcelain")
        if not result.success:
            logger.debug(f"Could not list worktrees: {result.error}")
            return []

        worktrees = parse_worktree_porcelain(result.output)
        logger.debug(f"Found {len(worktrees)} worktrees")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    def has_uncommitted_changes(self, worktree_path: str) -> bool:
        """Check whether a worktree has staged, unstaged or untracked changes.

        Args:
            worktree_path: Path to the worktree directory

        Returns:
            True if `git status --porcelain` reports anything; False otherwise,
            including when the status cannot be read
        """
        result = self._git("status", "--porcelain", cwd=worktree_path)
        if not result.success:
            logger.debug(f"Could not check worktree status for {worktree_path}: {result.error}")
            return False
        return len(result.output) > 0

    def repo_root(self) -> Optional[str]:
        """Get the top-level directory of the current checkout."""
        result = self._git("rev-parse", "--show-toplevel")
        return result.output if result.success else None

    def worktrees_root(self) -> str:
        """Get the directory that holds all worktrees (parent of the checkout).

        Raises:
            NoRepositoryContextError: If not inside a repository
        """
        root = self.repo_root()
        if not root:
            raise NoRepositoryContextError("resolve_worktrees_root")
        return os.path.abspath(os.path.join(root, os.pardir))

    @staticmethod
    def branch_to_folder(branch: str) -> str:
        """Convert a branch name to a folder name (slashes become dashes)."""
        return branch.replace("/", "-")

    def remove_worktree(self, path: str, force: bool = False) -> CommandResult:
        """Remove a worktree at the specified path.

        Args:
            path: Path to the worktree directory
            force: Force removal even if working tree is dirty or locked

        Returns:
            CommandResult of `git worktree remove`
        """
        args = ["worktree", "remove"]
        if force:
            args.append("--force")
        args.append(path)

        result = self._git(*args)
        if result.success:
            logger.info(f"Removed worktree at {path}")
        else:
            logger.debug(f"Failed to remove worktree at {path}: {result.error}")
        return result
