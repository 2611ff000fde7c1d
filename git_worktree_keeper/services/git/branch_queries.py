"""Branch and commit query service for git-worktree-keeper."""

from typing import Optional

from git_worktree_keeper.services.process_executor import ProcessExecutor, CommandResult
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


class BranchQueries:
    """Read-only queries about branches and the commit graph.

    Every query degrades to None/False when git fails; none of them raise.
    """

    def __init__(
        self,
        repo_path: Optional[str],
        executor: Optional[ProcessExecutor] = None,
        remote_name: str = "origin",
    ):
        """Initialize the branch queries service.

        Args:
            repo_path: Path inside the git repository (None means the process cwd)
            executor: Command runner shared with the other git services
            remote_name: Remote whose HEAD and branches are consulted
        """
        self.repo_path = repo_path
        self.executor = executor or ProcessExecutor(repo_path)
        self.remote_name = remote_name

    def _git(self, *args: str) -> CommandResult:
        return self.executor.run(["git", *args], cwd=self.repo_path)

    def local_branch_exists(self, branch: str) -> bool:
        """Check if a local branch exists."""
        return self._git("show-ref", "--verify", "--quiet", f"refs/heads/{branch}").success

    def remote_branch_exists(self, branch: str, remote: Optional[str] = None) -> bool:
        """Check if a remote-tracking branch exists."""
        remote = remote or self.remote_name
        return self._git(
            "show-ref", "--verify", "--quiet", f"refs/remotes/{remote}/{branch}"
        ).success

    def default_branch(self) -> str:
        """Get the default branch name.

        Prefers the remote's symbolic HEAD, then probes for main and master on
        the remote, and finally falls back to "main".
        """
        prefix = f"refs/remotes/{self.remote_name}/"
        result = self._git("symbolic-ref", f"{prefix}HEAD")
        if result.success and result.output.startswith(prefix):
            branch = result.output[len(prefix):]
            logger.debug(f"Default branch from remote HEAD: {branch}")
            return branch

        for candidate in ("main", "master"):
            if self.remote_branch_exists(candidate):
                logger.debug(f"Default branch probed on remote: {candidate}")
                return candidate

        return "main"

    def head_commit(self, branch: str) -> Optional[str]:
        """Get the commit SHA a local branch points at."""
        result = self._git("rev-parse", "--verify", "--quiet", f"refs/heads/{branch}")
        if not result.success or not result.output:
            logger.debug(f"Could not resolve head of {branch}: {result.error}")
            return None
        return result.output

    def commit_exists(self, sha: str) -> bool:
        """Check if a commit object exists in the local repository."""
        if not sha:
            return False
        result = self._git("cat-file", "-t", sha)
        return result.success and result.output == "commit"

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        """Check if `ancestor` is reachable from `descendant` through parent links."""
        if not ancestor or not descendant:
            return False
        return self._git("merge-base", "--is-ancestor", ancestor, descendant).success

    def non_merge_commits_exist_after(self, branch: str, sha: str) -> bool:
        """Check if a branch has non-merge commits that `sha` does not contain.

        A pulled merge commit on top of a merged PR head is housekeeping;
        anything else is new work.
        """
        result = self._git("log", "--oneline", "--no-merges", f"{sha}..refs/heads/{branch}")
        if not result.success:
            logger.debug(f"Could not list commits of {branch} after {sha[:7]}: {result.error}")
            return False
        return len(result.output) > 0

    def delete_branch(self, branch: str, force: bool = False) -> CommandResult:
        """Delete a local branch."""
        result = self._git("branch", "-D" if force else "-d", branch)
        if result.success:
            logger.info(f"Deleted branch {branch}")
        else:
            logger.debug(f"Failed to delete branch {branch}: {result.error}")
        return result
