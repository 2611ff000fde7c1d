"""Repository inspector: the git queries the rest of the tool relies on."""

import os
import re
from typing import List, Optional

from git_worktree_keeper.models.worktree import Worktree, RepositoryContext
from git_worktree_keeper.services.git.branch_queries import BranchQueries
from git_worktree_keeper.services.git.worktrees import WorktreeService
from git_worktree_keeper.services.process_executor import ProcessExecutor, CommandResult
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


class RepositoryInspector:
    """Facade over the worktree and branch query services."""

    def __init__(
        self,
        repo_path: Optional[str] = None,
        executor: Optional[ProcessExecutor] = None,
        remote_name: str = "origin",
    ):
        """Initialize the inspector.

        Args:
            repo_path: Path inside the git repository (None means the process cwd)
            executor: Command runner; a new one is created if omitted
            remote_name: Remote used for default-branch and hosting checks
        """
        self.repo_path = repo_path
        self.remote_name = remote_name
        self.executor = executor or ProcessExecutor(repo_path)
        self.worktrees = WorktreeService(repo_path, self.executor)
        self.branches = BranchQueries(repo_path, self.executor, remote_name)

    def _git(self, *args: str, cwd: Optional[str] = None) -> CommandResult:
        return self.executor.run(["git", *args], cwd=cwd or self.repo_path)

    # Repository-level queries

    def is_inside_repository(self, directory: Optional[str] = None) -> bool:
        """Check if a directory is inside a git work tree."""
        result = self._git("rev-parse", "--is-inside-work-tree", cwd=directory)
        return result.success and result.output == "true"

    def repo_root(self, directory: Optional[str] = None) -> Optional[str]:
        """Get the top-level directory of the checkout containing `directory`."""
        result = self._git("rev-parse", "--show-toplevel", cwd=directory)
        return result.output if result.success else None

    def current_branch(self, directory: Optional[str] = None) -> Optional[str]:
        """Get the branch checked out in `directory` ("HEAD" when detached)."""
        result = self._git("rev-parse", "--abbrev-ref", "HEAD", cwd=directory)
        return result.output if result.success else None

    def remote_url(
        self, remote: Optional[str] = None, directory: Optional[str] = None
    ) -> Optional[str]:
        """Get the URL of a remote."""
        result = self._git("remote", "get-url", remote or self.remote_name, cwd=directory)
        return result.output if result.success else None

    def is_github_repo(self) -> bool:
        """Check if the remote points at GitHub."""
        url = self.remote_url()
        return url is not None and "github.com" in url

    def repo_name(self, directory: Optional[str] = None) -> Optional[str]:
        """Extract the repository name from the remote URL.

        Works with both HTTPS and SSH URLs:
        - https://github.com/user/repo-name.git -> repo-name
        - git@github.com:user/repo-name.git -> repo-name
        """
        url = self.remote_url(directory=directory)
        if not url:
            return None
        match = re.search(r"[/:]([^/:]+)$", re.sub(r"\.git$", "", url))
        return match.group(1) if match else None

    # Delegated queries

    def list_worktrees(self) -> List[Worktree]:
        return self.worktrees.list_worktrees()

    def has_uncommitted_changes(self, worktree_path: str) -> bool:
        return self.worktrees.has_uncommitted_changes(worktree_path)

    def worktrees_root(self) -> str:
        return self.worktrees.worktrees_root()

    def remove_worktree(self, path: str, force: bool = False) -> CommandResult:
        return self.worktrees.remove_worktree(path, force)

    def default_branch(self) -> str:
        return self.branches.default_branch()

    def head_commit(self, branch: str) -> Optional[str]:
        return self.branches.head_commit(branch)

    def commit_exists(self, sha: str) -> bool:
        return self.branches.commit_exists(sha)

    def is_ancestor(self, ancestor: str, descendant: str) -> bool:
        return self.branches.is_ancestor(ancestor, descendant)

    def non_merge_commits_exist_after(self, branch: str, sha: str) -> bool:
        return self.branches.non_merge_commits_exist_after(branch, sha)

    def delete_branch(self, branch: str, force: bool = False) -> CommandResult:
        return self.branches.delete_branch(branch, force)

    def fetch(self) -> CommandResult:
        """Fetch and prune the remote, streaming git's output to the terminal."""
        return self.executor.stream(
            ["git", "fetch", "--prune", self.remote_name], cwd=self.repo_path
        )

    # Context discovery

    def _child_checkouts(self, parent: str) -> List[str]:
        try:
            entries = sorted(os.listdir(parent))
        except OSError as e:
            logger.debug(f"Could not read {parent}: {e}")
            return []
        return [
            os.path.join(parent, name)
            for name in entries
            if not name.startswith(".")
            and os.path.isdir(os.path.join(parent, name))
            and self.is_inside_repository(os.path.join(parent, name))
        ]

    def find_repo_in_worktrees_parent(
        self, parent: str, main_folder: Optional[str] = None
    ) -> Optional[str]:
        """Pick a checkout to run git in when cwd is the directory holding the worktrees.

        Preference: configured main folder, then `main/`, then a checkout on
        main or master, then the first checkout found.
        """
        for folder in (main_folder, "main"):
            if not folder:
                continue
            candidate = os.path.join(parent, folder)
            if os.path.isdir(candidate) and self.is_inside_repository(candidate):
                return candidate

        checkouts = self._child_checkouts(parent)
        if not checkouts:
            return None

        for checkout in checkouts:
            if self.current_branch(checkout) in ("main", "master"):
                return checkout
        return checkouts[0]

    def resolve_context(
        self, cwd: Optional[str] = None, main_folder: Optional[str] = None
    ) -> RepositoryContext:
        """Work out where the command was run from.

        Args:
            cwd: Directory the command was run from (defaults to the process cwd)
            main_folder: Configured folder name of the default-branch checkout

        Returns:
            RepositoryContext describing the usable repository, if any
        """
        cwd = os.path.abspath(cwd or os.getcwd())

        if self.is_inside_repository(cwd):
            root = self.repo_root(cwd)
            branch = self.current_branch(cwd)
            return RepositoryContext(
                in_git_repo=True,
                repo_root=root,
                current_branch=branch,
                workable_repo_path=root,
                branch_mismatch_warning=self._branch_mismatch_warning(root, branch, main_folder),
            )

        workable = self.find_repo_in_worktrees_parent(cwd, main_folder)
        return RepositoryContext(
            in_git_repo=False,
            in_worktrees_parent=workable is not None,
            workable_repo_path=workable,
        )

    def _branch_mismatch_warning(
        self, root: Optional[str], branch: Optional[str], main_folder: Optional[str]
    ) -> Optional[str]:
        if not root or not branch or branch == "HEAD":
            return None

        folder = os.path.basename(root)
        main_folders = {"main", "master", main_folder, self.repo_name(root)}
        if folder in main_folders:
            return None

        expected_folder = WorktreeService.branch_to_folder(branch)
        expected_branch = folder.replace("-", "/")
        if folder != expected_folder and expected_branch != branch:
            return (
                f"Warning: Folder '{folder}' has branch '{branch}' checked out "
                f"(expected branch matching folder name)."
            )
        return None
