"""Custom exceptions for git-worktree-keeper"""

from typing import Optional


class WorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""
    pass


class GitOperationError(WorktreeKeeperError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class NoRepositoryContextError(GitOperationError):
    """Raised when an operation needs a repository root and there is none."""

    def __init__(self, operation: str = "resolve_repo_root"):
        super().__init__(operation, "Not inside a git repository")


class GitHubCLIError(WorktreeKeeperError):
    """Exception raised for errors in GitHub CLI operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"GitHub CLI operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class GitHubCLIUnavailableError(GitHubCLIError):
    """Exception raised when the 'gh' executable cannot be run."""

    def __init__(self):
        super().__init__("check_available", "GitHub CLI 'gh' is not installed or not on PATH")


class NotGitHubRepositoryError(WorktreeKeeperError):
    """Exception raised when the remote is not hosted on GitHub."""

    def __init__(self, remote_url: Optional[str] = None):
        self.remote_url = remote_url
        if remote_url:
            message = f"Remote '{remote_url}' does not appear to be a GitHub repository"
        else:
            message = "Repository has no remote to look up pull requests on"
        super().__init__(message)
