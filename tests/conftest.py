"""Pytest fixtures for git-worktree-keeper tests"""
import tempfile
from pathlib import Path
from unittest.mock import Mock
import pytest
import git

from git_worktree_keeper.models.review import Review, ReviewState
from git_worktree_keeper.services.git import RepositoryInspector
from git_worktree_keeper.services.github_service import GitHubService


def commit_file(repo_path, name, content, message):
    """Write a file in a checkout and commit it. Returns the new commit SHA."""
    repo = git.Repo(repo_path)
    try:
        (Path(repo_path) / name).write_text(content)
        repo.index.add([name])
        return repo.index.commit(message).hexsha
    finally:
        repo.close()


def make_review(number, state="OPEN", head_commit=None, head_branch_name=None):
    """Build a Review with a state given as a string."""
    return Review(
        number=number,
        state=ReviewState(state),
        head_commit=head_commit,
        head_branch_name=head_branch_name,
    )


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def mock_config():
    """Create a mock configuration dictionary."""
    return {
        'verbose': False,
        'debug': False,
        'json_output': False,
        'fetch': False,
        'dry_run': False,
        'force': False,
        'remote_name': 'origin',
    }


@pytest.fixture
def project_dir(temp_dir):
    """Directory holding all worktrees of the test repository."""
    path = temp_dir / "project"
    path.mkdir()
    return path


@pytest.fixture
def git_repo(project_dir):
    """Create a real Git repository at <project>/main for testing."""
    repo_path = project_dir / "main"
    repo_path.mkdir()

    # Initialize repository
    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    # Create initial commit on main branch
    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    repo.git.branch('-M', 'main')

    # Add a fake GitHub remote for testing
    repo.create_remote('origin', 'git@github.com:test/test-repo.git')

    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def add_worktree(git_repo, project_dir):
    """Factory creating a sibling worktree on a new branch, with one commit."""
    def _add(branch, with_commit=True):
        path = project_dir / branch.replace("/", "-")
        git_repo.git.worktree("add", "-b", branch, str(path))
        if with_commit:
            commit_file(path, f"{branch.replace('/', '-')}.txt", f"{branch}\n", f"Work on {branch}")
        return path
    return _add


@pytest.fixture
def inspector(git_repo):
    """RepositoryInspector pointed at the test repository."""
    return RepositoryInspector(git_repo.working_dir)


@pytest.fixture
def mock_inspector():
    """Create a mock repository inspector on a GitHub remote with a clean tree."""
    inspector = Mock(spec=RepositoryInspector)
    inspector.is_github_repo.return_value = True
    inspector.has_uncommitted_changes.return_value = False
    inspector.default_branch.return_value = "main"
    inspector.head_commit.return_value = None
    inspector.commit_exists.return_value = True
    inspector.is_ancestor.return_value = False
    inspector.non_merge_commits_exist_after.return_value = False
    return inspector


@pytest.fixture
def mock_github():
    """Create a mock GitHub service with gh available and no PRs."""
    github = Mock(spec=GitHubService)
    github.is_available.return_value = True
    github.find_review_for_branch.return_value = None
    github.find_merged_review_for_branch.return_value = None
    github.batch_fetch_review_states.return_value = {}
    return github
