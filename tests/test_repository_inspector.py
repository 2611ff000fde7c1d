"""Tests for RepositoryInspector and BranchQueries"""
import os

import git

from conftest import commit_file
from git_worktree_keeper.services.git import RepositoryInspector


class TestBranchQueries:
    """Test commit graph queries against a real repository."""

    def test_head_commit(self, git_repo, inspector):
        """Test resolving a local branch head."""
        assert inspector.head_commit("main") == git_repo.head.commit.hexsha
        assert inspector.head_commit("no/such-branch") is None

    def test_commit_exists(self, git_repo, inspector):
        """Test commit existence, including non-commit objects."""
        assert inspector.commit_exists(git_repo.head.commit.hexsha) is True
        assert inspector.commit_exists("0" * 40) is False
        assert inspector.commit_exists(git_repo.head.commit.tree.hexsha) is False
        assert inspector.commit_exists("") is False

    def test_is_ancestor(self, git_repo, inspector, add_worktree):
        """Test ancestry in both directions."""
        base = git_repo.head.commit.hexsha
        add_worktree("feature/login")
        tip = inspector.head_commit("feature/login")

        assert inspector.is_ancestor(base, tip) is True
        assert inspector.is_ancestor(tip, base) is False
        assert inspector.is_ancestor(tip, tip) is True
        assert inspector.is_ancestor("", tip) is False

    def test_non_merge_commits_exist_after(self, git_repo, inspector, add_worktree):
        """Test detection of new work after a given commit."""
        base = git_repo.head.commit.hexsha
        path = add_worktree("feature/login")
        first = inspector.head_commit("feature/login")

        assert inspector.non_merge_commits_exist_after("feature/login", base) is True
        assert inspector.non_merge_commits_exist_after("feature/login", first) is False

        commit_file(path, "more.txt", "more\n", "More work")
        assert inspector.non_merge_commits_exist_after("feature/login", first) is True

    def test_non_merge_commits_unknown_sha(self, inspector):
        """Test that a failing log counts as no new work."""
        assert inspector.non_merge_commits_exist_after("main", "0" * 40) is False

    def test_branch_existence(self, git_repo, inspector):
        """Test local and remote branch checks."""
        assert inspector.branches.local_branch_exists("main") is True
        assert inspector.branches.local_branch_exists("nope") is False
        assert inspector.branches.remote_branch_exists("main") is False

    def test_default_branch_falls_back_to_main(self, inspector):
        """Test the fallback when the remote has no HEAD."""
        assert inspector.default_branch() == "main"

    def test_default_branch_from_remote_head(self, git_repo, inspector):
        """Test that the remote's symbolic HEAD wins."""
        sha = git_repo.head.commit.hexsha
        git_repo.git.update_ref("refs/remotes/origin/trunk", sha)
        git_repo.git.symbolic_ref("refs/remotes/origin/HEAD", "refs/remotes/origin/trunk")
        assert inspector.default_branch() == "trunk"

    def test_default_branch_probes_master(self, git_repo, inspector):
        """Test probing for a remote master branch."""
        git_repo.git.update_ref("refs/remotes/origin/master", git_repo.head.commit.hexsha)
        assert inspector.default_branch() == "master"

    def test_delete_branch(self, git_repo, inspector):
        """Test deleting a branch that is not checked out."""
        git_repo.git.branch("old/branch")
        assert inspector.delete_branch("old/branch", force=True).success is True
        assert inspector.branches.local_branch_exists("old/branch") is False


class TestRepositoryQueries:
    """Test repository-level queries."""

    def test_remote_queries(self, inspector):
        """Test the GitHub remote helpers."""
        assert inspector.remote_url() == "git@github.com:test/test-repo.git"
        assert inspector.is_github_repo() is True
        assert inspector.repo_name() == "test-repo"

    def test_non_github_remote(self, git_repo, inspector):
        """Test that other hosts are not GitHub."""
        git_repo.git.remote("set-url", "origin", "https://gitlab.com/test/test-repo.git")
        assert inspector.is_github_repo() is False

    def test_no_remote(self, git_repo, inspector):
        """Test a repository without origin."""
        git_repo.git.remote("remove", "origin")
        assert inspector.remote_url() is None
        assert inspector.is_github_repo() is False
        assert inspector.repo_name() is None

    def test_repo_root_and_current_branch(self, git_repo, inspector, add_worktree):
        """Test root and branch of the main checkout and a worktree."""
        path = add_worktree("feature/login")
        assert os.path.realpath(inspector.repo_root(str(path))) == os.path.realpath(str(path))
        assert inspector.current_branch(str(path)) == "feature/login"
        assert inspector.current_branch(git_repo.working_dir) == "main"

    def test_is_inside_repository(self, git_repo, inspector, temp_dir):
        """Test the work-tree check."""
        assert inspector.is_inside_repository(git_repo.working_dir) is True
        assert inspector.is_inside_repository(str(temp_dir)) is False


class TestResolveContext:
    """Test working out which checkout to use."""

    def test_inside_repository(self, git_repo):
        """Test running from inside a checkout."""
        context = RepositoryInspector().resolve_context(git_repo.working_dir)
        assert context.in_git_repo is True
        assert context.is_usable is True
        assert os.path.realpath(context.workable_repo_path) == os.path.realpath(git_repo.working_dir)
        assert context.current_branch == "main"
        assert context.branch_mismatch_warning is None

    def test_worktrees_parent_prefers_main_folder(self, git_repo, project_dir, add_worktree):
        """Test running from the directory holding the worktrees."""
        add_worktree("feature/login")
        context = RepositoryInspector().resolve_context(str(project_dir))
        assert context.in_git_repo is False
        assert context.in_worktrees_parent is True
        assert os.path.realpath(context.workable_repo_path) == os.path.realpath(git_repo.working_dir)

    def test_worktrees_parent_configured_folder(self, git_repo, project_dir, add_worktree):
        """Test that a configured main folder is preferred."""
        add_worktree("feature/login")
        context = RepositoryInspector().resolve_context(str(project_dir), main_folder="feature-login")
        assert os.path.basename(context.workable_repo_path) == "feature-login"

    def test_worktrees_parent_without_main_folder(self, temp_dir):
        """Test picking the checkout on main when there is no main/ folder."""
        parent = temp_dir / "elsewhere"
        trunk = parent / "trunk"
        other = parent / "aaa-other"
        for path in (trunk, other):
            path.mkdir(parents=True)
        repo = git.Repo.init(trunk)
        repo.config_writer().set_value("user", "name", "Test User").release()
        repo.config_writer().set_value("user", "email", "test@example.com").release()
        commit_file(trunk, "README.md", "x\n", "Initial commit")
        repo.git.branch("-M", "main")
        repo.git.worktree("add", "-b", "feature/x", str(parent / "feature-x"))
        repo.close()

        context = RepositoryInspector().resolve_context(str(parent))
        assert os.path.basename(context.workable_repo_path) == "trunk"

    def test_unrelated_directory(self, temp_dir):
        """Test that a plain directory gives an unusable context."""
        (temp_dir / "empty").mkdir()
        context = RepositoryInspector().resolve_context(str(temp_dir / "empty"))
        assert context.in_git_repo is False
        assert context.in_worktrees_parent is False
        assert context.is_usable is False

    def test_branch_mismatch_warning(self, git_repo, project_dir):
        """Test warning when a folder holds an unrelated branch."""
        path = project_dir / "feature-login"
        git_repo.git.worktree("add", "-b", "bugfix/other", str(path))

        context = RepositoryInspector().resolve_context(str(path))
        assert context.branch_mismatch_warning is not None
        assert "feature-login" in context.branch_mismatch_warning
        assert "bugfix/other" in context.branch_mismatch_warning

    def test_no_warning_when_folder_matches(self, git_repo, add_worktree):
        """Test that a dashed folder of the branch is fine."""
        path = add_worktree("feature/login")
        context = RepositoryInspector().resolve_context(str(path))
        assert context.branch_mismatch_warning is None
