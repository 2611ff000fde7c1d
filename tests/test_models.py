"""Tests for data models"""
from git_worktree_keeper.models import (
    Review,
    ReviewState,
    Worktree,
    WorktreeListItem,
    WorktreeStatus,
)


class TestReview:
    """Test building reviews from gh output."""

    def test_from_gh_json(self):
        """Test a complete record."""
        review = Review.from_gh_json(
            {"number": 5, "state": "MERGED", "headRefOid": "abc", "headRefName": "feature/x"}
        )
        assert review == Review(5, ReviewState.MERGED, "abc", "feature/x")

    def test_lowercase_state(self):
        """Test that state strings are case-insensitive."""
        assert Review.from_gh_json({"number": 5, "state": "open"}).state == ReviewState.OPEN

    def test_invalid_records(self):
        """Test records without a usable number or state."""
        assert Review.from_gh_json(None) is None
        assert Review.from_gh_json({"number": "5", "state": "OPEN"}) is None
        assert Review.from_gh_json({"number": True, "state": "OPEN"}) is None
        assert Review.from_gh_json({"number": 5, "state": "DRAFT"}) is None

    def test_empty_head_fields_are_none(self):
        """Test that empty strings become None."""
        review = Review.from_gh_json({"number": 5, "state": "OPEN", "headRefOid": "", "headRefName": ""})
        assert review.head_commit is None
        assert review.head_branch_name is None


class TestWorktreeModels:
    """Test worktree models."""

    def test_status_display_strings(self):
        """Test the display value of every status."""
        assert [s.value for s in WorktreeStatus] == [
            "No PR", "Open", "Merged", "Closed", "Changes since Merge", "Main", "Modified",
        ]

    def test_worktree_str(self):
        """Test the debug representation."""
        assert str(Worktree("/a/b", "1234567890", is_detached=True)) == "/a/b [detached at 1234567]"
        assert str(Worktree("/a/repo.git", is_bare=True)) == "/a/repo.git [bare]"
        assert str(Worktree("/a/x", "1", branch="x")) == "/a/x [x]"

    def test_list_item_to_dict(self):
        """Test the JSON field names."""
        item = WorktreeListItem("x", "/a/x", "x", "Open", 3)
        assert item.to_dict() == {"name": "x", "path": "/a/x", "branch": "x", "status": "Open", "prNumber": 3}
