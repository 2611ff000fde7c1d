"""Review (pull request) model."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ReviewState(Enum):
    """State of a pull request as reported by GitHub."""
    OPEN = "OPEN"
    MERGED = "MERGED"
    CLOSED = "CLOSED"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ReviewState"]:
        """Map a gh/GraphQL state string to a ReviewState, or None if unknown."""
        if not value:
            return None
        try:
            return cls(value.upper())
        except ValueError:
            return None


@dataclass(frozen=True)
class Review:
    """Snapshot of a pull request."""
    number: int
    state: ReviewState
    head_commit: Optional[str] = None
    head_branch_name: Optional[str] = None

    @classmethod
    def from_gh_json(cls, data: dict) -> Optional["Review"]:
        """Build a Review from a `gh --json number,state,headRefOid,headRefName` record.

        Returns None when the record lacks a usable number or state.
        """
        if not isinstance(data, dict):
            return None
        number = data.get("number")
        state = ReviewState.parse(data.get("state"))
        if not isinstance(number, int) or isinstance(number, bool) or state is None:
            return None
        return cls(
            number=number,
            state=state,
            head_commit=data.get("headRefOid") or None,
            head_branch_name=data.get("headRefName") or None,
        )
