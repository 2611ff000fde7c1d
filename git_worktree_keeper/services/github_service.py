"""GitHub pull request lookups through the GitHub CLI (gh)"""
import json
from typing import Dict, Iterable, List, Optional

from git_worktree_keeper.models.review import Review, ReviewState
from git_worktree_keeper.services.process_executor import ProcessExecutor, CommandResult
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)

PR_FIELDS = "number,state,headRefOid,headRefName"


class GitHubService:
    """Review-system client backed by the `gh` executable.

    Lookups never raise: a failed or unparseable gh call is logged and
    reported as "nothing found".
    """

    def __init__(self, repo_path: Optional[str], executor: Optional[ProcessExecutor] = None):
        """Initialize the service.

        Args:
            repo_path: Directory inside the repository; gh resolves the GitHub
                repository from its remotes
            executor: Command runner; a new one is created if omitted
        """
        self.repo_path = repo_path
        self.executor = executor or ProcessExecutor(repo_path)
        self._available: Optional[bool] = None

    def _gh(self, *args: str) -> CommandResult:
        return self.executor.run(["gh", *args], cwd=self.repo_path)

    def is_available(self) -> bool:
        """Check if the GitHub CLI can be run. The answer is memoized."""
        if self._available is None:
            result = self._gh("--version")
            self._available = result.success
            if not result.success:
                logger.debug(f"[GitHub] gh CLI not available: {result.error}")
        return self._available

    def _list_prs(self, branch: str, state: str) -> Optional[Review]:
        result = self._gh(
            "pr", "list",
            "--head", branch,
            "--state", state,
            "--json", PR_FIELDS,
            "--limit", "1",
        )
        if not result.success:
            logger.debug(f"[GitHub] Error listing {state} PRs for {branch}: {result.error}")
            return None

        try:
            prs = json.loads(result.output or "[]")
        except json.JSONDecodeError as e:
            logger.debug(f"[GitHub] Unparseable PR list for {branch}: {e}")
            return None

        if not isinstance(prs, list) or not prs:
            return None

        review = Review.from_gh_json(prs[0])
        if review:
            logger.debug(f"[GitHub] Branch {branch} -> PR #{review.number} ({review.state.value})")
        return review

    def find_review_for_branch(self, branch: str) -> Optional[Review]:
        """Get the most recent PR of any state whose head is `branch`."""
        return self._list_prs(branch, "all")

    def find_merged_review_for_branch(self, branch: str) -> Optional[Review]:
        """Get the most recent merged PR whose head is `branch`."""
        review = self._list_prs(branch, "merged")
        if review and review.state != ReviewState.MERGED:
            return None
        return review

    @staticmethod
    def build_batch_query(numbers: List[int]) -> str:
        """Build one GraphQL query that fetches every PR number via aliases."""
        fields = " ".join(
            f"pr{number}: pullRequest(number: {number}) {{ number state headRefOid headRefName }}"
            for number in numbers
        )
        return (
            "query($owner: String!, $name: String!) { "
            f"repository(owner: $owner, name: $name) {{ {fields} }} }}"
        )

    def batch_fetch_review_states(self, numbers: Iterable[int]) -> Dict[int, Review]:
        """Fetch the current state of many PRs with a single gh call.

        PRs GitHub cannot resolve are left out of the result. If the call
        fails outright the result is empty; callers must treat a missing
        number as "unknown", not as "not merged".

        Args:
            numbers: PR numbers to look up

        Returns:
            Mapping of PR number to Review
        """
        unique = sorted({n for n in numbers if isinstance(n, int) and n > 0})
        if not unique:
            return {}

        logger.debug(f"[GitHub] Fetching state of {len(unique)} PR(s) in one query")
        result = self._gh(
            "api", "graphql",
            "-F", "owner={owner}",
            "-F", "name={repo}",
            "-f", f"query={self.build_batch_query(unique)}",
        )

        # gh prints the response body even when some aliases fail to resolve
        try:
            body = json.loads(result.output) if result.output else None
        except json.JSONDecodeError as e:
            logger.debug(f"[GitHub] Unparseable batch response: {e}")
            body = None

        repository = None
        if isinstance(body, dict) and isinstance(body.get("data"), dict):
            repository = body["data"].get("repository")
        if not isinstance(repository, dict):
            logger.debug(f"[GitHub] Batch PR query failed: {result.error}")
            return {}

        if not result.success:
            logger.debug(f"[GitHub] Batch PR query partially failed: {result.error}")

        reviews: Dict[int, Review] = {}
        for number in unique:
            review = Review.from_gh_json(repository.get(f"pr{number}"))
            if review:
                reviews[review.number] = review

        logger.debug(f"[GitHub] Fetched state for {len(reviews)} of {len(unique)} PR(s)")
        return reviews
