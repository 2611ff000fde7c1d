"""Status reconciliation: classify every worktree branch against its pull request.

The expensive part of listing worktrees is asking GitHub which PR belongs to
which branch. The reconciler only does that for branches missing from the
cache, fetches the state of every known PR in a single batch call, and falls
back to a fresh per-branch lookup only when a cached mapping looks wrong.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set, TYPE_CHECKING

from git_worktree_keeper.models.review import Review, ReviewState
from git_worktree_keeper.models.status import BranchStatus, WorktreeStatus
from git_worktree_keeper.models.worktree import Worktree
from git_worktree_keeper.logging_config import get_logger

if TYPE_CHECKING:
    from git_worktree_keeper.services.git.repository import RepositoryInspector
    from git_worktree_keeper.services.github_service import GitHubService

logger = get_logger(__name__)

# Fresh lookups made while classifying one branch may recurse at most this deep
MAX_LOOKUP_DEPTH = 1


@dataclass
class ReconciliationResult:
    """Statuses for one run plus the cache snapshot to persist."""

    statuses: Dict[str, BranchStatus] = field(default_factory=dict)
    cache: Dict[str, int] = field(default_factory=dict)
    cache_updates: Dict[str, int] = field(default_factory=dict)
    cache_removals: Set[str] = field(default_factory=set)

    @property
    def cache_changed(self) -> bool:
        return bool(self.cache_updates or self.cache_removals)


class StatusReconciler:
    """Computes the WorktreeStatus of every branch-bearing worktree.

    The cache is passed in as a plain mapping and the updated mapping is
    returned in the result; persisting it is the caller's job.
    """

    def __init__(self, inspector: "RepositoryInspector", github_service: "GitHubService"):
        """Initialize the reconciler.

        Args:
            inspector: Local git queries
            github_service: PR lookups; must expose is_available(),
                find_review_for_branch() and batch_fetch_review_states()
        """
        self.inspector = inspector
        self.github_service = github_service

    def reviews_available(self) -> bool:
        """Check once whether PR lookups can work at all."""
        if not self.github_service.is_available():
            logger.info("[GitHub] gh CLI not available - PR detection disabled")
            return False
        if not self.inspector.is_github_repo():
            logger.info("Non-GitHub repository - PR detection disabled")
            return False
        return True

    def reconcile(
        self,
        worktrees: Iterable[Worktree],
        default_branch: str,
        cached_numbers: Optional[Mapping[str, int]] = None,
    ) -> ReconciliationResult:
        """Classify every branch checked out in `worktrees`.

        Args:
            worktrees: All worktrees of the repository
            default_branch: Name of the trunk branch, reported as MAIN
            cached_numbers: Branch -> PR number snapshot loaded from the cache

        Returns:
            ReconciliationResult with one BranchStatus per branch (bare and
            detached worktrees are not included) and the updated cache
        """
        result = ReconciliationResult(cache=dict(cached_numbers or {}))

        # Step 1: partition
        by_branch: Dict[str, Worktree] = {}
        for wt in worktrees:
            if wt.has_branch:
                by_branch.setdefault(wt.branch, wt)
        if not by_branch:
            return result

        if default_branch in by_branch:
            result.statuses[default_branch] = BranchStatus(WorktreeStatus.MAIN)

        feature_branches = [b for b in by_branch if b != default_branch]
        if not feature_branches:
            return result

        # Step 2: availability gate
        if not self.reviews_available():
            for branch in feature_branches:
                result.statuses[branch] = BranchStatus(WorktreeStatus.NO_PR)
            return result

        # Step 3: cache resolution, single lookups only for uncached branches
        known = {b: result.cache[b] for b in feature_branches if b in result.cache}
        uncached = [b for b in feature_branches if b not in known]
        logger.debug(f"{len(known)} cached PR number(s), looking up {len(uncached)} branch(es)")
        for branch in uncached:
            review = self.github_service.find_review_for_branch(branch)
            if review:
                known[branch] = review.number
                result.cache_updates[branch] = review.number

        # Step 4: one batch call for every known number
        reviews = self.github_service.batch_fetch_review_states(sorted(set(known.values())))

        # Step 5: per-branch classification
        for branch in feature_branches:
            number = known.get(branch)
            review = reviews.get(number) if number is not None else None
            if number is not None and review is None:
                logger.debug(f"State of PR #{number} for {branch} unavailable")
            result.statuses[branch] = self.classify(branch, review, result)

        # Step 6: uncommitted work is never reported as merged
        for branch, status in list(result.statuses.items()):
            if status.status != WorktreeStatus.MERGED:
                continue
            if self.inspector.has_uncommitted_changes(by_branch[branch].path):
                logger.debug(f"Branch {branch} is merged but has uncommitted changes")
                result.statuses[branch] = BranchStatus(
                    WorktreeStatus.MODIFIED, status.review_number
                )

        # Step 7: fold queued corrections into the snapshot
        for branch in result.cache_removals:
            result.cache.pop(branch, None)
        result.cache.update(result.cache_updates)
        return result

    def classify(
        self,
        branch: str,
        review: Optional[Review],
        result: ReconciliationResult,
        depth: int = 0,
    ) -> BranchStatus:
        """Apply the status precedence to one branch.

        NO_PR when nothing is known, then OPEN, then CLOSED; only MERGED
        needs the local commit graph.
        """
        if review is None:
            return BranchStatus(WorktreeStatus.NO_PR)
        if review.state == ReviewState.OPEN:
            return BranchStatus(WorktreeStatus.OPEN, review.number)
        if review.state == ReviewState.CLOSED:
            return BranchStatus(WorktreeStatus.CLOSED, review.number)

        if review.head_branch_name and review.head_branch_name != branch:
            return self._reclassify_stale(branch, review, result, depth)
        return self._classify_merged(branch, review, result, depth)

    def _reclassify_stale(
        self, branch: str, review: Review, result: ReconciliationResult, depth: int
    ) -> BranchStatus:
        """The cached PR belongs to another branch: look the branch up again."""
        logger.debug(
            f"Cached PR #{review.number} is for {review.head_branch_name}, not {branch}"
        )
        if depth >= MAX_LOOKUP_DEPTH:
            return BranchStatus(WorktreeStatus.NO_PR)

        fresh = self.github_service.find_review_for_branch(branch)
        if fresh is not None and fresh.head_branch_name and fresh.head_branch_name != branch:
            fresh = None
        if fresh is None:
            result.cache_removals.add(branch)
            result.cache_updates.pop(branch, None)
            return BranchStatus(WorktreeStatus.NO_PR)

        result.cache_updates[branch] = fresh.number
        result.cache_removals.discard(branch)
        return self.classify(branch, fresh, result, depth + 1)

    def _classify_merged(
        self, branch: str, review: Review, result: ReconciliationResult, depth: int
    ) -> BranchStatus:
        """Decide between MERGED and CHANGES_SINCE_MERGE for a merged PR."""
        merged = BranchStatus(WorktreeStatus.MERGED, review.number)
        pr_head = review.head_commit
        if not pr_head:
            return merged

        local_head = self.inspector.head_commit(branch)
        if local_head == pr_head:
            return merged

        # Not fetched yet: nothing to compare against, assume merged
        if not self.inspector.commit_exists(pr_head):
            logger.debug(f"PR #{review.number} head {pr_head[:7]} not found locally")
            return merged

        # Commits were pushed to the PR after this checkout last pulled
        if local_head and self.inspector.is_ancestor(local_head, pr_head):
            return merged

        if not self.inspector.non_merge_commits_exist_after(branch, pr_head):
            # Only pulled merge commits on top of the PR head
            return merged

        if depth < MAX_LOOKUP_DEPTH:
            newer = self._newer_merged_review(branch, review, result, depth)
            if newer is not None:
                return newer

        return BranchStatus(WorktreeStatus.CHANGES_SINCE_MERGE, review.number)

    def _newer_merged_review(
        self, branch: str, review: Review, result: ReconciliationResult, depth: int
    ) -> Optional[BranchStatus]:
        """Check whether a later merged PR already covers the new commits.

        Unlike the first comparison, a PR head missing from the local
        repository is not taken as proof: the newer PR must contain the
        local head.
        """
        fresh = self.github_service.find_review_for_branch(branch)
        if fresh is None or fresh.number == review.number or fresh.state != ReviewState.MERGED:
            return None
        if fresh.head_branch_name and fresh.head_branch_name != branch:
            return None
        if not self._contains_local_head(branch, fresh.head_commit):
            return None

        logger.debug(f"Branch {branch} moved on to merged PR #{fresh.number}")
        result.cache_updates[branch] = fresh.number
        result.cache_removals.discard(branch)
        return BranchStatus(WorktreeStatus.MERGED, fresh.number)

    def _contains_local_head(self, branch: str, pr_head: Optional[str]) -> bool:
        local_head = self.inspector.head_commit(branch)
        if not local_head or not pr_head:
            return False
        if local_head == pr_head:
            return True
        return self.inspector.commit_exists(pr_head) and self.inspector.is_ancestor(local_head, pr_head)


def changed_branches(before: Mapping[str, int], after: Mapping[str, int]) -> List[str]:
    """List branches whose cached PR number differs between two snapshots."""
    keys = set(before) | set(after)
    return sorted(k for k in keys if before.get(k) != after.get(k))
