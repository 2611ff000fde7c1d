"""Cache service for branch -> pull request number mappings."""
import json
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Union

from git_worktree_keeper.constants import CACHE_FILENAME
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


class CacheService:
    """Persists which PR number belongs to which branch.

    The document lives in the directory that holds all worktrees of a
    repository and looks like ``{"prNumbers": {"feature/x": 42}}``. It is an
    optimization only: every read failure yields an empty mapping and every
    write failure is ignored. There is no locking, so concurrent runs race
    and the last writer wins.
    """

    def __init__(self, cache_dir: Optional[Union[str, Path]], filename: str = CACHE_FILENAME):
        """Initialize cache service.

        Args:
            cache_dir: Directory holding the worktrees (parent of the checkout).
                None disables the cache.
            filename: Name of the cache document
        """
        self.cache_file: Optional[Path] = Path(cache_dir) / filename if cache_dir else None

    def load(self) -> Dict[str, int]:
        """Load the branch -> PR number mapping.

        Returns:
            Mapping, empty if the file is missing or malformed
        """
        if self.cache_file is None or not self.cache_file.exists():
            logger.debug("No cache file found")
            return {}

        try:
            with open(self.cache_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.debug(f"Invalid JSON in cache file: {e}")
            return {}
        except OSError as e:
            logger.debug(f"Failed to read cache: {e}")
            return {}

        pr_numbers = data.get("prNumbers") if isinstance(data, dict) else None
        if not isinstance(pr_numbers, dict):
            logger.debug("Cache missing 'prNumbers' object, ignoring cache")
            return {}

        mapping = {
            branch: number
            for branch, number in pr_numbers.items()
            if isinstance(number, int) and not isinstance(number, bool)
        }
        if len(mapping) != len(pr_numbers):
            logger.debug(f"Dropped {len(pr_numbers) - len(mapping)} malformed cache entries")

        logger.debug(f"Loaded cache with {len(mapping)} PR numbers")
        return mapping

    def save(self, mapping: Mapping[str, int]) -> None:
        """Overwrite the cache document with `mapping`.

        Write failures are logged and swallowed.
        """
        if self.cache_file is None:
            return

        temp_file = self.cache_file.with_suffix(".tmp")
        try:
            # Atomic write: write to temp file, then rename
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump({"prNumbers": dict(mapping)}, f, indent=2)
                f.write("\n")
            temp_file.replace(self.cache_file)
            logger.debug(f"Saved cache with {len(mapping)} PR numbers")
        except OSError as e:
            logger.debug(f"Failed to save cache: {e}")
        finally:
            if temp_file.exists():
                try:
                    temp_file.unlink()
                except OSError as e:
                    logger.debug(f"Could not remove temporary cache file: {e}")

    def get_cached_numbers(self, branches: Iterable[str]) -> Dict[str, int]:
        """Get cached PR numbers for the given branches only."""
        cache = self.load()
        return {branch: cache[branch] for branch in branches if branch in cache}

    def update(self, mappings: Mapping[str, int], removed: Iterable[str] = ()) -> None:
        """Merge mappings into the stored cache and drop `removed`, with a single write."""
        removed = list(removed)
        if not mappings and not removed:
            return
        cache = self.load()
        for branch in removed:
            cache.pop(branch, None)
        cache.update(mappings)
        self.save(cache)

    def remove_branches(self, branches: Iterable[str]) -> None:
        """Remove branches from the cache (e.g. when their worktree is deleted)."""
        cache = self.load()
        removed = [branch for branch in branches if cache.pop(branch, None) is not None]
        if not removed:
            logger.debug("No branches were in cache, nothing to remove")
            return
        self.save(cache)
        logger.debug(f"Removed {len(removed)} branch(es) from cache")
