"""Configuration handling for git-worktree-keeper"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from git_worktree_keeper.constants import CACHE_FILENAME, CONFIG_FILENAME
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Config:
    """Configuration for git-worktree-keeper with validation."""

    # Output
    verbose: bool = False
    debug: bool = False
    json_output: bool = False

    # list
    fetch: bool = False  # Stream 'git fetch --prune' before reconciling

    # sweep
    dry_run: bool = False
    force: bool = False

    # Repository layout
    remote_name: str = "origin"
    main_folder: Optional[str] = None  # Folder holding the default-branch checkout
    cache_filename: str = CACHE_FILENAME

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_remote_name()
        self._validate_cache_filename()
        self._validate_main_folder()

    def _validate_remote_name(self):
        """Validate remote_name is not empty."""
        if not self.remote_name or not self.remote_name.strip():
            raise ValueError("remote_name cannot be empty")
        self.remote_name = self.remote_name.strip()

    def _validate_cache_filename(self):
        """Validate cache_filename is a bare file name."""
        if not self.cache_filename or not self.cache_filename.strip():
            raise ValueError("cache_filename cannot be empty")
        if "/" in self.cache_filename:
            raise ValueError(f"cache_filename must not contain '/', got '{self.cache_filename}'")

    def _validate_main_folder(self):
        """Normalize an empty main_folder to None."""
        if self.main_folder is not None and not self.main_folder.strip():
            self.main_folder = None

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "verbose": self.verbose,
            "debug": self.debug,
            "json_output": self.json_output,
            "fetch": self.fetch,
            "dry_run": self.dry_run,
            "force": self.force,
            "remote_name": self.remote_name,
            "main_folder": self.main_folder,
            "cache_filename": self.cache_filename,
        }

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        known_fields = {
            "verbose",
            "debug",
            "json_output",
            "fetch",
            "dry_run",
            "force",
            "remote_name",
            "main_folder",
            "cache_filename",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)


def _read_config_file(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.debug(f"Ignoring unreadable config file {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.debug(f"Ignoring config file {path}: top level is not an object")
        return {}
    return data


def load_file_config(worktrees_root: Optional[Union[str, Path]] = None) -> dict:
    """Load settings from ~/.wtmrc.json and <worktrees root>/.wtmrc.json.

    The worktrees-root file takes precedence over the home file. Keys are
    translated to Config field names; unknown keys are ignored.

    Args:
        worktrees_root: Directory that holds all worktrees of the repository

    Returns:
        Dictionary suitable for Config.from_dict
    """
    merged: dict = {}
    merged.update(_read_config_file(Path.home() / CONFIG_FILENAME))
    if worktrees_root:
        merged.update(_read_config_file(Path(worktrees_root) / CONFIG_FILENAME))

    settings = {}
    if isinstance(merged.get("mainFolder"), str):
        settings["main_folder"] = merged["mainFolder"]
    if isinstance(merged.get("remote"), str):
        settings["remote_name"] = merged["remote"]
    return settings
