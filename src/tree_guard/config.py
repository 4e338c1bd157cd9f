"""
Configuration management for tree-guard.

Loads configuration from .treeguardrc files in the following priority:
1. Path specified via --config flag
2. .treeguardrc in current directory
3. .treeguardrc.toml in current directory
4. ~/.config/tree-guard/config.toml

Command line flags are applied on top of whatever file was found.
"""

import logging
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TODO_MARKER = "TODO"
DEFAULT_TODO_PATHSPECS = ["*.py", "*.js"]


class CleanTreeConfig(BaseModel):
    """Configuration for the clean-tree checker."""

    model_config = ConfigDict(frozen=True)

    allow_untracked: bool = Field(
        default=False,
        description="Do not fail when untracked, non-ignored files exist",
    )
    require_upstream: bool = Field(
        default=False,
        description="Fail unless the branch has an upstream and is in sync with it",
    )
    branch: Optional[str] = Field(
        default=None,
        description="Branch that must be checked out",
    )


class TodoScanConfig(BaseModel):
    """Configuration for the staged TODO scanner."""

    model_config = ConfigDict(frozen=True)

    marker: str = Field(
        default=DEFAULT_TODO_MARKER,
        min_length=1,
        description="Marker searched for in staged content",
    )
    pathspecs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TODO_PATHSPECS),
        description="Git pathspecs restricting which staged files are searched",
    )
    ignore_case: bool = Field(
        default=True,
        description="Match the marker case-insensitively",
    )


class GitConfig(BaseModel):
    """Configuration for git invocations."""

    timeout_seconds: int = Field(
        default=60,
        gt=0,
        description="Seconds before a git command is killed",
    )


class TreeGuardConfig(BaseModel):
    """Main configuration model for tree-guard."""

    clean: CleanTreeConfig = Field(default_factory=CleanTreeConfig)
    todo: TodoScanConfig = Field(default_factory=TodoScanConfig)
    git: GitConfig = Field(default_factory=GitConfig)

    def with_clean_flags(
        self,
        allow_untracked: bool = False,
        require_upstream: bool = False,
        branch: Optional[str] = None,
    ) -> CleanTreeConfig:
        """
        Merge command line flags over the file configuration.

        Boolean flags can only switch a check on; a branch given on the
        command line replaces the configured one.
        """
        return CleanTreeConfig(
            allow_untracked=allow_untracked or self.clean.allow_untracked,
            require_upstream=require_upstream or self.clean.require_upstream,
            branch=branch if branch is not None else self.clean.branch,
        )


def get_search_paths(config_path: Optional[str] = None) -> list[Path]:
    """Candidate configuration files, most specific first."""
    search_paths = [
        Path(config_path) if config_path else None,
        Path.cwd() / ".treeguardrc",
        Path.cwd() / ".treeguardrc.toml",
        Path.home() / ".config" / "tree-guard" / "config.toml",
    ]
    return [path for path in search_paths if path is not None]


def load_config(config_path: Optional[str] = None) -> TreeGuardConfig:
    """
    Load configuration from file or use defaults.

    Args:
        config_path: Optional explicit path to config file.

    Returns:
        TreeGuardConfig instance with loaded or default values.
    """
    for path in get_search_paths(config_path):
        if not path.exists():
            continue

        try:
            data = toml.load(path)
            config = TreeGuardConfig(**data)
        except (OSError, toml.TomlDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring invalid config file {path}: {e}")
            continue

        logger.debug(f"Loaded configuration from {path}")
        return config

    return TreeGuardConfig()
