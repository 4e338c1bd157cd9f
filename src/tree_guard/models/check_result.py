"""Pydantic models for clean-tree check and TODO scan results."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class CheckStatus(str, Enum):
    """Outcome of a single clean-tree check."""

    CLEAN = "clean"
    NOT_A_REPOSITORY = "not_a_repository"
    BRANCH_MISMATCH = "branch_mismatch"
    STAGED_CHANGES = "staged_changes"
    UNSTAGED_CHANGES = "unstaged_changes"
    UNTRACKED_FILES = "untracked_files"
    NO_UPSTREAM = "no_upstream"
    BEHIND_UPSTREAM = "behind_upstream"
    AHEAD_OF_UPSTREAM = "ahead_of_upstream"
    UPSTREAM_QUERY_FAILED = "upstream_query_failed"
    ERROR = "error"


class CleanTreeResult(BaseModel):
    """Result of checking a working tree."""

    status: CheckStatus
    message: str
    hint: Optional[str] = Field(
        default=None, description="What to do about a failed check"
    )
    paths: List[str] = Field(
        default_factory=list, description="Files responsible for the failure"
    )
    porcelain: List[str] = Field(
        default_factory=list, description="Lines of git status --porcelain"
    )
    branch: Optional[str] = None
    expected_branch: Optional[str] = None
    upstream: Optional[str] = None
    commits_behind: int = 0
    commits_ahead: int = 0

    @property
    def is_clean(self) -> bool:
        """Whether the check passed."""
        return self.status == CheckStatus.CLEAN


class TodoMatch(BaseModel):
    """A staged line containing the TODO marker."""

    path: str = Field(description="Path relative to the repository root")
    line_number: int = Field(description="1-based line number in the staged blob")
    line: str = Field(description="Content of the matching line")

    def __str__(self) -> str:
        return f"{self.path}:{self.line_number}:{self.line}"


class TodoScanResult(BaseModel):
    """Result of scanning the index for TODO markers."""

    marker: str
    pathspecs: List[str] = []
    matches: List[TodoMatch] = []

    @property
    def is_clean(self) -> bool:
        """Whether no staged line carries the marker."""
        return not self.matches

    @property
    def files(self) -> List[str]:
        """Distinct paths with at least one match, in output order."""
        return list(dict.fromkeys(match.path for match in self.matches))
