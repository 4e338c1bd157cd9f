"""Scanner for TODO markers in content staged for commit."""

import logging
from pathlib import Path
from typing import Optional

from tree_guard.config import TodoScanConfig
from tree_guard.core.repository import GitRepository
from tree_guard.models.check_result import TodoScanResult

logger = logging.getLogger(__name__)


class TodoScanner:
    """
    Searches the index for the TODO marker.

    Only staged blobs are searched, so unstaged edits and ignored files
    never produce matches.
    """

    def __init__(
        self,
        config: Optional[TodoScanConfig] = None,
        repo_path: Optional[Path] = None,
        timeout_seconds: int = 60,
    ):
        self.config = config or TodoScanConfig()
        self.repo_path = repo_path
        self.timeout_seconds = timeout_seconds

    def scan(self) -> TodoScanResult:
        """
        Scan staged files matching the configured pathspecs.

        Raises:
            NotAGitRepositoryError: If not inside a git work tree.
            GitQueryError: If git grep fails.
        """
        repository = GitRepository(self.repo_path, timeout_seconds=self.timeout_seconds)

        matches = repository.grep_staged(
            self.config.marker,
            self.config.pathspecs,
            ignore_case=self.config.ignore_case,
        )
        logger.info(f"Found {len(matches)} staged line(s) containing {self.config.marker!r}")

        return TodoScanResult(
            marker=self.config.marker,
            pathspecs=list(self.config.pathspecs),
            matches=matches,
        )
