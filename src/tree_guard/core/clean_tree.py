"""
Clean working tree checks for CI.

This module verifies, in order, that:
- The current directory is inside a git work tree
- The expected branch is checked out
- Nothing is staged and nothing is modified but unstaged
- No untracked, non-ignored files exist
- The branch is in sync with its upstream

The first failing check ends the run.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from tree_guard.config import CleanTreeConfig
from tree_guard.core.repository import (
    GitQueryError,
    GitRepository,
    NotAGitRepositoryError,
)
from tree_guard.models.check_result import CheckStatus, CleanTreeResult

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "OK: working tree is clean."

Check = Callable[[GitRepository], Optional[CleanTreeResult]]


class CleanTreeChecker:
    """
    Checks that a working tree is clean enough for a CI run.

    Every check returns None when it passes or a CleanTreeResult
    describing the violation.
    """

    def __init__(
        self,
        config: Optional[CleanTreeConfig] = None,
        repo_path: Optional[Path] = None,
        timeout_seconds: int = 60,
    ):
        self.config = config or CleanTreeConfig()
        self.repo_path = repo_path
        self.timeout_seconds = timeout_seconds

    def _open_repository(self) -> GitRepository:
        return GitRepository(self.repo_path, timeout_seconds=self.timeout_seconds)

    def check(self) -> CleanTreeResult:
        """
        Run all configured checks, stopping at the first failure.

        Returns:
            The failing CleanTreeResult, or a CLEAN result.
        """
        try:
            repository = self._open_repository()
        except NotAGitRepositoryError as e:
            logger.debug(str(e))
            return CleanTreeResult(
                status=CheckStatus.NOT_A_REPOSITORY,
                message="Not inside a Git repository.",
            )

        checks: List[Check] = [self._check_branch, self._check_staged, self._check_unstaged]
        if not self.config.allow_untracked:
            checks.append(self._check_untracked)
        if self.config.require_upstream:
            checks.append(self._check_upstream)

        try:
            for check in checks:
                result = check(repository)
                if result is not None:
                    logger.info(f"Check failed: {result.status.value}")
                    return result
        except GitQueryError as e:
            return CleanTreeResult(status=CheckStatus.ERROR, message=str(e))

        logger.info("All checks passed")
        return CleanTreeResult(status=CheckStatus.CLEAN, message=SUCCESS_MESSAGE)

    def survey(self) -> List[Tuple[str, CleanTreeResult]]:
        """
        Run every check without stopping at failures.

        Untracked files and upstream sync are always inspected so the
        overview is complete; the configuration only decides the branch
        to compare against.

        Raises:
            NotAGitRepositoryError: If not inside a git work tree.
        """
        repository = self._open_repository()
        named_checks: List[Tuple[str, Check]] = [
            ("Branch", self._check_branch),
            ("Staged changes", self._check_staged),
            ("Unstaged changes", self._check_unstaged),
            ("Untracked files", self._check_untracked),
            ("Upstream", self._check_upstream),
        ]

        results = []
        for name, check in named_checks:
            try:
                result = check(repository) or self._passed(name, repository)
            except GitQueryError as e:
                result = CleanTreeResult(status=CheckStatus.ERROR, message=str(e))
            results.append((name, result))

        return results

    def _passed(self, name: str, repository: GitRepository) -> CleanTreeResult:
        if name == "Branch":
            branch = repository.current_branch()
            return CleanTreeResult(status=CheckStatus.CLEAN, message=f"On '{branch}'", branch=branch)
        if name == "Upstream":
            return CleanTreeResult(
                status=CheckStatus.CLEAN,
                message=f"In sync with '{repository.upstream_branch()}'",
            )
        return CleanTreeResult(status=CheckStatus.CLEAN, message="None")

    def _check_branch(self, repository: GitRepository) -> Optional[CleanTreeResult]:
        expected = self.config.branch
        if not expected:
            return None

        current = repository.current_branch()
        if current == expected:
            return None

        return CleanTreeResult(
            status=CheckStatus.BRANCH_MISMATCH,
            message=f"Current branch is '{current}', expected '{expected}'.",
            hint=f"Check out '{expected}' before running CI.",
            branch=current,
            expected_branch=expected,
        )

    def _check_staged(self, repository: GitRepository) -> Optional[CleanTreeResult]:
        repository.refresh_index()

        paths = repository.staged_paths()
        if not paths:
            return None

        return CleanTreeResult(
            status=CheckStatus.STAGED_CHANGES,
            message="Uncommitted staged changes detected (index != HEAD).",
            hint="Please commit or stash staged changes before running CI.",
            paths=paths,
            porcelain=repository.porcelain_status(),
        )

    def _check_unstaged(self, repository: GitRepository) -> Optional[CleanTreeResult]:
        paths = repository.unstaged_paths()
        if not paths:
            return None

        return CleanTreeResult(
            status=CheckStatus.UNSTAGED_CHANGES,
            message="Unstaged changes detected (working tree != index).",
            hint="Please stash/commit or discard unstaged changes before running CI.",
            paths=paths,
            porcelain=repository.porcelain_status(),
        )

    def _check_untracked(self, repository: GitRepository) -> Optional[CleanTreeResult]:
        paths = repository.untracked_paths()
        if not paths:
            return None

        return CleanTreeResult(
            status=CheckStatus.UNTRACKED_FILES,
            message="Untracked files present:",
            hint=(
                "Please add/ignore or remove untracked files before running CI, "
                "or pass --allow-untracked."
            ),
            paths=paths,
        )

    def _check_upstream(self, repository: GitRepository) -> Optional[CleanTreeResult]:
        upstream = repository.upstream_branch()
        if not upstream:
            return CleanTreeResult(
                status=CheckStatus.NO_UPSTREAM,
                message="No upstream configured for current branch.",
                hint="Set upstream (git push -u ...) or don't use --require-upstream.",
            )

        try:
            behind, ahead = repository.commit_counts(upstream)
        except GitQueryError as e:
            return CleanTreeResult(
                status=CheckStatus.UPSTREAM_QUERY_FAILED,
                message=f"Could not compare with upstream '{upstream}'.",
                hint=str(e),
                upstream=upstream,
            )

        if behind:
            return CleanTreeResult(
                status=CheckStatus.BEHIND_UPSTREAM,
                message=f"Local branch is behind upstream by {behind} commits.",
                hint="Please pull/rebase to synchronize with upstream before running CI.",
                upstream=upstream,
                commits_behind=behind,
                commits_ahead=ahead,
            )
        if ahead:
            return CleanTreeResult(
                status=CheckStatus.AHEAD_OF_UPSTREAM,
                message=f"Local branch has {ahead} commits not pushed to upstream.",
                hint="Please push commits before running CI (or don't use --require-upstream).",
                upstream=upstream,
                commits_behind=behind,
                commits_ahead=ahead,
            )

        return None
