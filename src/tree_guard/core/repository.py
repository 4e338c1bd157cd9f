"""Read-only git queries used by the guards."""

import logging
import re
from pathlib import Path
from typing import Optional

from git import Git, Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from tree_guard.models.check_result import TodoMatch

logger = logging.getLogger(__name__)

# Remainder of a git grep -z record after the path: line number, NUL or ":", text.
GREP_LINE_PATTERN = re.compile(rb"^(?P<line_number>\d+)[\0:](?P<line>.*)$", re.DOTALL)


class TreeGuardError(Exception):
    """Base exception for tree-guard operations."""


class NotAGitRepositoryError(TreeGuardError):
    """Raised when the path is not inside a git work tree."""


class GitQueryError(TreeGuardError):
    """Raised when a git query fails unexpectedly."""


class GitRepository:
    """Typed access to the state of a git work tree."""

    def __init__(self, repo_path: Optional[Path] = None, timeout_seconds: int = 60):
        """
        Initialize the GitRepository.

        Args:
            repo_path: Path inside the work tree. Defaults to current directory.
            timeout_seconds: Seconds before a git command is killed.

        Raises:
            NotAGitRepositoryError: If the path is not inside a git work tree.
        """
        self.repo_path = repo_path or Path.cwd()
        self.timeout_seconds = timeout_seconds

        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise NotAGitRepositoryError(
                f"Not a git repository: {self.repo_path}"
            ) from e

        if self.repo.bare or not self._is_inside_work_tree():
            raise NotAGitRepositoryError(
                f"Not inside a git work tree: {self.repo_path}"
            )

        self.git_root = Path(self.repo.working_tree_dir)

    def _is_inside_work_tree(self) -> bool:
        """Ask git whether repo_path itself sits in the work tree, not in .git."""
        try:
            output = Git(str(self.repo_path)).rev_parse("--is-inside-work-tree")
        except GitCommandError:
            return False
        return output.strip() == "true"

    def _run_git(self, *args: str) -> str:
        """Run a git command at the work tree root and return its stdout."""
        logger.debug(f"Running git {' '.join(args)}")
        try:
            return self.repo.git.execute(
                ["git", *args],
                kill_after_timeout=self.timeout_seconds,
            )
        except GitCommandError as e:
            raise GitQueryError(
                f"git {' '.join(args)} failed: {str(e.stderr).strip()}"
            ) from e

    @staticmethod
    def _split_nul(output: str) -> list[str]:
        return [entry for entry in output.split("\0") if entry]

    def current_branch(self) -> str:
        """
        Get the checked out branch name.

        On a detached HEAD the abbreviated commit id is returned instead.
        """
        try:
            return self._run_git("symbolic-ref", "--short", "HEAD").strip()
        except GitQueryError:
            logger.debug("HEAD is detached, falling back to the commit id")
            return self._run_git("rev-parse", "--short", "HEAD").strip()

    def refresh_index(self) -> None:
        """Refresh the index stat cache so diffs notice touched files."""
        try:
            self._run_git("update-index", "-q", "--refresh")
        except GitQueryError as e:
            logger.debug(f"Index refresh reported: {e}")

    def staged_paths(self) -> list[str]:
        """Paths whose index entry differs from HEAD."""
        return self._split_nul(self._run_git("diff", "--cached", "--name-only", "-z"))

    def unstaged_paths(self) -> list[str]:
        """Paths whose working copy differs from the index."""
        return self._split_nul(self._run_git("diff", "--name-only", "-z"))

    def untracked_paths(self) -> list[str]:
        """Untracked files, honoring .gitignore and the other standard excludes."""
        return self._split_nul(
            self._run_git("ls-files", "--others", "--exclude-standard", "-z")
        )

    def porcelain_status(self) -> list[str]:
        """Lines of git status --porcelain."""
        output = self._run_git("--no-pager", "status", "--porcelain")
        return [line for line in output.split("\n") if line]

    def upstream_branch(self) -> Optional[str]:
        """Get the upstream tracking reference of the current branch."""
        try:
            upstream = self._run_git(
                "rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"
            ).strip()
        except GitQueryError:
            return None

        return upstream or None

    def commit_counts(self, upstream: str) -> tuple[int, int]:
        """
        Get the number of commits behind and ahead of upstream.

        Raises:
            GitQueryError: If git fails or prints something other than two counts.
        """
        output = self._run_git("rev-list", "--left-right", "--count", f"{upstream}...HEAD")
        parts = output.split()

        if len(parts) != 2 or not all(part.isdigit() for part in parts):
            raise GitQueryError(f"Unexpected rev-list output: {output!r}")

        return int(parts[0]), int(parts[1])

    def grep_staged(
        self,
        marker: str,
        pathspecs: list[str],
        ignore_case: bool = True,
    ) -> list[TodoMatch]:
        """
        Search staged content for a fixed string.

        Binary blobs are searched as text so a match in them is reported
        like any other. Output is read as bytes and decoded with
        replacement characters, so files in any encoding can be listed.

        Args:
            marker: String to search for.
            pathspecs: Pathspecs limiting which staged files are searched.
            ignore_case: Match case-insensitively.

        Returns:
            One TodoMatch per matching line.

        Raises:
            GitQueryError: If git grep fails for a reason other than no match,
                or reports a match without printing a line that can be read.
        """
        args = ["grep", "--no-color", "--text", "-z", "-n", "--cached", "--fixed-strings"]
        if ignore_case:
            args.append("-i")
        args.extend(["-e", marker, "--", *pathspecs])

        logger.debug(f"Running git {' '.join(args)}")
        status, stdout, stderr = self.repo.git.execute(
            ["git", *args],
            with_extended_output=True,
            with_exceptions=False,
            stdout_as_string=False,
            kill_after_timeout=self.timeout_seconds,
        )

        if status == 1:
            return []
        if status != 0:
            raise GitQueryError(f"git grep failed: {stderr.strip()}")

        matches = []
        for record in stdout.split(b"\n"):
            match = self._parse_grep_record(record)
            if match is not None:
                matches.append(match)

        if not matches:
            raise GitQueryError(
                f"git grep reported a match but printed no readable line: {stdout[:200]!r}"
            )

        return matches

    @staticmethod
    def _parse_grep_record(record: bytes) -> Optional[TodoMatch]:
        """Parse one ``path NUL line-number NUL text`` record of git grep -z."""
        path, sep, rest = record.partition(b"\0")
        if not sep:
            return None

        parsed = GREP_LINE_PATTERN.match(rest)
        if not parsed:
            return None

        return TodoMatch(
            path=path.decode("utf-8", errors="replace"),
            line_number=int(parsed.group("line_number")),
            line=parsed.group("line").decode("utf-8", errors="replace"),
        )

    def hooks_directory(self) -> Path:
        """Directory git runs hooks from, honoring core.hooksPath."""
        hooks = Path(self._run_git("rev-parse", "--git-path", "hooks").strip())
        if not hooks.is_absolute():
            hooks = self.git_root / hooks
        return hooks
