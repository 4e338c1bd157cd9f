"""
Pytest configuration and shared fixtures for tree-guard tests.
"""

import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

GitRunner = Callable[..., subprocess.CompletedProcess]


def _run_git(repo_path: Path, *args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        ["git", *args],
        cwd=repo_path,
        capture_output=True,
        text=True,
        check=True,
    )


@pytest.fixture
def temp_directory() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir).resolve()


@pytest.fixture
def git() -> GitRunner:
    """Run a git command in a given directory, failing the test on error."""
    return _run_git


@pytest.fixture
def git_repo(temp_directory: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository on branch main with one commit."""
    repo_path = temp_directory / "test-repo"
    repo_path.mkdir()

    _run_git(repo_path, "init")
    _run_git(repo_path, "symbolic-ref", "HEAD", "refs/heads/main")
    _run_git(repo_path, "config", "user.email", "test@example.com")
    _run_git(repo_path, "config", "user.name", "Test User")
    _run_git(repo_path, "config", "commit.gpgsign", "false")
    _run_git(repo_path, "config", "core.hooksPath", ".git/hooks")

    (repo_path / "README.md").write_text("# Test Repository\n")
    (repo_path / ".gitignore").write_text("*.log\n")

    _run_git(repo_path, "add", ".")
    _run_git(repo_path, "commit", "-m", "Initial commit")

    yield repo_path


@pytest.fixture
def git_repo_with_upstream(git_repo: Path, temp_directory: Path) -> Path:
    """A git repository whose main branch tracks origin/main."""
    remote_path = temp_directory / "remote.git"

    _run_git(temp_directory, "init", "--bare", str(remote_path))
    _run_git(git_repo, "remote", "add", "origin", str(remote_path))
    _run_git(git_repo, "push", "-u", "origin", "main")

    return git_repo


@pytest.fixture
def not_a_repo(temp_directory: Path) -> Path:
    """A directory outside any git repository."""
    path = temp_directory / "plain-dir"
    path.mkdir()
    return path


@pytest.fixture
def in_repo(git_repo: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Change into the test repository for the duration of the test."""
    monkeypatch.chdir(git_repo)
    return git_repo
