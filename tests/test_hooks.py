"""Tests for pre-commit hook installation."""

import os
from pathlib import Path

import pytest

from tree_guard.core.hooks import HOOK_MARKER, HookInstaller, HookInstallError
from tree_guard.core.repository import GitRepository
from tree_guard.utils.io import atomic_write_text


@pytest.fixture
def installer(git_repo: Path) -> HookInstaller:
    return HookInstaller(GitRepository(git_repo))


class TestHookInstaller:
    """Tests for HookInstaller."""

    def test_hook_path(self, installer: HookInstaller, git_repo: Path):
        assert installer.hook_path == git_repo / ".git" / "hooks" / "pre-commit"

    def test_install_writes_executable_hook(self, installer: HookInstaller):
        path = installer.install()

        content = path.read_text()
        assert content.startswith("#!/bin/sh\n")
        assert HOOK_MARKER in content
        assert "no-todo" in content
        assert os.access(path, os.X_OK)
        assert installer.is_installed()

    def test_reinstall_own_hook(self, installer: HookInstaller):
        installer.install()

        assert installer.install() == installer.hook_path

    def test_foreign_hook_kept(self, installer: HookInstaller):
        installer.hook_path.parent.mkdir(parents=True, exist_ok=True)
        installer.hook_path.write_text("#!/bin/sh\nexit 0\n")

        with pytest.raises(HookInstallError, match="--force"):
            installer.install()

        assert installer.hook_path.read_text() == "#!/bin/sh\nexit 0\n"
        assert not installer.is_installed()

    def test_foreign_hook_replaced_with_force(self, installer: HookInstaller):
        installer.hook_path.parent.mkdir(parents=True, exist_ok=True)
        installer.hook_path.write_text("#!/bin/sh\nexit 0\n")

        installer.install(force=True)

        assert installer.is_installed()


class TestIo:
    """Tests for the file helpers."""

    def test_atomic_write_creates_parents(self, temp_directory: Path):
        target = temp_directory / "a" / "b" / "file.txt"

        atomic_write_text(target, "hello\n")

        assert target.read_text() == "hello\n"
        assert (target.stat().st_mode & 0o777) == 0o644

    def test_atomic_write_replaces(self, temp_directory: Path):
        target = temp_directory / "file.txt"
        target.write_text("old")

        atomic_write_text(target, "new", perms=0o600)

        assert target.read_text() == "new"
        assert (target.stat().st_mode & 0o777) == 0o600
        assert sorted(p.name for p in temp_directory.iterdir()) == ["file.txt"]


class TestForeignHookContent:
    """Tests for hooks that are not UTF-8 text."""

    def test_non_utf8_hook_is_not_ours(self, installer: HookInstaller):
        installer.hook_path.parent.mkdir(parents=True, exist_ok=True)
        installer.hook_path.write_bytes(b"#!/bin/sh\n# \xff\xfe\nexit 0\n")

        assert installer.is_installed() is False
        with pytest.raises(HookInstallError):
            installer.install()
