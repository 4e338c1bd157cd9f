"""
Core modules for tree-guard.

This package contains the core logic for:
- Querying git state
- Clean working tree checks
- Scanning staged content for TODO markers
- Installing the pre-commit hook
"""

from tree_guard.core.clean_tree import CleanTreeChecker
from tree_guard.core.hooks import HookInstaller, HookInstallError
from tree_guard.core.repository import (
    GitQueryError,
    GitRepository,
    NotAGitRepositoryError,
    TreeGuardError,
)
from tree_guard.core.todo_scan import TodoScanner

__all__ = [
    "CleanTreeChecker",
    "GitQueryError",
    "GitRepository",
    "HookInstallError",
    "HookInstaller",
    "NotAGitRepositoryError",
    "TodoScanner",
    "TreeGuardError",
]
