"""
Pydantic models for tree-guard.

This package contains data models for:
- Clean-tree check results
- TODO scan results
"""

from tree_guard.models.check_result import (
    CheckStatus,
    CleanTreeResult,
    TodoMatch,
    TodoScanResult,
)

__all__ = [
    "CheckStatus",
    "CleanTreeResult",
    "TodoMatch",
    "TodoScanResult",
]
