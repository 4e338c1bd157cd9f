"""
tree-guard - Git hygiene guards for CI and pre-commit.

This package provides a clean working tree checker for CI runs and a
scanner that blocks commits whose staged files contain TODO markers.
"""

__version__ = "0.1.0"

from tree_guard.config import TreeGuardConfig, load_config

__all__ = [
    "__version__",
    "TreeGuardConfig",
    "load_config",
]
