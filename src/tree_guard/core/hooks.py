"""Installation of the TODO scanner as a git pre-commit hook."""

import logging
from pathlib import Path

from tree_guard.core.repository import GitRepository, TreeGuardError
from tree_guard.utils.io import atomic_write_text

logger = logging.getLogger(__name__)

HOOK_NAME = "pre-commit"
HOOK_MARKER = "# installed by tree-guard"
HOOK_SCRIPT = f"""#!/bin/sh
{HOOK_MARKER}
# Blocks the commit when staged *.py or *.js files contain TODO.
exec no-todo
"""


class HookInstallError(TreeGuardError):
    """Raised when the pre-commit hook cannot be installed."""


class HookInstaller:
    """Writes the pre-commit hook that runs the TODO scanner."""

    def __init__(self, repository: GitRepository):
        self.repository = repository

    @property
    def hook_path(self) -> Path:
        """Path of the pre-commit hook git will run."""
        return self.repository.hooks_directory() / HOOK_NAME

    def is_installed(self) -> bool:
        """Whether the current pre-commit hook was written by tree-guard."""
        path = self.hook_path
        if not path.exists():
            return False
        return HOOK_MARKER in path.read_text(encoding="utf-8", errors="replace")

    def install(self, force: bool = False) -> Path:
        """
        Install the pre-commit hook.

        Args:
            force: Overwrite a pre-commit hook tree-guard did not write.

        Returns:
            Path of the installed hook.

        Raises:
            HookInstallError: If a foreign hook exists and force is False,
                or the hook cannot be written.
        """
        path = self.hook_path

        if path.exists() and not force and not self.is_installed():
            raise HookInstallError(
                f"A {HOOK_NAME} hook already exists at {path}. "
                "Use --force to replace it."
            )

        try:
            atomic_write_text(path, HOOK_SCRIPT, perms=0o755)
        except OSError as e:
            raise HookInstallError(f"Failed to write {path}: {e}") from e

        logger.info(f"Installed {HOOK_NAME} hook at {path}")
        return path
