"""File helpers for writing git hooks safely.

atomic_write_text() writes to a temp file next to the destination and
renames it into place, so git never runs a half-written hook.
"""
from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def atomic_write_text(path: str | Path, data: str, perms: int = 0o644) -> None:
    """Atomically replace path with data and set its mode to perms.

    The parent directory is created if missing. If the rename fails the
    temp file is removed before the error propagates.
    """
    dest = Path(path)
    dest.parent.mkdir(parents=True, exist_ok=True)

    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            dir=str(dest.parent),
            prefix=f".{dest.name}.",
            delete=False,
            encoding="utf-8",
            newline="\n",
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())

        os.chmod(tmp_name, perms)
        os.replace(tmp_name, dest)
        tmp_name = None
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError as e:
                logger.warning(f"Could not remove temp file {tmp_name}: {e}")
