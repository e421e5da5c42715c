"""Temporary build workspace naming and cleanup."""

from __future__ import annotations

import shutil
from datetime import UTC, datetime
from pathlib import Path

from floatmon.errors import WorkspaceError

WORKSPACE_PREFIX = "temp_build_dir"


def workspace_path(package_name: str, *, root: Path, now: datetime | None = None) -> Path:
    """Return a workspace path unique to *package_name* and the current instant."""
    moment = now or datetime.now(UTC)
    stamp = f"{moment:%Y-%m-%d %H:%M:%S.%f} UTC"
    for ch in (" ", ":", "."):
        stamp = stamp.replace(ch, "-")
    return root / f"{WORKSPACE_PREFIX}_{package_name}_{stamp}"


def ensure_clear(path: Path) -> None:
    """Remove *path* if it exists.

    Leftover artifacts would be picked up by the next artifact lookup, so a
    failed removal is fatal.
    """
    if not path.exists() and not path.is_symlink():
        return
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as exc:
        raise WorkspaceError(
            "Failed to remove build workspace.",
            hint="Check permissions or delete the directory manually.",
            context={"operation": "ensure_clear", "path": str(path), "error": str(exc)},
        ) from exc
