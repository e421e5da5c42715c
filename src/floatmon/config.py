"""Detector configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_TARGET = "x86_64-pc-windows-msvc"
DEFAULT_SUPPORTED_PLATFORMS = ("win32", "darwin")


@dataclass(frozen=True, slots=True)
class DetectorConfig:
    target: str = DEFAULT_TARGET
    tool: str = "cargo"
    profile: str = "debug"
    # None means the current working directory at detection time.
    workspace_root: Path | None = None
    supported_platforms: tuple[str, ...] = DEFAULT_SUPPORTED_PLATFORMS

    def resolved_workspace_root(self) -> Path:
        if self.workspace_root is None:
            return Path(os.getcwd())
        return self.workspace_root.resolve()
