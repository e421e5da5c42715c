"""Typed interface for compiler back ends that emit scannable artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from floatmon.models import BuildRequest, EmissionMode


class ArtifactEmitter(Protocol):
    name: str

    def emit(self, request: BuildRequest, mode: EmissionMode, workspace: Path) -> Path:
        """Compile the package into *workspace* and return the single emitted file."""
