"""Compiler back ends that emit scannable artifacts."""

from .base import ArtifactEmitter
from .cargo import CargoEmitter, crate_stem

__all__ = [
    "ArtifactEmitter",
    "CargoEmitter",
    "crate_stem",
]
