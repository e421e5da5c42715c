"""Core typed dataclasses for build requests, artifact lookups, and verdicts."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Literal

from floatmon.errors import ForbiddenFloatMathUsedError, ValidationError

LookupStatus = Literal["found", "missing", "ambiguous"]


class EmissionMode(StrEnum):
    """Textual representation rustc is asked to emit."""

    MIR = "mir"
    ASM = "asm"

    @property
    def emit_flag(self) -> str:
        return self.value

    @property
    def extension(self) -> str:
        return "mir" if self is EmissionMode.MIR else "s"

    @property
    def label(self) -> str:
        return self.value


SCAN_ORDER: tuple[EmissionMode, ...] = (EmissionMode.MIR, EmissionMode.ASM)


@dataclass(frozen=True, slots=True)
class BuildRequest:
    package_path: Path
    package_name: str
    features: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not self.package_path.is_absolute():
            raise ValidationError(
                "Package path must be absolute.",
                context={"path": str(self.package_path)},
            )
        if not self.package_name:
            raise ValidationError(
                "Package name must not be empty.",
                context={"path": str(self.package_path)},
            )

    def sorted_features(self) -> tuple[str, ...]:
        return tuple(sorted(self.features))


@dataclass(frozen=True, slots=True)
class ArtifactLookup:
    """Outcome of expanding the artifact pattern inside a workspace."""

    pattern: str
    matches: tuple[Path, ...] = ()

    @property
    def status(self) -> LookupStatus:
        if len(self.matches) == 1:
            return "found"
        if not self.matches:
            return "missing"
        return "ambiguous"

    @property
    def artifact(self) -> Path | None:
        return self.matches[0] if self.status == "found" else None


@dataclass(frozen=True, slots=True)
class ScanVerdict:
    mode: EmissionMode
    artifact: Path
    found: bool
    lines: tuple[str, ...] = ()

    def summary(self) -> str:
        if self.found:
            return f"std math found in {self.mode.label}, non deterministic"
        return f"Ok, std math not found in {self.mode.label}"


@dataclass(frozen=True, slots=True)
class DetectionReport:
    """Combined verdict across every emission mode that was scanned."""

    package_name: str
    verdicts: Mapping[EmissionMode, ScanVerdict] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return any(verdict.found for verdict in self.verdicts.values())

    @property
    def divergent(self) -> bool:
        """True when usage shows up in some representations but not all.

        The optimizer may have removed the call from one of them, so the
        result depends on compilation details.
        """
        outcomes = {verdict.found for verdict in self.verdicts.values()}
        return len(outcomes) > 1

    def modes_with_usage(self) -> tuple[EmissionMode, ...]:
        return tuple(mode for mode, verdict in self.verdicts.items() if verdict.found)

    def summary_lines(self) -> list[str]:
        return [verdict.summary() for verdict in self.verdicts.values()]

    def to_dict(self) -> dict[str, object]:
        return {
            "package": self.package_name,
            "found": self.found,
            "divergent": self.divergent,
            "modes": {
                mode.value: {
                    "artifact": str(verdict.artifact),
                    "found": verdict.found,
                    "lines": list(verdict.lines),
                }
                for mode, verdict in self.verdicts.items()
            },
        }

    def raise_for_verdict(self) -> None:
        if not self.found:
            return
        raise ForbiddenFloatMathUsedError(
            "Std float math used in this crate.",
            hint="Route float math through a no-std implementation such as libm.",
            context={
                "package": self.package_name,
                "modes": ",".join(mode.value for mode in self.modes_with_usage()),
                "divergent": str(self.divergent).lower(),
            },
        )
