"""Detection pipeline: build, locate, and scan each emission mode in turn."""

from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from floatmon.builders.base import ArtifactEmitter
from floatmon.builders.cargo import CargoEmitter
from floatmon.config import DetectorConfig
from floatmon.errors import UnsupportedPlatformError, WorkspaceError
from floatmon.models import SCAN_ORDER, BuildRequest, DetectionReport, EmissionMode, ScanVerdict
from floatmon.observability import StructuredLogger
from floatmon.patterns import pattern_for
from floatmon.scan import scan_artifact
from floatmon.workspace import ensure_clear, workspace_path


def ensure_supported_platform(config: DetectorConfig) -> None:
    if sys.platform not in config.supported_platforms:
        raise UnsupportedPlatformError(
            f"Only {' and '.join(config.supported_platforms)} hosts are supported.",
            hint="The target triple and artifact layout are host-specific.",
            context={"operation": "detect", "platform": sys.platform},
        )


@dataclass(slots=True)
class Detector:
    config: DetectorConfig = field(default_factory=DetectorConfig)
    emitter: ArtifactEmitter | None = None
    logger: StructuredLogger = field(default_factory=StructuredLogger)
    echo: Callable[[str], None] = print
    _backend: ArtifactEmitter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.emitter is None:
            self._backend = CargoEmitter(config=self.config, logger=self.logger, echo=self.echo)
        else:
            self._backend = self.emitter

    def detect(self, request: BuildRequest, *, now: datetime | None = None) -> DetectionReport:
        ensure_supported_platform(self.config)
        workspace = workspace_path(
            request.package_name,
            root=self.config.resolved_workspace_root(),
            now=now,
        )
        verdicts: dict[EmissionMode, ScanVerdict] = {}
        for mode in SCAN_ORDER:
            verdicts[mode] = self._run_mode(request, mode, workspace)

        report = DetectionReport(package_name=request.package_name, verdicts=verdicts)
        for line in report.summary_lines():
            self.echo(line)
        self.logger.log(
            operation="detect",
            package=request.package_name,
            mode=None,
            phase="summary",
            message="std math found" if report.found else "std math not found",
            level="error" if report.found else "info",
            extra={"divergent": report.divergent},
        )
        return report

    def _run_mode(self, request: BuildRequest, mode: EmissionMode, workspace: Path) -> ScanVerdict:
        ensure_clear(workspace)
        try:
            artifact = self._backend.emit(request, mode, workspace)
            verdict = scan_artifact(pattern_for(mode), artifact, mode=mode, echo=self.echo)
        except BaseException as exc:
            _clear_after_failure(workspace, exc)
            raise
        ensure_clear(workspace)
        self.logger.log(
            operation="scan",
            package=request.package_name,
            mode=mode.value,
            phase="done",
            message=verdict.summary(),
            extra={"artifact": str(verdict.artifact), "matches": len(verdict.lines)},
        )
        return verdict


def _clear_after_failure(workspace: Path, failure: BaseException) -> None:
    try:
        ensure_clear(workspace)
    except WorkspaceError as cleanup_exc:
        code = getattr(failure, "code", type(failure).__name__)
        summary = str(failure).splitlines()[0] if str(failure) else ""
        raise WorkspaceError(
            "Failed to remove build workspace after an earlier failure.",
            hint=cleanup_exc.hint,
            context={**cleanup_exc.context, "original_error": f"{code}: {summary}"},
        ) from failure


def run_detection(
    request: BuildRequest,
    *,
    config: DetectorConfig | None = None,
    emitter: ArtifactEmitter | None = None,
    logger: StructuredLogger | None = None,
    echo: Callable[[str], None] = print,
) -> DetectionReport:
    detector = Detector(
        config=config or DetectorConfig(),
        emitter=emitter,
        logger=logger or StructuredLogger(),
        echo=echo,
    )
    return detector.detect(request)
