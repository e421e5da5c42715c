"""Cargo back end: emit MIR or assembly for a crate and find the result.

The command is run with ``cwd`` set to the crate root so cargo resolves the
crate's own ``.cargo/config.toml`` and manifest, without touching the
process-wide working directory.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from floatmon.config import DetectorConfig
from floatmon.errors import ArtifactError, BuildError
from floatmon.models import ArtifactLookup, BuildRequest, EmissionMode
from floatmon.observability import StructuredLogger
from floatmon.workspace import ensure_clear


def crate_stem(package_name: str) -> str:
    """File-name stem rustc uses for the crate built from *package_name*."""
    return package_name.replace("-", "_")


@dataclass(slots=True)
class CargoEmitter:
    config: DetectorConfig = field(default_factory=DetectorConfig)
    logger: StructuredLogger = field(default_factory=StructuredLogger)
    echo: Callable[[str], None] = print
    name: str = "cargo"

    def command(self, request: BuildRequest, mode: EmissionMode, workspace: Path) -> list[str]:
        cmd = [self.config.tool, "rustc", "--no-default-features"]
        for feature in request.sorted_features():
            cmd.extend(["--features", feature])
        cmd.extend([
            "--target-dir",
            str(workspace),
            "--target",
            self.config.target,
            "--",
            "--emit",
            mode.emit_flag,
        ])
        return cmd

    def compile(self, request: BuildRequest, mode: EmissionMode, workspace: Path) -> None:
        cmd = self.command(request, mode, workspace)
        self.echo(f"Rustc emit command: {shlex.join(cmd)}")
        self.logger.log(
            operation="compile",
            package=request.package_name,
            mode=mode.value,
            phase="start",
            message="Invoking compiler.",
            extra={"argv": cmd, "cwd": str(request.package_path)},
        )
        try:
            result = subprocess.run(
                cmd,
                cwd=str(request.package_path),
                capture_output=True,
                text=True,
                # Output is only echoed back in errors, never parsed.
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise BuildError(
                "Failed to spawn the compiler.",
                hint=f"Ensure `{self.config.tool}` is installed and on PATH.",
                context={
                    "operation": "compile",
                    "mode": mode.value,
                    "command": shlex.join(cmd),
                    "error": str(exc),
                },
            ) from exc

        if result.returncode != 0:
            raise BuildError(
                "Compiler exited with a non-zero status.",
                hint="Make sure the package builds for the configured target and features.",
                context={
                    "operation": "compile",
                    "mode": mode.value,
                    "package": request.package_name,
                    "returncode": str(result.returncode),
                    "stderr": result.stderr[-2000:] if result.stderr else "",
                    "command": shlex.join(cmd),
                },
            )
        self.logger.log(
            operation="compile",
            package=request.package_name,
            mode=mode.value,
            phase="done",
            message="Compiler finished.",
        )

    def deps_dir(self, workspace: Path) -> Path:
        return workspace / self.config.target / self.config.profile / "deps"

    def locate(self, workspace: Path, mode: EmissionMode, package_name: str) -> ArtifactLookup:
        deps = self.deps_dir(workspace)
        file_pattern = f"{crate_stem(package_name)}*.{mode.extension}"
        matches: tuple[Path, ...] = ()
        if deps.is_dir():
            matches = tuple(sorted(deps.glob(file_pattern, case_sensitive=True)))
        return ArtifactLookup(pattern=str(deps / file_pattern), matches=matches)

    def emit(self, request: BuildRequest, mode: EmissionMode, workspace: Path) -> Path:
        self.compile(request, mode, workspace)
        lookup = self.locate(workspace, mode, request.package_name)
        self.logger.log(
            operation="locate",
            package=request.package_name,
            mode=mode.value,
            phase=lookup.status,
            message=f"{len(lookup.matches)} artifact(s) matched.",
            extra={"pattern": lookup.pattern},
        )
        if lookup.artifact is not None:
            return lookup.artifact

        if lookup.status == "missing":
            message = "Emitted file not found."
        else:
            message = "Multiple emitted files found."
        self.echo(f"{message} ({lookup.pattern})")
        ensure_clear(workspace)
        raise ArtifactError(
            message,
            hint="Re-run from a clean checkout; stale outputs or several crate versions can collide.",
            context={
                "operation": "locate",
                "mode": mode.value,
                "pattern": lookup.pattern,
                "candidates": ", ".join(str(path) for path in lookup.matches),
            },
        )
