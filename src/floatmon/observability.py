"""Structured logging and report helpers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from floatmon.errors import OutputError
from floatmon.models import DetectionReport


@dataclass(slots=True)
class StructuredLogger:
    records: list[dict[str, Any]] = field(default_factory=list)

    def log(
        self,
        *,
        operation: str,
        package: str | None,
        mode: str | None,
        phase: str | None,
        message: str,
        level: str = "info",
        extra: dict[str, Any] | None = None,
    ) -> None:
        record: dict[str, Any] = {
            "level": level,
            "operation": operation,
            "package": package,
            "mode": mode,
            "phase": phase,
            "message": message,
        }
        if extra is not None:
            record["extra"] = extra
        self.records.append(record)

    def records_for_mode(self, mode: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("mode") == mode]

    def records_for_operation(self, operation: str) -> list[dict[str, Any]]:
        return [record for record in self.records if record.get("operation") == operation]

    def compiler_invocations(self) -> list[list[str]]:
        """Argument vectors of every compiler run, in invocation order."""
        return [
            list(record["extra"]["argv"])
            for record in self.records_for_operation("compile")
            if record.get("phase") == "start" and "argv" in record.get("extra", {})
        ]

    def to_json_lines(self, path: str | Path) -> Path:
        lines = [json.dumps(record, sort_keys=True) for record in self.records]
        return _write_text(Path(path), "\n".join(lines) + "\n", operation="write_log")


def write_report(report: DetectionReport, path: str | Path, *, logger: StructuredLogger) -> Path:
    """Write the verdict with the compiler runs and log records behind it."""
    payload = report.to_dict()
    payload["commands"] = logger.compiler_invocations()
    payload["logs"] = list(logger.records)
    text = json.dumps(payload, indent=2, sort_keys=True) + "\n"
    return _write_text(Path(path), text, operation="write_report")


def _write_text(output_path: Path, text: str, *, operation: str) -> Path:
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise OutputError(
            "Failed to write output file.",
            hint="Choose a writable file path.",
            context={"operation": operation, "path": str(output_path), "error": str(exc)},
        ) from exc
    return output_path
