"""Line-by-line scan of an emitted artifact for forbidden symbols."""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path

from floatmon.errors import ScanError
from floatmon.models import EmissionMode, ScanVerdict


def scan_artifact(
    pattern: re.Pattern[str],
    artifact: Path,
    *,
    mode: EmissionMode,
    echo: Callable[[str], None] = print,
) -> ScanVerdict:
    """Return a verdict listing every line of *artifact* matched by *pattern*.

    Matching is textual only; the emitted grammar is never parsed.
    """
    matched: list[str] = []
    try:
        with artifact.open(encoding="utf-8") as handle:
            for raw in handle:
                line = raw.rstrip("\r\n")
                if pattern.search(line) is None:
                    continue
                if not matched:
                    echo(f"std math usage found in: {artifact}")
                matched.append(line)
                echo(f"std math found: {line}")
    except (OSError, UnicodeDecodeError) as exc:
        raise ScanError(
            "Failed to read emitted artifact.",
            context={
                "operation": "scan",
                "mode": mode.value,
                "path": str(artifact),
                "error": str(exc),
            },
        ) from exc
    return ScanVerdict(mode=mode, artifact=artifact, found=bool(matched), lines=tuple(matched))
