"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers that calling automation can branch on."""

    VALIDATION = "E_VALIDATION"
    WORKSPACE = "E_WORKSPACE"
    BUILD = "E_BUILD"
    ARTIFACT = "E_ARTIFACT"
    SCAN = "E_SCAN"
    OUTPUT = "E_OUTPUT"
    UNSUPPORTED_PLATFORM = "E_UNSUPPORTED_PLATFORM"
    FORBIDDEN_FLOAT_MATH = "E_FORBIDDEN_FLOAT_MATH"


class FloatmonError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        for k, v in self.context.items():
            if v:
                parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class _CodedError(FloatmonError):
    _code: ErrorCode

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=self._code, hint=hint, context=context)


class ValidationError(_CodedError):
    """Bad target path, unreadable manifest or other configuration problem."""

    _code = ErrorCode.VALIDATION


class WorkspaceError(_CodedError):
    """A stale build workspace could not be removed."""

    _code = ErrorCode.WORKSPACE


class BuildError(_CodedError):
    """The compiler could not be spawned or exited non-zero."""

    _code = ErrorCode.BUILD


class ArtifactError(_CodedError):
    """Zero or several emitted files matched the artifact pattern."""

    _code = ErrorCode.ARTIFACT


class ScanError(_CodedError):
    """An emitted artifact could not be read as text."""

    _code = ErrorCode.SCAN


class OutputError(_CodedError):
    """A log or report file could not be written."""

    _code = ErrorCode.OUTPUT


class UnsupportedPlatformError(_CodedError):
    _code = ErrorCode.UNSUPPORTED_PLATFORM


class ForbiddenFloatMathUsedError(_CodedError):
    """Policy failure: std float math was found in the compiled package."""

    _code = ErrorCode.FORBIDDEN_FLOAT_MATH


__all__ = [
    "ArtifactError",
    "BuildError",
    "ErrorCode",
    "FloatmonError",
    "ForbiddenFloatMathUsedError",
    "OutputError",
    "ScanError",
    "UnsupportedPlatformError",
    "ValidationError",
    "WorkspaceError",
]
