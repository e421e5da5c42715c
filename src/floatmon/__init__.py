"""Public package entrypoint for the std float math monitor."""

from .config import DetectorConfig
from .detect import Detector, ensure_supported_platform, run_detection
from .errors import (
    ArtifactError,
    BuildError,
    ErrorCode,
    FloatmonError,
    ForbiddenFloatMathUsedError,
    OutputError,
    ScanError,
    UnsupportedPlatformError,
    ValidationError,
    WorkspaceError,
)
from .models import (
    ArtifactLookup,
    BuildRequest,
    DetectionReport,
    EmissionMode,
    ScanVerdict,
)

__all__ = [
    "ArtifactError",
    "ArtifactLookup",
    "BuildError",
    "BuildRequest",
    "DetectionReport",
    "Detector",
    "DetectorConfig",
    "EmissionMode",
    "ErrorCode",
    "FloatmonError",
    "ForbiddenFloatMathUsedError",
    "OutputError",
    "ScanError",
    "ScanVerdict",
    "UnsupportedPlatformError",
    "ValidationError",
    "WorkspaceError",
    "ensure_supported_platform",
    "run_detection",
]
