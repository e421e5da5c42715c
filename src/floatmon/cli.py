"""Command-line entry point.

Usage:
    floatmon --path ../my-crate --features libm
    python -m floatmon --path ../my-crate --features libm,serde
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from floatmon.config import DEFAULT_TARGET, DetectorConfig
from floatmon.detect import Detector
from floatmon.errors import ErrorCode, FloatmonError, ForbiddenFloatMathUsedError, OutputError
from floatmon.manifest import build_request
from floatmon.observability import StructuredLogger, write_report

EXIT_OK = 0
EXIT_CODES: dict[str, int] = {
    ErrorCode.FORBIDDEN_FLOAT_MATH.value: 1,
    ErrorCode.VALIDATION.value: 2,
    ErrorCode.UNSUPPORTED_PLATFORM.value: 3,
}
EXIT_TOOL_FAILURE = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="floatmon",
        description="Detect if std float math functions are used in your crate.",
    )
    parser.add_argument("-p", "--path", required=True, help="Path of the crate to test")
    parser.add_argument(
        "-f",
        "--features",
        action="append",
        default=[],
        help="Features to enable (repeatable or comma-separated)",
    )
    parser.add_argument("--target", default=DEFAULT_TARGET, help="Target triple to compile for")
    parser.add_argument("--cargo", default="cargo", help="Cargo executable to invoke")
    parser.add_argument(
        "--workspace-root",
        type=Path,
        default=None,
        help="Directory that holds the temporary build workspace (default: cwd)",
    )
    parser.add_argument("--log-json", type=Path, default=None, help="Write JSON-lines log here")
    parser.add_argument("--report", type=Path, default=None, help="Write a JSON verdict report here")
    return parser


def exit_code_for(error: FloatmonError) -> int:
    return EXIT_CODES.get(error.code, EXIT_TOOL_FAILURE)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = DetectorConfig(
        target=args.target,
        tool=args.cargo,
        workspace_root=args.workspace_root,
    )
    logger = StructuredLogger()
    code = _run(args, config, logger)
    if args.log_json is not None:
        try:
            logger.to_json_lines(args.log_json)
        except OutputError as exc:
            failure = _fail(exc)
            # An earlier failure keeps its own exit status.
            code = code or failure
    return code


def _run(args: argparse.Namespace, config: DetectorConfig, logger: StructuredLogger) -> int:
    try:
        request = build_request(args.path, args.features, cwd=Path(os.getcwd()))
        report = Detector(config=config, logger=logger).detect(request)
    except FloatmonError as exc:
        return _fail(exc)

    code = EXIT_OK
    if args.report is not None:
        try:
            write_report(report, args.report, logger=logger)
        except OutputError as exc:
            code = _fail(exc)
    try:
        report.raise_for_verdict()
    except ForbiddenFloatMathUsedError as exc:
        code = _fail(exc)
    return code


def _fail(error: FloatmonError) -> int:
    print(f"error[{error.code}]: {error}", file=sys.stderr)
    return exit_code_for(error)


if __name__ == "__main__":
    raise SystemExit(main())
