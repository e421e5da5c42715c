import json
from pathlib import Path

import pytest

from floatmon.cli import build_parser, exit_code_for, main
from floatmon.errors import (
    ArtifactError,
    BuildError,
    ForbiddenFloatMathUsedError,
    OutputError,
    ValidationError,
)


def test_parser_collects_repeated_features() -> None:
    args = build_parser().parse_args(["--path", "crate", "-f", "libm", "--features", "a,b"])

    assert args.path == "crate"
    assert args.features == ["libm", "a,b"]
    assert args.target == "x86_64-pc-windows-msvc"


def test_parser_requires_path() -> None:
    with pytest.raises(SystemExit) as excinfo:
        build_parser().parse_args([])

    assert excinfo.value.code == 2


def test_exit_codes_keep_failure_kinds_apart() -> None:
    assert exit_code_for(ForbiddenFloatMathUsedError("found")) == 1
    assert exit_code_for(ValidationError("bad path")) == 2
    assert exit_code_for(BuildError("cargo failed")) == 4
    assert exit_code_for(ArtifactError("ambiguous")) == 4
    assert exit_code_for(OutputError("disk full")) == 4


def test_main_succeeds_for_clean_crate(
    fake_cargo,
    supported_host,
    crate_dir: Path,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    fake_cargo.outputs = {"mir": "fn demo::id(_1: f64) -> f64 {}\n", "asm": "\tretq\n"}
    log_path = tmp_path / "logs" / "run.jsonl"

    code = main([
        "--path",
        str(crate_dir),
        "--features",
        "libm",
        "--workspace-root",
        str(tmp_path),
        "--log-json",
        str(log_path),
    ])

    assert code == 0
    out = capsys.readouterr().out
    assert "Ok, std math not found in mir" in out
    assert "Ok, std math not found in asm" in out
    records = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert records[-1]["operation"] == "detect"
    assert records[-1]["package"] == "demo"


def test_main_reports_forbidden_usage(
    fake_cargo,
    supported_host,
    crate_dir: Path,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    fake_cargo.outputs = {
        "mir": "call std::f64::<impl f64>::sin(...)\n",
        "asm": "\tcallq\tstd::f64::impl$0::sin\n",
    }

    code = main(["--path", str(crate_dir), "--workspace-root", str(tmp_path)])

    assert code == 1
    captured = capsys.readouterr()
    assert "std math found in asm, non deterministic" in captured.out
    assert "error[E_FORBIDDEN_FLOAT_MATH]" in captured.err


def test_main_reports_unsupported_platform(
    fake_cargo,
    monkeypatch: pytest.MonkeyPatch,
    crate_dir: Path,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setattr("floatmon.detect.sys.platform", "linux")

    code = main(["--path", str(crate_dir), "--workspace-root", str(tmp_path)])

    assert code == 3
    assert "error[E_UNSUPPORTED_PLATFORM]" in capsys.readouterr().err
    assert fake_cargo.calls == []


def test_main_reports_missing_manifest(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["--path", str(tmp_path)])

    assert code == 2
    assert "error[E_VALIDATION]" in capsys.readouterr().err


def test_main_reports_build_failure(
    fake_cargo,
    supported_host,
    crate_dir: Path,
    tmp_path: Path,
) -> None:
    fake_cargo.returncode = 101

    code = main(["--path", str(crate_dir), "--workspace-root", str(tmp_path)])

    assert code == 4
    assert [path.name for path in tmp_path.iterdir() if path.name.startswith("temp_build_dir")] == []


def test_main_reports_unwritable_report_as_output_error(
    fake_cargo,
    supported_host,
    crate_dir: Path,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    fake_cargo.outputs = {"mir": "", "asm": ""}
    taken = tmp_path / "report.json"
    taken.mkdir()

    code = main(["--path", str(crate_dir), "--workspace-root", str(tmp_path), "--report", str(taken)])

    assert code == 4
    err = capsys.readouterr().err
    assert "error[E_OUTPUT]" in err
    assert "write_report" in err


def test_unwritable_log_keeps_the_forbidden_usage_exit_code(
    fake_cargo,
    supported_host,
    crate_dir: Path,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    fake_cargo.outputs = {"mir": "call std::f64::<impl f64>::sqrt(...)\n", "asm": ""}
    taken = tmp_path / "run.jsonl"
    taken.mkdir()

    code = main(["--path", str(crate_dir), "--workspace-root", str(tmp_path), "--log-json", str(taken)])

    assert code == 1
    err = capsys.readouterr().err
    assert "error[E_FORBIDDEN_FLOAT_MATH]" in err
    assert "error[E_OUTPUT]" in err


def test_unwritable_log_fails_an_otherwise_clean_run(
    fake_cargo,
    supported_host,
    crate_dir: Path,
    tmp_path: Path,
) -> None:
    fake_cargo.outputs = {"mir": "", "asm": ""}
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    code = main([
        "--path",
        str(crate_dir),
        "--workspace-root",
        str(tmp_path),
        "--log-json",
        str(blocker / "logs" / "run.jsonl"),
    ])

    assert code == 4
