"""Shared test fixtures."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from floatmon.config import DEFAULT_TARGET
from floatmon.models import BuildRequest

EMIT_EXTENSIONS = {"mir": "mir", "asm": "s"}


@dataclass(slots=True)
class FakeCargo:
    """Stands in for `cargo rustc` by writing fixture output into --target-dir."""

    outputs: dict[str, str] = field(default_factory=dict)
    stem: str = "demo"
    returncode: int = 0
    extra_files: int = 0
    calls: list[dict[str, object]] = field(default_factory=list)

    def __call__(self, cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        self.calls.append({"argv": list(cmd), **kwargs})
        if self.returncode != 0:
            return subprocess.CompletedProcess(cmd, self.returncode, "", "error: could not compile")

        target_dir = Path(cmd[cmd.index("--target-dir") + 1])
        target = cmd[cmd.index("--target") + 1]
        emit = cmd[cmd.index("--emit") + 1]
        assert not target_dir.exists(), "workspace must be cleared before each build"
        deps = target_dir / target / "debug" / "deps"
        deps.mkdir(parents=True)
        ext = EMIT_EXTENSIONS[emit]
        (deps / f"{self.stem}-1a2b3c4d.{ext}").write_text(self.outputs.get(emit, ""), encoding="utf-8")
        for index in range(self.extra_files):
            (deps / f"{self.stem}-extra{index}.{ext}").write_text("", encoding="utf-8")
        (deps / f"{self.stem}-1a2b3c4d.d").write_text("dep-info\n", encoding="utf-8")
        return subprocess.CompletedProcess(cmd, 0, "", "")


@pytest.fixture
def fake_cargo(monkeypatch: pytest.MonkeyPatch) -> FakeCargo:
    fake = FakeCargo()
    monkeypatch.setattr("floatmon.builders.cargo.subprocess.run", fake)
    return fake


@pytest.fixture
def supported_host(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("floatmon.detect.sys.platform", "darwin")


@pytest.fixture
def crate_dir(tmp_path: Path) -> Path:
    root = tmp_path / "demo"
    (root / "src").mkdir(parents=True)
    (root / "Cargo.toml").write_text(
        '[package]\nname = "demo"\nversion = "0.1.0"\nedition = "2021"\n\n'
        '[features]\ndefault = ["std"]\nstd = []\nlibm = []\n',
        encoding="utf-8",
    )
    (root / "src" / "lib.rs").write_text("#![no_std]\n", encoding="utf-8")
    return root


@pytest.fixture
def demo_request(crate_dir: Path) -> BuildRequest:
    return BuildRequest(
        package_path=crate_dir,
        package_name="demo",
        features=frozenset({"libm"}),
    )


def deps_dir(workspace: Path, target: str = DEFAULT_TARGET) -> Path:
    return workspace / target / "debug" / "deps"
