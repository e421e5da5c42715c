"""Cargo manifest reader and build request construction."""

from __future__ import annotations

import tomllib
from collections.abc import Iterable
from pathlib import Path

from floatmon.errors import ValidationError
from floatmon.models import BuildRequest

MANIFEST_NAME = "Cargo.toml"


def read_package_name(package_root: Path) -> str:
    manifest_path = package_root / MANIFEST_NAME
    try:
        raw = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ValidationError(
            "Cargo manifest does not exist.",
            hint="Point --path at the directory containing Cargo.toml.",
            context={"path": str(manifest_path)},
        ) from exc
    except OSError as exc:
        raise ValidationError(
            "Cargo manifest could not be read.",
            context={"path": str(manifest_path), "error": str(exc)},
        ) from exc

    try:
        payload = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ValidationError(
            "Invalid Cargo manifest TOML.",
            hint=str(exc),
            context={"path": str(manifest_path)},
        ) from exc

    package = payload.get("package")
    if not isinstance(package, dict):
        raise ValidationError(
            "Cargo manifest has no [package] table.",
            hint="Virtual workspace manifests are not supported; point at a member crate.",
            context={"path": str(manifest_path)},
        )
    name = package.get("name")
    if not isinstance(name, str) or not name:
        raise ValidationError(
            "Invalid [package] name in Cargo manifest.",
            context={"path": str(manifest_path)},
        )
    return name


def split_features(values: Iterable[str]) -> frozenset[str]:
    """Flatten repeated and comma-delimited feature arguments."""
    features: set[str] = set()
    for value in values:
        features.update(part.strip() for part in value.split(",") if part.strip())
    return frozenset(features)


def build_request(path: str | Path, features: Iterable[str] = (), *, cwd: Path) -> BuildRequest:
    package_path = Path(path)
    if not package_path.is_absolute():
        package_path = cwd / package_path
    package_path = package_path.resolve()
    if not package_path.is_dir():
        raise ValidationError(
            "Package path does not exist.",
            context={"path": str(package_path)},
        )
    return BuildRequest(
        package_path=package_path,
        package_name=read_package_name(package_path),
        features=split_features(features),
    )
