"""Manifest contract for a header parsing run."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class BuildManifest:
    """Top-level manifest payload.

    Attributes:
        name: Name of the binding being generated, used for report file names.
        includes: C++ headers, parsed in order.
        c_includes: C headers, parsed first and without constructor detection.
        include_paths: Directories searched for ``<...>`` includes.
        rule_files: YAML/JSON rule files layered over the default rules.
        excludes: Includes that may be missing without failing the run.
        output_file: Where generated text is written, or None for stdout.
        report_dir: Directory for the JSON run report.
    """

    name: str
    includes: list[str]
    c_includes: list[str] = field(default_factory=list)
    include_paths: list[str] = field(default_factory=list)
    rule_files: list[str] = field(default_factory=list)
    excludes: list[str] = field(default_factory=list)
    output_file: str | None = None
    report_dir: str = "output/run_reports"


def _expect_dict(payload: Any, ctx: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError(f"{ctx} must be an object")
    return payload


def _expect_str_list(payload: dict[str, Any], key: str) -> list[str]:
    raw = payload.get(key, [])
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"{key} must be a list")
    values = [str(v).strip() for v in raw]
    if any(not v for v in values):
        raise ValueError(f"{key} contains an empty entry")
    return values


def _load_manifest_payload(path: str) -> dict[str, Any]:
    manifest_path = Path(path)
    if not manifest_path.is_file():
        raise FileNotFoundError(f"Manifest file not found: {manifest_path}")

    text = manifest_path.read_text(encoding="utf-8")
    suffix = manifest_path.suffix.lower()
    if suffix == ".json":
        payload = json.loads(text)
    else:
        payload = yaml.safe_load(text)
    return _expect_dict(payload, "manifest")


def load_build_manifest(path: str) -> BuildManifest:
    """Load and validate a build manifest from a YAML/JSON file.

    Relative include paths and rule files are resolved against the
    manifest's own directory.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If the manifest is malformed.
    """
    payload = _load_manifest_payload(path)
    name = str(payload.get("name", "")).strip()
    if not name:
        raise ValueError("name is required")

    includes = _expect_str_list(payload, "includes")
    c_includes = _expect_str_list(payload, "c_includes")
    if not includes and not c_includes:
        raise ValueError("includes or c_includes must be a non-empty list")
    duplicates = sorted({i for i in includes + c_includes if (includes + c_includes).count(i) > 1})
    if duplicates:
        raise ValueError(f"Duplicate includes in manifest: {', '.join(duplicates)}")

    base_dir = Path(path).resolve().parent
    include_paths = [
        str(resolve_manifest_path(base_dir, p)) for p in _expect_str_list(payload, "include_paths")
    ]
    rule_files = [
        str(resolve_manifest_path(base_dir, p)) for p in _expect_str_list(payload, "rule_files")
    ]
    output_file = payload.get("output_file")

    return BuildManifest(
        name=name,
        includes=includes,
        c_includes=c_includes,
        include_paths=include_paths,
        rule_files=rule_files,
        excludes=_expect_str_list(payload, "excludes"),
        output_file=str(output_file) if output_file is not None else None,
        report_dir=str(payload.get("report_dir", "output/run_reports")),
    )


def resolve_manifest_path(base_dir: Path, raw_path: str) -> Path:
    """Resolve a path relative to the manifest directory if needed."""
    raw = Path(raw_path)
    return raw if raw.is_absolute() else (base_dir / raw)
