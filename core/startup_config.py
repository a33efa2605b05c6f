"""Startup configuration validation helpers.

Provides strict/non-strict loading of the YAML or JSON payloads used by rule
files and build manifests, plus environment flag resolution.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Iterable

import yaml

logger = logging.getLogger(__name__)

_JSON_SUFFIXES = (".json",)


class ConfigValidationError(RuntimeError):
    """Raised when strict startup validation fails."""


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag("STRICT_CONFIG_VALIDATION", default=default)


def report_config_problem(msg: str, strict: bool, fallback: str = "continuing with defaults") -> None:
    """Raise in strict mode, log a warning otherwise."""
    if strict:
        raise ConfigValidationError(msg)
    logger.warning("%s; %s", msg, fallback)


def load_config_payload(path: str, strict: bool = False) -> dict[str, Any]:
    """Load a YAML or JSON mapping from ``path``.

    JSON is selected by the ``.json`` suffix; anything else is read as YAML.
    In non-strict mode this returns an empty dict on read/parse failures.
    In strict mode this raises ``ConfigValidationError``.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.lower().endswith(_JSON_SUFFIXES):
                payload = json.load(f)
            else:
                payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        msg = f"Config file not found: {path}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        msg = f"Failed to parse config at {path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        report_config_problem(f"Config file is empty: {path}", strict)
        return {}

    if not isinstance(payload, dict):
        report_config_problem(
            f"Unexpected config payload type in {path}: {type(payload).__name__}",
            strict,
        )
        return {}

    return payload


def validate_include_paths(
    include_paths: Iterable[str],
    strict: bool = False,
) -> dict[str, Any]:
    """Check that include directories exist and return a summary."""
    paths = list(include_paths)
    missing = [p for p in paths if not os.path.isdir(p)]

    if missing and strict:
        raise ConfigValidationError(
            "Missing include directories: " + ", ".join(missing)
        )

    if missing:
        logger.warning(
            "Missing include directories (%s); lookups there will fail",
            ", ".join(missing),
        )

    return {
        "include_paths": paths,
        "strict": strict,
        "missing_include_paths": missing,
    }
