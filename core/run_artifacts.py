"""Writers for generated declarations and JSON run reports."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def write_run_report(
    report: dict[str, Any],
    run_id: str,
    output_dir: str = "output/run_reports",
    name: str | None = None,
) -> str:
    """Write a JSON run report and return its path.

    The file is ``<name>-<run_id>.json``, or ``<run_id>.json`` when the run
    failed before a binding name was known. ``run_id`` and ``timestamp_utc``
    are filled in unless the report already carries them.
    """
    file_name = f"{name}-{run_id}.json" if name else f"{run_id}.json"
    path = os.path.join(output_dir, file_name)
    _ensure_parent(path)
    payload = {
        "run_id": run_id,
        "timestamp_utc": datetime.now(timezone.utc).isoformat(),
    }
    payload.update(report)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    return path


def write_text_artifact(text: str, path: str, line_separator: str | None = None) -> str:
    """Write generated text, creating parent directories, and return its path.

    Args:
        text: Text using ``\\n`` line endings.
        path: Destination file.
        line_separator: Line separator of the parsed input. When given, every
            ``\\n`` is written as this separator.
    """
    _ensure_parent(path)
    if line_separator and line_separator != "\n":
        text = text.replace("\n", line_separator)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)
    return path
