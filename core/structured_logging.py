"""Structured logging with run, phase and header correlation.

Every record emitted while a header is being parsed carries the run id, the
current phase (``config``, ``parse``, ``write``) and the header path, so one
run report can be matched with its log lines.
"""

from __future__ import annotations

import contextvars
import logging
import os
import uuid
from contextlib import contextmanager
from typing import Iterator

_RUN_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar("run_id", default="-")
_PHASE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar("phase", default="-")
_HEADER_VAR: contextvars.ContextVar[str] = contextvars.ContextVar("header", default="-")

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | run_id=%(run_id)s | phase=%(phase)s | "
    "header=%(header)s | %(name)s | %(message)s"
)


class _ParseContextFilter(logging.Filter):
    """Copy the correlation context variables onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _RUN_ID_VAR.get()
        record.phase = _PHASE_VAR.get()
        record.header = _HEADER_VAR.get()
        return True


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_structured_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging with the correlation fields.

    Args:
        level: Numeric level or a level name such as ``"DEBUG"``.

    Raises:
        ValueError: If ``level`` names no logging level.
    """
    level = _resolve_level(level)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root_logger.setLevel(level)
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    for handler in root_logger.handlers:
        if not any(isinstance(f, _ParseContextFilter) for f in handler.filters):
            handler.addFilter(_ParseContextFilter())


def set_run_id(run_id: str | None = None) -> str:
    """Set the run id, generating one when ``run_id`` is empty."""
    value = run_id or uuid.uuid4().hex
    _RUN_ID_VAR.set(value)
    return value


def get_run_id() -> str:
    return _RUN_ID_VAR.get()


def get_header() -> str:
    return _HEADER_VAR.get()


@contextmanager
def phase_scope(phase: str) -> Iterator[None]:
    """Tag records emitted inside the block with ``phase``."""
    token = _PHASE_VAR.set(phase)
    try:
        yield
    finally:
        _PHASE_VAR.reset(token)


@contextmanager
def header_scope(path: str) -> Iterator[None]:
    """Tag records emitted inside the block as parsing ``path``."""
    token = _HEADER_VAR.set(os.path.basename(path))
    try:
        with phase_scope("parse"):
            yield
    finally:
        _HEADER_VAR.reset(token)
