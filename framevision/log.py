"""Structured event logging for the reader."""
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

LOGGER_NAME = "framevision"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Return the package logger, installing a stdout handler on first use.

    ``FRAMEVISION_LOG_LEVEL`` selects the level (``INFO`` by default). Child
    loggers share the root package handler.
    """

    root = logging.getLogger(LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
        log_level = (os.environ.get("FRAMEVISION_LOG_LEVEL") or "INFO").strip().upper()
        root.setLevel(getattr(logging, log_level, logging.INFO))
        root.propagate = False
    return logging.getLogger(name)


def log_event(
    logger: logging.Logger,
    event: str,
    payload: Optional[Dict[str, Any]] = None,
    *,
    level: str = "info",
    exc_info: bool = False,
) -> None:
    log_format = (os.environ.get("FRAMEVISION_LOG_FORMAT") or "json").strip().lower()
    record = {"ts": _utc_now_iso(), "event": event, **(payload or {})}
    if log_format == "json":
        msg = json.dumps(record, ensure_ascii=False, default=str)
    else:
        msg = f"{record.get('ts')} {event} {payload or {}}"
    fn = getattr(logger, level, logger.info)
    fn(msg, exc_info=exc_info)
