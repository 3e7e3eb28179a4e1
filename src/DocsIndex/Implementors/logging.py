"""
Structured logging helpers for the implementors subsystem.

Console output uses a short ``LEVEL: message`` format by default; switching the
settings to ``json`` emits one JSON object per record with any structured
fields attached through ``extra_fields``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

__all__ = ["JSONFormatter", "LoggerLike", "StructuredLogger", "get_logger", "log_event"]

_MANAGED_ATTR = "_docsindex_managed"


class JSONFormatter(logging.Formatter):
    """Formatter emitting JSON structured logs."""

    def format(self, record: logging.LogRecord) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra_fields") and isinstance(record.extra_fields, dict):
            payload.update(record.extra_fields)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class StructuredLogger(logging.LoggerAdapter):
    """Adapter stamping a fixed context (command, trait, ...) onto every record.

    Context fields are merged under any per-call ``extra_fields``, so a field
    passed to ``log_event`` wins over the bound one of the same name.
    """

    def __init__(self, logger: logging.Logger, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(logger, {})
        self.context: Dict[str, Any] = dict(context or {})

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple[str, Dict[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        per_call = extra.get("extra_fields")
        extra["extra_fields"] = {**self.context, **(per_call if isinstance(per_call, dict) else {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **fields: object) -> "StructuredLogger":
        """Return a new adapter whose context adds the non-``None`` ``fields``."""

        merged = {**self.context, **{k: v for k, v in fields.items() if v is not None}}
        return StructuredLogger(self.logger, merged)


LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


def get_logger(
    name: str,
    level: str = "INFO",
    *,
    fmt: str = "console",
    context: Optional[Dict[str, Any]] = None,
) -> StructuredLogger:
    """Return a structured logger with exactly one managed stderr handler.

    Calling this again for the same ``name`` replaces the managed handler so a
    changed ``fmt`` takes effect, and leaves handlers installed by others alone.
    """

    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        if getattr(handler, _MANAGED_ATTR, False):
            logger.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    setattr(handler, _MANAGED_ATTR, True)
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return StructuredLogger(logger, context)


def log_event(logger: LoggerLike, level: str, message: str, **fields: object) -> None:
    """Emit a structured log record using the ``extra_fields`` convention."""

    emitter = getattr(logger, str(level).lower(), None)
    if not callable(emitter):
        raise AttributeError(f"Logger has no level '{level}'")
    emitter(message, extra={"extra_fields": fields})
