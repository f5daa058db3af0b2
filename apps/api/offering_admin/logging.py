from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from offering_admin.context import get_correlation_id


CATALOG_LOG_FIELDS = frozenset(
    {
        "method",
        "path",
        "status_code",
        "duration_ms",
        "offering_id",
        "operation",
        "event_name",
        "brand_id",
        "ecosystem_id",
        "error",
        "seeded",
    }
)
_MAX_ERROR_LENGTH = 500
_STANDARD_ATTRIBUTES = frozenset(logging.makeLogRecord({}).__dict__)
_base_factory = logging.getLogRecordFactory()


def _stamp_correlation_id(record: logging.LogRecord) -> logging.LogRecord:
    if not getattr(record, "correlation_id", None):
        record.correlation_id = get_correlation_id()
    return record


def _catalog_record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
    return _stamp_correlation_id(_base_factory(*args, **kwargs))


class CorrelationIdFilter(logging.Filter):
    """Covers records built outside the factory, e.g. ``logging.makeLogRecord``."""

    def filter(self, record: logging.LogRecord) -> bool:
        _stamp_correlation_id(record)
        return True


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line; only whitelisted ``extra`` keys are emitted."""

    def __init__(self, fields: Iterable[str] = CATALOG_LOG_FIELDS) -> None:
        super().__init__()
        self.fields = frozenset(fields)

    def format(self, record: logging.LogRecord) -> str:
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key in self.fields and key not in _STANDARD_ATTRIBUTES
        }
        if isinstance(extras.get("error"), str):
            extras["error"] = extras["error"][:_MAX_ERROR_LENGTH]

        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", None),
            "fields": extras,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level_name: str = "INFO") -> None:
    root = logging.getLogger()
    if getattr(root, "_offering_admin_configured", False):
        return

    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonLogFormatter())
    handler.addFilter(CorrelationIdFilter())

    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)
    logging.setLogRecordFactory(_catalog_record_factory)
    root._offering_admin_configured = True  # type: ignore[attr-defined]
