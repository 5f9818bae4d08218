from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional


# Context variable to attach the current analysis id to every log record.
_ANALYSIS_ID: ContextVar[Optional[str]] = ContextVar("analysis_id", default=None)

_RESERVED_ATTRS = {
    "msg", "args", "levelname", "levelno", "name", "pathname", "filename", "module",
    "exc_info", "exc_text", "stack_info", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName", "processName", "process",
    "taskName", "analysis_id",
}


@contextmanager
def analysis_scope(analysis_id: str) -> Iterator[None]:
    # Records logged inside the block carry analysis_id; the previous id is restored on exit.
    token = _ANALYSIS_ID.set(analysis_id)
    try:
        yield
    finally:
        _ANALYSIS_ID.reset(token)


def current_analysis_id() -> Optional[str]:
    return _ANALYSIS_ID.get()


class AnalysisIdFilter(logging.Filter):
    # Adds analysis_id to log records.
    def filter(self, record: logging.LogRecord) -> bool:
        record.analysis_id = current_analysis_id()
        return True


class JsonFormatter(logging.Formatter):
    # Structured JSON formatter for logs.
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).replace(microsecond=0, tzinfo=None).isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "analysis_id": getattr(record, "analysis_id", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        # Include extra={} fields, stringified when they are not JSON-serializable.
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            try:
                json.dumps(value, ensure_ascii=False)
                payload[key] = value
            except TypeError:
                payload[key] = str(value)

        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_logs: bool = True) -> None:
    # Configure root logging once.
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(AnalysisIdFilter())

    if json_logs:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s analysis_id=%(analysis_id)s %(message)s"
        ))

    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
