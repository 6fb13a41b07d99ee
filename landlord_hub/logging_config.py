# landlord_hub/logging_config.py
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from .middleware.request_id import RequestIDLogFilter

# Record attributes copied into the JSON line when a caller passes them via extra=.
EXTRA_FIELDS = (
    "request_id",
    "method",
    "path",
    "query",
    "status_code",
    "latency_ms",
    "property_id",
    "request_ref",
    "document_id",
    "ai_task",
)


class JsonFormatter(logging.Formatter):
    """One JSON object per line: ts, level, logger, message, known extras, exc_info."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for k in EXTRA_FIELDS:
            v = getattr(record, k, None)
            if v is not None:
                payload[k] = v

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str | None = None) -> None:
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    handler.addFilter(RequestIDLogFilter())

    root = logging.getLogger()
    # replace, not append: uvicorn --reload imports the app more than once
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
    root.setLevel(level)

    # uvicorn's own access line duplicates the http_request record
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    # httpx logs every AI request line at INFO; the AI client reports its own failures
    logging.getLogger("httpx").setLevel((os.getenv("HTTPX_LOG_LEVEL") or "WARNING").upper())
