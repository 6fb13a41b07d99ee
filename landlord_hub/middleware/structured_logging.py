# landlord_hub/middleware/structured_logging.py
from __future__ import annotations

import logging
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

log = logging.getLogger("landlord_hub.request")

QUIET_PATHS = frozenset({"/api/health"})


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    One "http_request" record per call, with method, path, status_code and
    latency_ms as record extras (rendered by logging_config.JsonFormatter).
    Client errors log at WARNING, server errors at ERROR. Health checks are
    not logged.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            extra = {
                "method": request.method,
                "path": path,
                "status_code": status_code,
                "latency_ms": round((time.perf_counter() - started) * 1000, 1),
                "request_id": getattr(request.state, "request_id", None),
            }
            if request.url.query:
                extra["query"] = request.url.query
            log.log(_level_for(status_code), "http_request", extra=extra)
