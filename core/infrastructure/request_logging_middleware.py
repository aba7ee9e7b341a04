"""Middleware that logs one canonical line per HTTP request with context.

Requests against a query session also carry ``session_id`` in the bound
contextvars, so location and submission lines group per session.
"""

import re
import time
import uuid
from typing import Optional

import structlog
import structlog.contextvars
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger("request")

_SESSION_PATH = re.compile(r"^/api/ds/geo/sessions/(?P<session_id>[^/]+)")
_CONTEXT_KEYS = ("request_id", "method", "path", "session_id")


def session_id_from_path(path: str) -> Optional[str]:
    match = _SESSION_PATH.match(path)
    return match.group("session_id") if match else None


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path.endswith("/health"):
            return await call_next(request)

        request_id = uuid.uuid4().hex[:8]
        context = {"request_id": request_id, "method": request.method, "path": path}
        session_id = session_id_from_path(path)
        if session_id:
            context["session_id"] = session_id
        structlog.contextvars.bind_contextvars(**context)

        start = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start) * 1000, 1)
            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
            response.headers["X-Request-ID"] = request_id
            return response
        except Exception:
            duration_ms = round((time.perf_counter() - start) * 1000, 1)
            logger.error("request_failed", duration_ms=duration_ms)
            raise
        finally:
            structlog.contextvars.unbind_contextvars(*_CONTEXT_KEYS)
