"""
Travel Journal Backend — Request Logging Middleware
=====================================================

What:  One access-log line per request: method, path, status, duration,
       request id, client address.
Why:   Operators need to see failed and slow calls without enabling uvicorn's
       own access log, which lacks request ids.

Privacy:
    ✅ Log: method, path, status, duration, client IP, request ID
    ❌ Don't log: bodies (passwords, stories), query strings, Authorization
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.middleware.request_id import request_id_var

logger = logging.getLogger("travel_journal.access")

# Probes and static files would drown out API traffic
_QUIET_PREFIXES = ("/health", "/uploads/", "/assets/")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs at INFO for 2xx/3xx, WARNING for 4xx, ERROR for 5xx.

    Must be added before RequestIDMiddleware so it runs inside it and can
    read the request id.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.startswith(_QUIET_PREFIXES):
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
