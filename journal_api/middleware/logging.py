"""
Journal API: Access Log Middleware
==================================

What:  One log line per HTTP request on the `journal_api.access` logger.
How:   Times the downstream call and logs method, path, status, duration,
       request id and, for authenticated requests, the principal.

Level follows the status: 5xx → ERROR, 4xx → WARNING, else INFO.
Request bodies and the Authorization header are never logged; they carry
passwords and tokens.

    POST /entries 201 12.3ms [a1b2c3d4] user=dean from 127.0.0.1
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from journal_api.middleware.request_id import request_id_var

logger = logging.getLogger("journal_api.access")

# Probed by load balancers every few seconds
QUIET_PATHS = frozenset({"/health"})


def _level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        principal = getattr(request.state, "principal", None) or "-"
        rid = request_id_var.get("")
        status = response.status_code

        logger.log(
            _level_for_status(status),
            "%s %s %d %.1fms [%s] user=%s from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            principal,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "principal": principal,
            },
        )
        return response
