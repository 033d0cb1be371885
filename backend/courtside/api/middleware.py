"""
Request middleware: correlation id, access log line and per-route metrics.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from courtside.core.config import get_settings
from courtside.core.logging import get_logger
from courtside.core.metrics import record_http_request

logger = get_logger(__name__)
settings = get_settings()

REQUEST_ID_HEADER = "X-Request-ID"


def _route_template(request: Request) -> str:
    # "/api/v1/courts/{court_id}/slots" rather than the concrete path, to keep label cardinality bounded
    route = request.scope.get("route")
    return getattr(route, "path", "unmatched")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Binds request_id, method and path for every log line of the request,
    logs one line when it finishes and records it in Prometheus.

    A caller-supplied X-Request-ID is reused so a booking can be traced
    across the client, a proxy and this service.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        start_time = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            record_http_request(request.method, _route_template(request), 500, duration_ms / 1000)
            logger.error("request_failed", error=str(e), duration_ms=duration_ms)
            raise

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        record_http_request(request.method, _route_template(request), response.status_code, duration_ms / 1000)

        log = logger.warning if duration_ms >= settings.SLOW_REQUEST_MS else logger.info
        log("request_completed", status_code=response.status_code, duration_ms=duration_ms)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        return response
