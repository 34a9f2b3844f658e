"""
Catalogue Service — Request Observability Middleware
======================================================

What:  Times every HTTP request, records it in the request-duration histogram
       and writes one access log line.
How:   Starlette BaseHTTPMiddleware wrapped around the whole app, outside
       routing. The router stores the route it dispatched to in the shared
       scope (`scope["route"]`), so once the request has been served its path
       template is read from there: `/catalogue/42` and `/catalogue/7` share
       the `/catalogue/{sock_id}` label. Unmatched requests get an empty
       template.

Skipped paths:
    /health and /healthz go straight to the router: no timing, no log line.

Log Format:
    127.0.0.1 GET /catalogue?tags=red HTTP/1.1 200 312 4ms

    2xx/3xx → INFO, 4xx → WARNING, 5xx → ERROR
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Scope

from catalogue.metrics import Metrics

logger = logging.getLogger("catalogue.access")

BYPASS_PATHS = frozenset({"/health", "/healthz"})


def route_template(scope: Scope) -> str:
    """
    Path template of the route the router selected for `scope`, or "".

    A route matching the path but not the method is still selected (it
    answers 405), so it names the template too.
    """
    return getattr(scope.get("route"), "path", "") or ""


class RequestObservabilityMiddleware(BaseHTTPMiddleware):
    """
    Per-request latency histogram plus access log.

    Args:
        app:     The wrapped ASGI application
        metrics: Sink receiving (method, route, status, duration) observations
    """

    def __init__(self, app: ASGIApp, metrics: Metrics):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in BYPASS_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # The server error middleware outside us turns this into a 500
            latency = time.perf_counter() - start_time
            self._record(request, route_template(request.scope), 500, 0, latency)
            raise
        latency = time.perf_counter() - start_time

        size = int(response.headers.get("content-length", 0))
        self._record(request, route_template(request.scope), response.status_code, size, latency)
        return response

    def _record(self, request: Request, route: str, status: int, size: int, latency: float) -> None:
        self.metrics.observe_request(request.method, route, status, latency)

        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        client_ip = request.client.host if request.client else "unknown"
        uri = request.url.path + (f"?{request.url.query}" if request.url.query else "")
        protocol = f"HTTP/{request.scope.get('http_version', '1.1')}"

        logger.log(
            log_level,
            "%s %s %s %s %d %d %dms",
            client_ip,
            request.method,
            uri,
            protocol,
            status,
            size,
            int(latency * 1000),
            extra={
                "method": request.method,
                "route": route,
                "status": status,
                "size": size,
                "duration_ms": round(latency * 1000, 2),
                "client_ip": client_ip,
            },
        )
