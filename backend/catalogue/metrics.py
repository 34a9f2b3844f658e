"""
Catalogue Service — Metrics Sink
==================================

What:  Prometheus histograms for HTTP requests and service calls.
How:   One `Metrics` instance is built at startup around its own
       CollectorRegistry and handed to the request observability middleware,
       the instrumenting service middleware and the /metrics route.
       Nothing registers on prometheus_client's global REGISTRY, so tests and
       multiple app instances never collide on metric names.
"""

from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Histogram, generate_latest


class Metrics:
    """Histogram owner and the observation API the rest of the app uses."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self.http_request_duration = Histogram(
            "http_request_duration_seconds",
            "Time (in seconds) spent serving HTTP requests.",
            ["method", "path", "status_code"],
            registry=self.registry,
        )
        self.service_request_duration = Histogram(
            "catalogue_service_request_duration_seconds",
            "Time (in seconds) spent in catalogue service methods.",
            ["method", "success"],
            registry=self.registry,
        )

    def observe_request(self, method: str, route: str, status: int, duration: float) -> None:
        """Record one HTTP request keyed by (method, route template, status)."""
        self.http_request_duration.labels(
            method=method, path=route, status_code=str(status)
        ).observe(duration)

    def observe_call(self, method: str, success: bool, duration: float) -> None:
        self.service_request_duration.labels(
            method=method, success=str(success).lower()
        ).observe(duration)

    def exposition(self) -> bytes:
        return generate_latest(self.registry)

    content_type = CONTENT_TYPE_LATEST
