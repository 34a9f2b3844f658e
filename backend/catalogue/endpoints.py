"""
Catalogue Service — Endpoint Layer
====================================

What:  One transport-independent function per service method:
           async (request model) -> response model
How:   Each endpoint unpacks its request into the service's typed arguments
       and packs the result into a response model. Nothing else happens here:
       no validation, no I/O beyond the service call.

Tracing:
    Every endpoint runs inside an OpenTelemetry span named after the
    operation. The span is ended on every exit path and records any
    exception raised. With opentelemetry's NoOpTracer (the default) the
    wrapper costs a context-manager enter/exit and nothing more.

Errors propagate as exceptions; the transport maps them to status codes.
"""

from dataclasses import dataclass
from functools import wraps
from typing import Any, Awaitable, Callable, Optional

from opentelemetry import trace

from catalogue.schemas.sock import (
    CountRequest,
    CountResponse,
    GetRequest,
    GetResponse,
    HealthRequest,
    HealthResponse,
    ListRequest,
    ListResponse,
    TagsRequest,
    TagsResponse,
)
from catalogue.services.base import CatalogueService

Endpoint = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True)
class Endpoints:
    """The full set of catalogue endpoints handed to the router."""

    list: Endpoint
    count: Endpoint
    get: Endpoint
    tags: Endpoint
    health: Endpoint


def traced(tracer: trace.Tracer, name: str) -> Callable[[Endpoint], Endpoint]:
    """Run an endpoint inside a span called `name`."""

    def decorate(endpoint: Endpoint) -> Endpoint:
        @wraps(endpoint)
        async def wrapper(request: Any) -> Any:
            with tracer.start_as_current_span(name):
                return await endpoint(request)

        return wrapper

    return decorate


def make_list_endpoint(service: CatalogueService) -> Endpoint:
    async def list_endpoint(request: ListRequest) -> ListResponse:
        socks = await service.list(request.tags, request.order, request.page_num, request.page_size)
        return ListResponse(socks=socks)

    return list_endpoint


def make_count_endpoint(service: CatalogueService) -> Endpoint:
    async def count_endpoint(request: CountRequest) -> CountResponse:
        return CountResponse(size=await service.count(request.tags))

    return count_endpoint


def make_get_endpoint(service: CatalogueService) -> Endpoint:
    async def get_endpoint(request: GetRequest) -> GetResponse:
        return GetResponse(sock=await service.get(request.id))

    return get_endpoint


def make_tags_endpoint(service: CatalogueService) -> Endpoint:
    async def tags_endpoint(request: TagsRequest) -> TagsResponse:
        return TagsResponse(tags=await service.tags())

    return tags_endpoint


def make_health_endpoint(service: CatalogueService) -> Endpoint:
    async def health_endpoint(request: HealthRequest) -> HealthResponse:
        return HealthResponse(health=await service.health())

    return health_endpoint


def make_endpoints(
    service: CatalogueService,
    tracer: Optional[trace.Tracer] = None,
) -> Endpoints:
    """Build every endpoint over `service`, each wrapped in a span."""
    tracer = tracer or trace.NoOpTracer()
    return Endpoints(
        list=traced(tracer, "list socks")(make_list_endpoint(service)),
        count=traced(tracer, "count socks")(make_count_endpoint(service)),
        get=traced(tracer, "get sock")(make_get_endpoint(service)),
        tags=traced(tracer, "list tags")(make_tags_endpoint(service)),
        health=traced(tracer, "health check")(make_health_endpoint(service)),
    )
