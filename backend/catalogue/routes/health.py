"""
Catalogue Service — Health Check Route
========================================

What:  GET /health and GET /healthz for liveness probes and load balancers.
How:   Goes through the health endpoint like any other route, so the
       service middleware still sees the call, but the request observability
       middleware skips these paths.

The route answers 200 whenever the process is serving. Store problems
appear as `"status": "unhealthy"` on the `catalogue-db` entry.
"""

from fastapi import APIRouter

from catalogue.endpoints import Endpoints
from catalogue.schemas.sock import HealthRequest, HealthResponse

HEALTH_PATHS = ("/health", "/healthz")


def make_health_router(endpoints: Endpoints) -> APIRouter:
    router = APIRouter(tags=["Health"])

    async def health_check() -> HealthResponse:
        return await endpoints.health(HealthRequest())

    for path in HEALTH_PATHS:
        router.add_api_route(
            path,
            health_check,
            methods=["GET"],
            response_model=HealthResponse,
            summary="Service health check",
        )
    return router
