"""
Catalogue Service — Catalogue Route Handlers
==============================================

What:  GET /catalogue, GET /catalogue/size, GET /catalogue/{id}, GET /tags.
How:   Each handler decodes the query string into an endpoint request model,
       awaits the endpoint and returns the response body. Errors raised by the
       endpoint are left to the global exception handlers in main.py.

Query parameters:
    tags       comma-separated tag names, AND semantics   (default: none)
    order      id | name | description | price (alias: sort)  (default: none)
    pageNum    1-based page number (alias: page)          (default: 1)
    pageSize   items per page (alias: size)               (default: settings)

Page values are decoded by hand rather than through typed Query() params so
that non-numeric input becomes a 400 InvalidArgumentError with the same body
as every other client error.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Request

from catalogue.endpoints import Endpoints
from catalogue.exceptions import InvalidArgumentError
from catalogue.schemas.sock import (
    CountRequest,
    CountResponse,
    ErrorResponse,
    GetRequest,
    ListRequest,
    Sock,
    TagsRequest,
    TagsResponse,
)

logger = logging.getLogger(__name__)


# ── Decoders ──────────────────────────────────────────────────────────────

def _first(request: Request, *names: str) -> Optional[str]:
    for name in names:
        value = request.query_params.get(name)
        if value is not None and value != "":
            return value
    return None


def decode_tags(request: Request) -> List[str]:
    raw = request.query_params.get("tags", "")
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def decode_int(request: Request, name: str, alias: str, default: int) -> int:
    raw = _first(request, name, alias)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgumentError(
            message=f"{name} must be an integer, got '{raw}'",
            field=name,
        ) from None


def decode_list_request(request: Request, default_page_size: int) -> ListRequest:
    return ListRequest(
        tags=decode_tags(request),
        order=_first(request, "order", "sort"),
        page_num=decode_int(request, "pageNum", "page", 1),
        page_size=decode_int(request, "pageSize", "size", default_page_size),
    )


def decode_count_request(request: Request) -> CountRequest:
    return CountRequest(tags=decode_tags(request))


# ── Router ────────────────────────────────────────────────────────────────

def make_router(endpoints: Endpoints, default_page_size: int = 10) -> APIRouter:
    """Bind catalogue routes to `endpoints`."""
    router = APIRouter(tags=["Catalogue"])

    @router.get(
        "/catalogue",
        response_model=List[Sock],
        responses={
            400: {"description": "Invalid pagination or order", "model": ErrorResponse},
            503: {"description": "Store unavailable", "model": ErrorResponse},
        },
        summary="List socks, filtered by tags, ordered and paginated",
    )
    async def list_socks(request: Request) -> List[Sock]:
        response = await endpoints.list(decode_list_request(request, default_page_size))
        return response.socks

    # Registered before /catalogue/{sock_id} so "size" is never read as an id
    @router.get(
        "/catalogue/size",
        response_model=CountResponse,
        responses={503: {"description": "Store unavailable", "model": ErrorResponse}},
        summary="Count socks matching a tag filter",
    )
    async def count_socks(request: Request) -> CountResponse:
        return await endpoints.count(decode_count_request(request))

    @router.get(
        "/catalogue/{sock_id}",
        response_model=Sock,
        responses={
            404: {"description": "Sock not found", "model": ErrorResponse},
            503: {"description": "Store unavailable", "model": ErrorResponse},
        },
        summary="Get a single sock by ID",
    )
    async def get_sock(sock_id: str) -> Sock:
        response = await endpoints.get(GetRequest(id=sock_id))
        return response.sock

    @router.get(
        "/tags",
        response_model=TagsResponse,
        responses={503: {"description": "Store unavailable", "model": ErrorResponse}},
        summary="List every tag in use",
    )
    async def list_tags() -> TagsResponse:
        response = await endpoints.tags(TagsRequest())
        # Presentation order only; the service makes no ordering promise
        return TagsResponse(tags=sorted(response.tags))

    return router
