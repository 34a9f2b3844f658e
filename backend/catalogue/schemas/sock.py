"""
Catalogue Service — Pydantic Schemas
======================================

What:  Domain values returned by the service, the request/response shapes
       used by the endpoint layer, and the error body used by the transport.
How:   Domain values are frozen models; field aliases give the JSON names
       existing clients of the catalogue API already read (`imageUrl`, `tag`).
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Domain Values
# ══════════════════════════════════════════════════════════════════════════


class Sock(BaseModel):
    """An immutable catalogue item as seen by everything above the repository."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(description="Unique item identifier")
    name: str = Field(description="Display name")
    description: str = Field(description="Long description")
    image_url: List[str] = Field(
        default_factory=list,
        alias="imageUrl",
        description="Image references, relative to the image route",
    )
    price: float = Field(description="Unit price")
    count: int = Field(description="Units in stock")
    tag: List[str] = Field(default_factory=list, description="Tag names carried by the item")


class HealthEntry(BaseModel):
    """Point-in-time status of the service or one of its dependencies."""

    model_config = ConfigDict(frozen=True)

    service: str
    status: str
    time: datetime


# ══════════════════════════════════════════════════════════════════════════
# Endpoint Requests: decoded from the query string by the transport
# ══════════════════════════════════════════════════════════════════════════


class ListRequest(BaseModel):
    tags: List[str] = Field(default_factory=list)
    order: Optional[str] = None
    page_num: int = 1
    page_size: int = 10


class CountRequest(BaseModel):
    tags: List[str] = Field(default_factory=list)


class GetRequest(BaseModel):
    id: str


class TagsRequest(BaseModel):
    pass


class HealthRequest(BaseModel):
    pass


# ══════════════════════════════════════════════════════════════════════════
# Endpoint Responses
# ══════════════════════════════════════════════════════════════════════════


class ListResponse(BaseModel):
    socks: List[Sock]


class CountResponse(BaseModel):
    size: int = Field(description="Number of items matching the tag filter")


class GetResponse(BaseModel):
    sock: Sock


class TagsResponse(BaseModel):
    tags: List[str] = Field(description="Distinct tag names")


class HealthResponse(BaseModel):
    health: List[HealthEntry]


# ══════════════════════════════════════════════════════════════════════════
# Error Response: consistent error format across all routes
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body.

    Example:
        {
            "error": "not_found",
            "message": "sock with ID '99' was not found",
            "status_code": 404
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    status_code: int = Field(description="HTTP status of the response")
    details: Optional[dict] = Field(default=None, description="Additional error context")
