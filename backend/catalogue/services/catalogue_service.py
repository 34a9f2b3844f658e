"""
Catalogue Service — SQL-backed Service Implementation
=======================================================

What:  The core CatalogueService: validates queries, delegates reads to the
       SockRepository and converts rows into immutable Sock values.
Who:   Wrapped by the service middleware chain; reached through endpoints.

Error Handling Strategy:
    Validation runs before any repository call, so malformed queries never
    reach the store. Repository failures are classified:

        connection refused / dropped / timed out  → UnavailableError
        anything else                             → InternalError
        CatalogueError raised by our own code     → propagated as-is

    health() is the exception to the rule: the store probe's failure is
    reported as a status value and never raised.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, List, Optional, Sequence

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from catalogue.exceptions import (
    CatalogueError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    UnavailableError,
)
from catalogue.models.sock import Sock as SockRow
from catalogue.repositories.sock_repository import ORDER_COLUMNS, SockRepository
from catalogue.schemas.sock import HealthEntry, Sock
from catalogue.services.base import CatalogueService

logger = logging.getLogger(__name__)

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"

# Largest OFFSET/LIMIT a store accepts (signed 64-bit); no page starts beyond it
MAX_ROW_INDEX = 2**63 - 1

# Exceptions that mean "the store could not be reached", not "the query is wrong"
_UNAVAILABLE_ERRORS = (
    OperationalError,
    InterfaceError,
    PoolTimeoutError,
    asyncio.TimeoutError,
    OSError,
)


def normalize_tags(tags: Sequence[str]) -> List[str]:
    """Strip whitespace and drop blank entries, keeping first-seen order."""
    seen: List[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


def normalize_order(order: Optional[str]) -> Optional[str]:
    """
    Map a client-supplied order onto a recognised field name.

    None or blank means no explicit ordering. Matching is case-insensitive.

    Raises:
        InvalidArgumentError: the value names no sortable field
    """
    if order is None or not order.strip():
        return None
    key = order.strip().lower()
    if key not in ORDER_COLUMNS:
        raise InvalidArgumentError(
            message=(
                f"order '{order}' is not supported. "
                f"Must be one of: {', '.join(sorted(ORDER_COLUMNS))}"
            ),
            field="order",
        )
    return key


def to_sock(row: SockRow) -> Sock:
    return Sock(
        id=row.sock_id,
        name=row.name,
        description=row.description,
        image_url=row.image_urls,
        price=row.price,
        count=row.count,
        tag=[tag.name for tag in row.tags],
    )


class SQLCatalogueService(CatalogueService):
    """
    CatalogueService over a relational store.

    Stateless apart from its collaborators, so one instance serves every
    request concurrently.
    """

    def __init__(
        self,
        repository: SockRepository,
        health_timeout: float = 2.0,
        service_name: str = "catalogue",
    ):
        self._repository = repository
        self._health_timeout = health_timeout
        self._service_name = service_name

    @asynccontextmanager
    async def _classified(self, operation: str, **context) -> AsyncIterator[None]:
        """Translate repository failures raised inside the block."""
        try:
            yield
        except CatalogueError:
            raise
        except _UNAVAILABLE_ERRORS as e:
            logger.error("Store unavailable during %s: %s", operation, e)
            raise UnavailableError(
                context={"operation": operation, "error_type": type(e).__name__, **context},
            ) from e
        except Exception as e:
            logger.error("Unexpected error during %s: %s", operation, e, exc_info=True)
            raise InternalError(
                context={"operation": operation, "error_type": type(e).__name__, **context},
            ) from e

    async def list(
        self,
        tags: Sequence[str],
        order: Optional[str],
        page_num: int,
        page_size: int,
    ) -> List[Sock]:
        if page_num < 1:
            raise InvalidArgumentError(
                message=f"pageNum must be a positive integer, got {page_num}",
                field="pageNum",
            )
        if page_size < 1:
            raise InvalidArgumentError(
                message=f"pageSize must be a positive integer, got {page_size}",
                field="pageSize",
            )
        order_key = normalize_order(order)
        wanted = normalize_tags(tags)

        offset = (page_num - 1) * page_size
        if offset > MAX_ROW_INDEX:
            return []

        async with self._classified("list", tags=wanted, order=order_key):
            rows = await self._repository.list_socks(
                tags=wanted,
                order=order_key,
                offset=offset,
                limit=min(page_size, MAX_ROW_INDEX),
            )
            return [to_sock(row) for row in rows]

    async def count(self, tags: Sequence[str]) -> int:
        wanted = normalize_tags(tags)
        async with self._classified("count", tags=wanted):
            return await self._repository.count_socks(wanted)

    async def get(self, sock_id: str) -> Sock:
        async with self._classified("get", sock_id=sock_id):
            row = await self._repository.get_sock(sock_id)
            if row is None:
                raise NotFoundError(resource="sock", resource_id=sock_id)
            return to_sock(row)

    async def tags(self) -> List[str]:
        async with self._classified("tags"):
            return await self._repository.distinct_tags()

    async def health(self) -> List[HealthEntry]:
        now = datetime.now(timezone.utc)
        try:
            reachable = await asyncio.wait_for(
                self._repository.ping(), timeout=self._health_timeout
            )
            db_status = HEALTHY if reachable else UNHEALTHY
        except asyncio.TimeoutError:
            db_status = UNHEALTHY
            logger.warning(
                "Health check: store probe exceeded %.1fs", self._health_timeout
            )
        except Exception as e:
            db_status = UNHEALTHY
            logger.warning("Health check: store unreachable: %s", e)

        return [
            HealthEntry(service=self._service_name, status=HEALTHY, time=now),
            HealthEntry(service=f"{self._service_name}-db", status=db_status, time=now),
        ]
