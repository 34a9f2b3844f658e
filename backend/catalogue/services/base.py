"""
Catalogue Service — Service Contract
======================================

What:  Abstract base class every catalogue service implementation and every
       service middleware satisfies.
How:   Endpoints and middleware depend only on this contract. Concerns are
       added by wrapping one implementation in another (see `Middleware` and
       `chain`), never by subclassing a concrete service.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence

from catalogue.schemas.sock import HealthEntry, Sock


class CatalogueService(ABC):
    """
    Read-only operations over the sock catalogue.

    Contract:
        - list/count share the same AND tag filter; empty tags means no filter
        - list applies ordering then pagination; a page past the end is []
        - get raises NotFoundError for unknown ids
        - health never raises; dependency failures become status values
        - every other failure surfaces as a CatalogueError subclass
    """

    @abstractmethod
    async def list(
        self,
        tags: Sequence[str],
        order: Optional[str],
        page_num: int,
        page_size: int,
    ) -> List[Sock]:
        """
        Return one page of socks carrying every tag in `tags`.

        Raises:
            InvalidArgumentError: page_num < 1, page_size < 1 or unknown order
        """

    @abstractmethod
    async def count(self, tags: Sequence[str]) -> int:
        """Number of socks carrying every tag in `tags`."""

    @abstractmethod
    async def get(self, sock_id: str) -> Sock:
        """Return the sock with identifier `sock_id`."""

    @abstractmethod
    async def tags(self) -> List[str]:
        """Distinct tag names across all socks, in no particular order."""

    @abstractmethod
    async def health(self) -> List[HealthEntry]:
        """Best-effort status of the service and its store."""


Middleware = Callable[[CatalogueService], CatalogueService]


def chain(service: CatalogueService, *middlewares: Middleware) -> CatalogueService:
    """
    Wrap `service` in `middlewares`; the first one listed ends up outermost.

        chain(core, logging_middleware(), instrumenting_middleware(metrics))
        == LoggingMiddleware(InstrumentingMiddleware(core))
    """
    for middleware in reversed(middlewares):
        service = middleware(service)
    return service
