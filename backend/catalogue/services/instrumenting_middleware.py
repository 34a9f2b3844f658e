"""
Catalogue Service — Instrumenting Service Middleware
======================================================

What:  A CatalogueService that times every call to the service it wraps.
How:   Same shape as LoggingMiddleware: delegate unchanged, then in a finally
       block record `catalogue_service_request_duration_seconds{method, success}`.
       `success` is false whenever the inner call raised.
"""

import time
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence

from catalogue.metrics import Metrics
from catalogue.schemas.sock import HealthEntry, Sock
from catalogue.services.base import CatalogueService, Middleware


class InstrumentingMiddleware(CatalogueService):

    def __init__(self, next_service: CatalogueService, metrics: Metrics):
        self.next = next_service
        self.metrics = metrics

    @contextmanager
    def _timed(self, method: str) -> Iterator[None]:
        begin = time.perf_counter()
        success = False
        try:
            yield
            success = True
        finally:
            self.metrics.observe_call(method, success, time.perf_counter() - begin)

    async def list(
        self,
        tags: Sequence[str],
        order: Optional[str],
        page_num: int,
        page_size: int,
    ) -> List[Sock]:
        with self._timed("list"):
            return await self.next.list(tags, order, page_num, page_size)

    async def count(self, tags: Sequence[str]) -> int:
        with self._timed("count"):
            return await self.next.count(tags)

    async def get(self, sock_id: str) -> Sock:
        with self._timed("get"):
            return await self.next.get(sock_id)

    async def tags(self) -> List[str]:
        with self._timed("tags"):
            return await self.next.tags()

    async def health(self) -> List[HealthEntry]:
        with self._timed("health"):
            return await self.next.health()


def instrumenting_middleware(metrics: Metrics) -> Middleware:
    def wrap(next_service: CatalogueService) -> CatalogueService:
        return InstrumentingMiddleware(next_service, metrics)

    return wrap
