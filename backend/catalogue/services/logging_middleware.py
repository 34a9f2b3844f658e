"""
Catalogue Service — Logging Service Middleware
================================================

What:  A CatalogueService that logs every call made to the service it wraps.
How:   Each method starts a clock, delegates to the inner service with the
       arguments untouched and, in a finally block, emits exactly one line:

           method=List tags=red, warm order=price pageNum=1 pageSize=10
           result=3 err=None took=2.41ms

       Results are summarised (length, count or id), never dumped. Errors are
       logged by message and re-raised as the identical object; the log line is
       written on every exit path, including cancellation.

Log Level:
    INFO on success, WARNING when the inner call raised.
"""

import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Sequence

from catalogue.schemas.sock import HealthEntry, Sock
from catalogue.services.base import CatalogueService, Middleware

default_logger = logging.getLogger("catalogue.service")


class _Call:
    """Outcome of one delegated call, filled in while it runs."""

    __slots__ = ("result", "err")

    def __init__(self) -> None:
        self.result: Any = None
        self.err: Optional[BaseException] = None


class LoggingMiddleware(CatalogueService):
    """Logs method, parameters, result summary, error and elapsed time."""

    def __init__(self, next_service: CatalogueService, logger: Optional[logging.Logger] = None):
        self.next = next_service
        self.logger = logger or default_logger

    @contextmanager
    def _logged(self, method: str, **params: Any) -> Iterator[_Call]:
        call = _Call()
        begin = time.perf_counter()
        try:
            yield call
        except BaseException as exc:
            call.err = exc
            raise
        finally:
            took_ms = (time.perf_counter() - begin) * 1000
            fields = {"method": method, **params, "result": call.result, "err": call.err, "took": f"{took_ms:.2f}ms"}
            self.logger.log(
                logging.WARNING if call.err is not None else logging.INFO,
                " ".join(f"{key}={_render(value)}" for key, value in fields.items()),
                extra={
                    "service_method": method,
                    "params": params,
                    "result": call.result,
                    "err": None if call.err is None else str(call.err),
                    "duration_ms": round(took_ms, 2),
                },
            )

    async def list(
        self,
        tags: Sequence[str],
        order: Optional[str],
        page_num: int,
        page_size: int,
    ) -> List[Sock]:
        with self._logged(
            "List",
            tags=", ".join(tags),
            order=order,
            pageNum=page_num,
            pageSize=page_size,
        ) as call:
            socks = await self.next.list(tags, order, page_num, page_size)
            call.result = len(socks)
            return socks

    async def count(self, tags: Sequence[str]) -> int:
        with self._logged("Count", tags=", ".join(tags)) as call:
            n = await self.next.count(tags)
            call.result = n
            return n

    async def get(self, sock_id: str) -> Sock:
        with self._logged("Get", id=sock_id) as call:
            sock = await self.next.get(sock_id)
            call.result = sock.id
            return sock

    async def tags(self) -> List[str]:
        with self._logged("Tags") as call:
            tags = await self.next.tags()
            call.result = len(tags)
            return tags

    async def health(self) -> List[HealthEntry]:
        with self._logged("Health") as call:
            health = await self.next.health()
            call.result = len(health)
            return health


def _render(value: Any) -> str:
    if isinstance(value, BaseException):
        return str(value) or type(value).__name__
    return str(value)


def logging_middleware(logger: Optional[logging.Logger] = None) -> Middleware:
    """Middleware factory: `logging_middleware()(service)` wraps `service`."""

    def wrap(next_service: CatalogueService) -> CatalogueService:
        return LoggingMiddleware(next_service, logger)

    return wrap
