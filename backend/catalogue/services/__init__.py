# Services package init
"""
Catalogue Service — Services Layer
====================================

What:  The CatalogueService contract, its SQL-backed implementation and the
       middleware that wrap it.

Service Inventory:
    - CatalogueService (abstract): list / count / get / tags / health
    - SQLCatalogueService: validation + error classification over SockRepository
    - LoggingMiddleware: one structured log line per call
    - InstrumentingMiddleware: one histogram observation per call

Composition (outermost first):
    chain(SQLCatalogueService(repo), logging_middleware(), instrumenting_middleware(m))
"""

from catalogue.services.base import CatalogueService, Middleware, chain
from catalogue.services.catalogue_service import SQLCatalogueService
from catalogue.services.instrumenting_middleware import (
    InstrumentingMiddleware,
    instrumenting_middleware,
)
from catalogue.services.logging_middleware import LoggingMiddleware, logging_middleware

__all__ = [
    "CatalogueService",
    "Middleware",
    "chain",
    "SQLCatalogueService",
    "LoggingMiddleware",
    "logging_middleware",
    "InstrumentingMiddleware",
    "instrumenting_middleware",
]
