"""
Catalogue Service — FastAPI Application Factory
=================================================

What:  Assembles the store, service chain, endpoints, routes, middleware and
       exception handlers into one ASGI app.
How:   create_app() builds everything from explicit collaborators; the
       module-level `app` is the production instance uvicorn serves
       (`uvicorn catalogue.main:app`).

Application Architecture:
    ┌───────────────────────────────────────────────────────────┐
    │  RequestObservabilityMiddleware (skips /health, /healthz) │
    │  ┌─────────────────────────────────────────────────────┐  │
    │  │ Routes: /catalogue  /catalogue/size  /catalogue/{id}│  │
    │  │         /tags  /health  /healthz  /metrics  images  │  │
    │  └──────────────────────────┬──────────────────────────┘  │
    │                      Endpoints (spans)                    │
    │                             │                             │
    │       LoggingMiddleware → InstrumentingMiddleware →       │
    │              SQLCatalogueService → SockRepository         │
    │                                                           │
    │  Exception Handlers:                                      │
    │   InvalidArgument→400  NotFound→404  Unavailable→503      │
    │   Internal→500  unmatched route→404  anything else→500    │
    └───────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, log the image directory, ping the store
              (logged only; an unreachable store never stops startup)
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from opentelemetry import trace
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalogue import __version__
from catalogue.config import Settings, settings
from catalogue.database import async_session_factory, dispose_engine, ping_engine
from catalogue.endpoints import make_endpoints
from catalogue.exceptions import (
    CatalogueError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    UnavailableError,
)
from catalogue.metrics import Metrics
from catalogue.middleware.observability import RequestObservabilityMiddleware
from catalogue.repositories.sock_repository import SockRepository
from catalogue.routes.catalogue import make_router
from catalogue.routes.health import make_health_router
from catalogue.services import (
    CatalogueService,
    SQLCatalogueService,
    chain,
    instrumenting_middleware,
    logging_middleware,
)

logger = logging.getLogger(__name__)

# Single source of truth for the error → status mapping
STATUS_CODES = {
    InvalidArgumentError: 400,
    NotFoundError: 404,
    UnavailableError: 503,
    InternalError: 500,
}

IMAGES_ROUTE = "/catalogue/images"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = settings.log_level) -> None:
    """
    Configure stdout logging for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] catalogue.service: method=Get id=1 ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Quieten per-request noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Catalogue service %s starting up...", __version__)

    images = Path(settings.images_path)
    logger.info("Images: %s (resolved: %s)", settings.images_path, images.resolve())
    if images.is_dir():
        logger.info("Image files: %s", sorted(p.name for p in images.iterdir()))
    else:
        logger.warning("Image directory %s does not exist", images.resolve())

    try:
        await ping_engine()
        logger.info("Store reachable")
    except Exception as e:
        logger.error("Store unreachable at startup: %s", e)

    logger.info("Serving on %s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Catalogue service shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(code: str, message: str, status_code: int, details: Optional[dict] = None) -> dict:
    body = {"error": code, "message": message, "status_code": status_code}
    if details:
        body["details"] = details
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to structured JSON error responses.

    Handler hierarchy:
        CatalogueError subclasses → STATUS_CODES (500 if unlisted)
        StarletteHTTPException    → its own status (unmatched route, bad method)
        Exception (fallback)      → 500

    Client errors (4xx) return the exception's message and context. Server
    errors return the generic message only; context is logged server-side.
    """

    @app.exception_handler(CatalogueError)
    async def handle_catalogue_error(request: Request, exc: CatalogueError):
        status_code = STATUS_CODES.get(type(exc), 500)
        if status_code >= 500:
            logger.error(
                "%s %s failed: %s | Context: %s",
                request.method, request.url.path, exc.message, exc.context,
            )
            details = None
        else:
            details = exc.context if isinstance(exc, InvalidArgumentError) else None
        return JSONResponse(
            status_code=status_code,
            content=error_body(exc.error_code, exc.message, status_code, details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        code = "not_found" if exc.status_code == 404 else "http_error"
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(code, str(exc.detail), exc.status_code),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body(
                "internal_error",
                "An unexpected error occurred. Please try again later.",
                500,
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def build_default_service(config: Settings = settings) -> CatalogueService:
    """SQLCatalogueService over the process-wide session factory."""
    return SQLCatalogueService(
        SockRepository(async_session_factory),
        health_timeout=config.health_probe_timeout,
        service_name=config.service_name,
    )


def create_app(
    service: Optional[CatalogueService] = None,
    *,
    metrics: Optional[Metrics] = None,
    tracer: Optional[trace.Tracer] = None,
    config: Settings = settings,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        service: Core CatalogueService; defaults to the SQL-backed one. It is
                 always wrapped in the logging and instrumenting middleware.
        metrics: Metrics sink shared by the HTTP and service layers
        tracer:  Tracer for endpoint spans; NoOpTracer unless tracing is enabled
        config:  Settings to read defaults from

    Returns: Fully configured FastAPI instance.
    """
    metrics = metrics or Metrics()
    if tracer is None:
        tracer = trace.get_tracer("catalogue") if config.tracing_enabled else trace.NoOpTracer()

    # ── Service domain ────────────────────────────────────────────────────
    core = service or build_default_service(config)
    wrapped = chain(core, logging_middleware(), instrumenting_middleware(metrics))

    # ── Endpoint domain ───────────────────────────────────────────────────
    endpoints = make_endpoints(wrapped, tracer)

    app = FastAPI(
        title="Catalogue API",
        description="Read-only sock catalogue: list, filter, paginate, count, tags and health.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.metrics = metrics

    app.add_middleware(RequestObservabilityMiddleware, metrics=metrics)

    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────────
    app.include_router(make_router(endpoints, default_page_size=config.default_page_size))
    app.include_router(make_health_router(endpoints))

    @app.get("/metrics", include_in_schema=False)
    async def metrics_exposition() -> Response:
        return Response(content=metrics.exposition(), media_type=metrics.content_type)

    images = Path(config.images_path)
    if images.is_dir():
        app.mount(IMAGES_ROUTE, StaticFiles(directory=str(images)), name="images")
    else:
        logger.warning("Image directory %s missing; %s not mounted", images, IMAGES_ROUTE)

    return app


app = create_app()
