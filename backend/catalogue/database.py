"""
Catalogue Service — Database Engine & Sessions
================================================

What:  Async SQLAlchemy engine, session factory and declarative base.
How:   The engine owns the connection pool; SockRepository opens one
       short-lived session per read through `async_session_factory`.
Who:   Used by the repository, the app factory (startup ping, shutdown
       disposal) and Alembic.

Connection Pooling Strategy:
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite URLs (tests, local runs) get SQLAlchemy's default pool for the
    dialect, which rejects the sizing arguments above.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from catalogue.config import Settings, settings


def build_engine(config: Settings) -> AsyncEngine:
    """Create an async engine for `config.database_url`."""
    options = {
        # Echo SQL queries in DEBUG mode for development visibility
        "echo": config.log_level == "DEBUG",
    }
    if not config.is_sqlite:
        options.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_pre_ping=config.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(config.database_url, **options)


# ── Engine & Session Factory ──────────────────────────────────────────────
# Creating the engine does not connect; the first checkout does.
engine = build_engine(settings)

# expire_on_commit=False: rows stay readable after the session closes
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all catalogue ORM models (shared metadata for Alembic)."""
    pass


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ping_engine(target: AsyncEngine = engine) -> None:
    """Run `SELECT 1` on a pooled connection; raises on failure."""
    async with target.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def dispose_engine() -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
