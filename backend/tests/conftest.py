"""
Catalogue Service — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets its own in-memory SQLite store (aiosqlite driver,
       StaticPool so every session shares the one connection), seeded from
       plain dicts.

Fixture Hierarchy:
    ├── engine / session_factory: empty store with the catalogue schema
    ├── seed_store: async helper inserting socks (and their tags)
    ├── catalogue_factory: store seeded with CATALOGUE
    ├── repository / service: SockRepository and SQLCatalogueService over it
    ├── mock_repository: AsyncMock standing in for SockRepository
    └── make_client: builds an app around a service and returns an httpx client
"""

import os

# Override settings BEFORE any catalogue imports so the module-level engine
# never points at a production DSN
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Dict, List, Optional
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from catalogue.config import Settings, settings
from catalogue.database import Base
from catalogue.metrics import Metrics
from catalogue.models.sock import Sock, Tag
from catalogue.repositories.sock_repository import SockRepository
from catalogue.services.catalogue_service import SQLCatalogueService
from tests.sample_data import CATALOGUE


@pytest_asyncio.fixture
async def engine():
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def seed_store():
    """
    Returns `seed(factory, socks)` inserting each dict of `socks`.

    Keys: id, tags (required); name, description, price, count, images.
    """

    async def seed(factory: async_sessionmaker, socks: List[Dict]) -> None:
        tags: Dict[str, Tag] = {}
        async with factory() as session:
            for data in socks:
                for name in data["tags"]:
                    tags.setdefault(name, Tag(name=name))
                images = list(data.get("images", []))
                session.add(
                    Sock(
                        sock_id=data["id"],
                        name=data.get("name", f"sock {data['id']}"),
                        description=data.get("description", ""),
                        price=data.get("price", 1.0),
                        count=data.get("count", 1),
                        image_url_1=images[0] if len(images) > 0 else None,
                        image_url_2=images[1] if len(images) > 1 else None,
                        tags=[tags[name] for name in data["tags"]],
                    )
                )
            await session.commit()

    return seed


@pytest_asyncio.fixture
async def catalogue_factory(session_factory, seed_store):
    await seed_store(session_factory, CATALOGUE)
    return session_factory


@pytest.fixture
def repository(catalogue_factory):
    return SockRepository(catalogue_factory)


@pytest.fixture
def service(repository):
    return SQLCatalogueService(repository, health_timeout=1.0)


@pytest.fixture
def mock_repository():
    """SockRepository stand-in; every method is an AsyncMock."""
    return AsyncMock(spec=SockRepository)


@pytest_asyncio.fixture
async def make_client():
    """
    Returns `make(service, metrics=None, config=None, raise_app_exceptions=True)`.

    Usage:
        client = await make_client(service)
        response = await client.get("/catalogue")
    """
    from catalogue.main import create_app

    clients: List[AsyncClient] = []

    async def make(
        service,
        metrics: Optional[Metrics] = None,
        config: Optional[Settings] = None,
        raise_app_exceptions: bool = True,
    ) -> AsyncClient:
        app = create_app(service, metrics=metrics or Metrics(), config=config or settings)
        transport = ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions)
        client = AsyncClient(transport=transport, base_url="http://test")
        clients.append(client)
        return client

    yield make

    for client in clients:
        await client.aclose()
