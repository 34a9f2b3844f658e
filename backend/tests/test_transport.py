"""
Catalogue Service — HTTP Transport Tests
==========================================

What:  The full app over HTTP: routing, query decoding, JSON shapes, error
       mapping, health, metrics exposition and static images.
How:   httpx AsyncClient over ASGITransport against create_app(); the service
       is either the real SQL-backed one over a seeded SQLite store or an
       AsyncMock when a specific failure is needed.

What we test:
    ✅ The two-sock scenario end to end (list, get, size, tags)
    ✅ Query aliases and defaults
    ✅ 400 for malformed pagination/order, 404 for unknown ids and routes
    ✅ 405 for unsupported methods
    ✅ 503 / 500 mapping with generic server-error messages
    ✅ /health, /healthz, /metrics, /catalogue/images
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from catalogue.config import Settings
from catalogue.exceptions import InternalError, UnavailableError
from catalogue.repositories.sock_repository import SockRepository
from catalogue.schemas.sock import HealthEntry
from catalogue.services.base import CatalogueService
from catalogue.services.catalogue_service import SQLCatalogueService
from tests.sample_data import E2E_CATALOGUE


@pytest_asyncio.fixture
async def client(session_factory, seed_store, make_client):
    await seed_store(session_factory, E2E_CATALOGUE)
    return await make_client(SQLCatalogueService(SockRepository(session_factory)))


@pytest_asyncio.fixture
async def catalogue_client(catalogue_factory, make_client):
    return await make_client(SQLCatalogueService(SockRepository(catalogue_factory)))


@pytest.fixture
def failing_service():
    return AsyncMock(spec=CatalogueService)


class TestScenario:

    @pytest.mark.asyncio
    async def test_filter_by_tag(self, client):
        response = await client.get("/catalogue", params={"tags": "red"})

        assert response.status_code == 200
        body = response.json()
        assert [sock["id"] for sock in body] == ["1"]
        assert set(body[0]) == {"id", "name", "description", "imageUrl", "price", "count", "tag"}
        assert body[0]["imageUrl"] == ["red_1.jpeg"]
        assert body[0]["tag"] == ["red", "warm"]

    @pytest.mark.asyncio
    async def test_and_filter_across_two_tags(self, client):
        response = await client.get("/catalogue", params={"tags": "red,blue"})
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_get_known_sock(self, client):
        response = await client.get("/catalogue/2")

        assert response.status_code == 200
        assert response.json()["name"] == "Cool blue"

    @pytest.mark.asyncio
    async def test_get_unknown_sock(self, client):
        response = await client.get("/catalogue/99")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["status_code"] == 404
        assert "99" in body["message"]

    @pytest.mark.asyncio
    async def test_size(self, client):
        response = await client.get("/catalogue/size", params={"tags": "blue"})

        assert response.status_code == 200
        assert response.json() == {"size": 1}

    @pytest.mark.asyncio
    async def test_size_without_tags(self, client):
        response = await client.get("/catalogue/size")
        assert response.json() == {"size": 2}

    @pytest.mark.asyncio
    async def test_tags(self, client):
        response = await client.get("/tags")

        assert response.status_code == 200
        assert response.json() == {"tags": ["blue", "red", "warm"]}


class TestQueryDecoding:

    @pytest.mark.asyncio
    async def test_default_page_size_is_ten(self, session_factory, seed_store, make_client):
        await seed_store(session_factory, [{"id": f"{i:02d}", "tags": []} for i in range(15)])
        client = await make_client(SQLCatalogueService(SockRepository(session_factory)))

        first = await client.get("/catalogue")
        second = await client.get("/catalogue", params={"pageNum": 2})

        assert len(first.json()) == 10
        assert len(second.json()) == 5

    @pytest.mark.asyncio
    async def test_order_and_pagination(self, catalogue_client):
        response = await catalogue_client.get(
            "/catalogue", params={"order": "price", "pageNum": 2, "pageSize": 3}
        )
        assert [sock["id"] for sock in response.json()] == ["a0a4f044", "510a0d7e", "837ab141"]

    @pytest.mark.asyncio
    async def test_aliases(self, catalogue_client):
        canonical = await catalogue_client.get(
            "/catalogue", params={"order": "price", "pageNum": 2, "pageSize": 3}
        )
        aliased = await catalogue_client.get(
            "/catalogue", params={"sort": "price", "page": 2, "size": 3}
        )
        assert aliased.json() == canonical.json()

    @pytest.mark.asyncio
    async def test_blank_tags_are_ignored(self, catalogue_client):
        response = await catalogue_client.get("/catalogue/size", params={"tags": "blue,,"})
        assert response.json() == {"size": 4}

    @pytest.mark.asyncio
    async def test_huge_page_number_is_an_empty_page(self, catalogue_client):
        response = await catalogue_client.get("/catalogue", params={"pageNum": str(10**18)})

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_huge_page_size_returns_everything(self, catalogue_client):
        response = await catalogue_client.get("/catalogue", params={"pageSize": str(10**20)})

        assert response.status_code == 200
        assert len(response.json()) == 9

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params,field",
        [
            ({"pageNum": "0"}, "pageNum"),
            ({"pageNum": "abc"}, "pageNum"),
            ({"pageSize": "-1"}, "pageSize"),
            ({"size": "ten"}, "pageSize"),
            ({"order": "colour"}, "order"),
        ],
    )
    async def test_invalid_arguments(self, catalogue_client, params, field):
        response = await catalogue_client.get("/catalogue", params=params)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "invalid_argument"
        assert body["details"] == {"field": field}


class TestRoutingErrors:

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/nothing/here")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_method_not_allowed(self, client):
        response = await client.post("/catalogue")

        assert response.status_code == 405
        assert response.json()["error"] == "http_error"


class TestServerErrors:

    @pytest.mark.asyncio
    async def test_unavailable_store_is_503(self, failing_service, make_client):
        failing_service.count.side_effect = UnavailableError(context={"operation": "count"})
        client = await make_client(failing_service)

        response = await client.get("/catalogue/size")

        assert response.status_code == 503
        body = response.json()
        assert body["error"] == "unavailable"
        assert "details" not in body

    @pytest.mark.asyncio
    async def test_internal_error_is_generic_500(self, failing_service, make_client):
        failing_service.tags.side_effect = InternalError(
            context={"operation": "tags", "error_type": "ValueError"}
        )
        client = await make_client(failing_service)

        response = await client.get("/tags")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_error"
        assert "ValueError" not in response.text

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_500(self, failing_service, make_client):
        failing_service.list.side_effect = RuntimeError("secret detail")
        client = await make_client(failing_service, raise_app_exceptions=False)

        response = await client.get("/catalogue")

        assert response.status_code == 500
        assert response.json()["error"] == "internal_error"
        assert "secret detail" not in response.text


class TestOperationalRoutes:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/health", "/healthz"])
    async def test_health(self, client, path):
        response = await client.get(path)

        assert response.status_code == 200
        health = response.json()["health"]
        assert [entry["service"] for entry in health] == ["catalogue", "catalogue-db"]
        assert all(entry["status"] == "healthy" for entry in health)

    @pytest.mark.asyncio
    async def test_health_reports_unreachable_store_with_200(self, failing_service, make_client):
        now = datetime.now(timezone.utc)
        failing_service.health.return_value = [
            HealthEntry(service="catalogue", status="healthy", time=now),
            HealthEntry(service="catalogue-db", status="unhealthy", time=now),
        ]
        client = await make_client(failing_service)

        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["health"][1]["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_metrics_exposition(self, client):
        await client.get("/catalogue")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "http_request_duration_seconds" in response.text
        assert "catalogue_service_request_duration_seconds" in response.text

    @pytest.mark.asyncio
    async def test_images_are_served(self, tmp_path, make_client, session_factory):
        (tmp_path / "red_1.jpeg").write_bytes(b"\xff\xd8\xff")
        image_client = await make_client(
            SQLCatalogueService(SockRepository(session_factory)),
            config=Settings(images_path=str(tmp_path)),
        )

        response = await image_client.get("/catalogue/images/red_1.jpeg")
        missing = await image_client.get("/catalogue/images/none.jpeg")

        assert response.status_code == 200
        assert response.content == b"\xff\xd8\xff"
        assert missing.status_code == 404
