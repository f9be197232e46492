"""Tests for health endpoints."""

from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from edustats.core.database import get_db
from main import app


class FailingSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))


async def failing_get_db():
    yield FailingSession()


class TestHealth:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    async def test_database_health(self, client: AsyncClient, db: AsyncSession):
        response = await client.get("/health/db")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "database": "ok"}

    async def test_database_unreachable(self, client: AsyncClient):
        app.dependency_overrides[get_db] = failing_get_db

        response = await client.get("/health/db")

        assert response.status_code == 503
        assert response.json() == {"status": "error", "database": "unreachable"}

    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/api/v1/nothing-here")

        assert response.status_code == 404
