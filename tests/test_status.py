import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.mark.asyncio
async def test_health(anon_client):
    response = await anon_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_db_status_reports_connection(anon_client):
    response = await anon_client.get("/db-status")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "connected"
    assert data["database_type"] == "vercel"
    assert data["connection_time"]
    assert data["database_version"].startswith("sqlite")


@pytest.mark.asyncio
async def test_db_status_reports_failure(anon_client, monkeypatch):
    async def failing_execute(self, *args, **kwargs):
        raise OperationalError("SELECT CURRENT_TIMESTAMP", {}, Exception("connection refused"))

    monkeypatch.setattr(AsyncSession, "execute", failing_execute)

    response = await anon_client.get("/db-status")
    assert response.status_code == 500
    assert response.json() == {
        "status": "error",
        "database_type": "vercel",
        "error": "OperationalError",
        "message": "Database connection failed",
    }
