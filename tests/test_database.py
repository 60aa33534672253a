from sqlalchemy.ext.asyncio import AsyncEngine

from tareas_api.config import Settings
from tareas_api.database import build_engine, build_session_factory, resolve_database_url


def test_vercel_uses_database_url():
    config = Settings(DB_TYPE="vercel", DATABASE_URL="postgresql+asyncpg://u:p@db.example.com:5432/tareas")
    url = resolve_database_url(config)
    assert url.host == "db.example.com"
    assert url.database == "tareas"
    assert url.drivername == "postgresql+asyncpg"


def test_aws_builds_url_from_parts():
    config = Settings(
        DB_TYPE="aws",
        AWS_DB_HOST="rds.amazonaws.com",
        AWS_DB_PORT=6543,
        AWS_DB_USER="admin",
        AWS_DB_PASSWORD="p@ss:word",
        AWS_DB_NAME="tareas_prod",
    )
    url = resolve_database_url(config)
    assert url.drivername == "postgresql+asyncpg"
    assert url.host == "rds.amazonaws.com"
    assert url.port == 6543
    assert url.username == "admin"
    assert url.password == "p@ss:word"
    assert url.database == "tareas_prod"


async def test_engine_lifecycle():
    engine = build_engine(Settings(DATABASE_URL="sqlite+aiosqlite:///:memory:"))
    assert isinstance(engine, AsyncEngine)

    session_factory = build_session_factory(engine)
    async with session_factory() as session:
        assert session.bind is engine

    await engine.dispose()
