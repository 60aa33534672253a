"""Database engine and per-request sessions.

The engine is built once in the application lifespan and kept on
``app.state``; nothing in this module holds a process-wide pool.
"""
import logging
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from tareas_api.config import Settings, settings

logger = logging.getLogger(__name__)


def resolve_database_url(config: Settings = settings) -> URL:
    if config.DB_TYPE == "aws":
        return URL.create(
            "postgresql+asyncpg",
            username=config.AWS_DB_USER or None,
            password=config.AWS_DB_PASSWORD or None,
            host=config.AWS_DB_HOST or None,
            port=config.AWS_DB_PORT,
            database=config.AWS_DB_NAME or None,
        )
    return make_url(config.DATABASE_URL)


def build_engine(config: Settings = settings) -> AsyncEngine:
    url = resolve_database_url(config)
    kwargs: dict = {"pool_pre_ping": True}
    if url.get_backend_name() != "sqlite":
        kwargs.update(
            pool_size=config.DB_POOL_SIZE,
            max_overflow=config.DB_MAX_OVERFLOW,
            pool_timeout=config.DB_POOL_TIMEOUT,
            pool_recycle=config.DB_POOL_RECYCLE,
        )
    if config.DB_SSL:
        kwargs["connect_args"] = {"ssl": "require"}

    logger.info(
        "Connecting to %s database at %s",
        config.DB_TYPE.upper(),
        url.render_as_string(hide_password=True),
    )
    return create_async_engine(url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """One session and one transaction per request.

    Commits when the handler returns, rolls everything back if it raises.
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
