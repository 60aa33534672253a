import logging
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from sqlalchemy import text

from tareas_api.config import settings
from tareas_api.database import build_engine, build_session_factory

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize Sentry
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=0.2 if settings.ENVIRONMENT == "production" else 1.0,
        send_default_pii=False,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: build the connection pool and verify it answers
    engine = build_engine(settings)
    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))

    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    logger.info("Database pool ready")

    yield

    # Shutdown
    await engine.dispose()
    logger.info("Database pool closed")


app = FastAPI(
    title="Tareas API",
    version="0.1.0",
    lifespan=lifespan,
)

# Middleware
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
)

from tareas_api.middleware.error_handler import register_error_handlers  # noqa: E402

register_error_handlers(app)

# Routers
from tareas_api.routers.auth import router as auth_router  # noqa: E402
from tareas_api.routers.status import router as status_router  # noqa: E402
from tareas_api.routers.tareas import router as tareas_router  # noqa: E402

app.include_router(auth_router)
app.include_router(tareas_router)
app.include_router(status_router)
