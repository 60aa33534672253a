import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tareas_api.config import settings
from tareas_api.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["status"])


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/db-status")
async def db_status(db: AsyncSession = Depends(get_db)):
    """Round-trip to the database and report what answered."""
    try:
        result = await db.execute(text("SELECT CURRENT_TIMESTAMP"))
        connection_time = result.scalar_one()
        version_info = db.get_bind().dialect.server_version_info or ()
    except SQLAlchemyError as exc:
        logger.exception("Database status check failed")
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "database_type": settings.DB_TYPE,
                "error": type(exc).__name__,
                "message": "Database connection failed",
            },
        )

    dialect = db.get_bind().dialect.name
    return {
        "status": "connected",
        "database_type": settings.DB_TYPE,
        "connection_time": str(connection_time),
        "database_version": f"{dialect} {'.'.join(str(part) for part in version_info)}".strip(),
        "message": f"Connected to {settings.DB_TYPE.upper()} database",
    }
