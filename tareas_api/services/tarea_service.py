import logging
import time as _time
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tareas_api.models.tarea import Prioridad, Tarea

logger = logging.getLogger(__name__)

# Columns a client may change; usuario_id and the sync bookkeeping are server-owned.
MUTABLE_FIELDS = (
    "nombre",
    "descripcion",
    "fecha_asignacion",
    "hora_asignacion",
    "fecha_entrega",
    "hora_entrega",
    "finalizada",
    "prioridad",
)
# Mutable columns that are NOT NULL in the table
REQUIRED_FIELDS = {"nombre", "descripcion", "fecha_asignacion", "hora_asignacion", "finalizada", "prioridad"}


def now_ms() -> int:
    return int(_time.time() * 1000)


def next_timestamp(previous: int | None) -> int:
    """Server-side updated_at: wall clock, but always past the previous value."""
    current = now_ms()
    if previous is not None and current <= previous:
        return previous + 1
    return current


async def get_tareas(db: AsyncSession, usuario_id: int) -> list[Tarea]:
    result = await db.execute(
        select(Tarea)
        .where(Tarea.usuario_id == usuario_id, Tarea.deleted.is_(False))
        .order_by(Tarea.id.asc())
    )
    return list(result.scalars().all())


async def get_tarea(
    db: AsyncSession, usuario_id: int, tarea_id: int, include_deleted: bool = False
) -> Tarea | None:
    query = select(Tarea).where(Tarea.id == tarea_id, Tarea.usuario_id == usuario_id)
    if not include_deleted:
        query = query.where(Tarea.deleted.is_(False))
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def create_tarea(db: AsyncSession, usuario_id: int, data: dict) -> Tarea:
    """Insert a task for ``usuario_id`` filling in the server defaults.

    Missing assignment date/time become the current UTC date/time, priority
    falls back to MEDIA and ``finalizada`` to False.
    """
    now = datetime.now(timezone.utc)
    fields = {key: data.get(key) for key in MUTABLE_FIELDS}
    fields["fecha_asignacion"] = fields["fecha_asignacion"] or now.date()
    fields["hora_asignacion"] = fields["hora_asignacion"] or now.time().replace(microsecond=0)
    fields["finalizada"] = bool(fields["finalizada"]) if fields["finalizada"] is not None else False
    fields["prioridad"] = Prioridad.parse(fields["prioridad"])

    tarea = Tarea(
        usuario_id=usuario_id,
        **fields,
        pending_sync=False,
        updated_at=now_ms(),
        deleted=False,
        deleted_at=None,
    )
    db.add(tarea)
    await db.flush()
    await db.refresh(tarea)
    logger.debug("Created tarea %s for usuario %s", tarea.id, usuario_id)
    return tarea


def apply_fields(tarea: Tarea, data: dict) -> None:
    """Copy the client supplied mutable fields onto ``tarea``.

    Keys outside MUTABLE_FIELDS are ignored, and NOT NULL columns are never
    overwritten with None.
    """
    for key in MUTABLE_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if value is None and key in REQUIRED_FIELDS:
            continue
        if key == "prioridad":
            value = Prioridad.parse(value)
        setattr(tarea, key, value)


async def update_tarea(
    db: AsyncSession, usuario_id: int, tarea_id: int, data: dict
) -> Tarea | None:
    tarea = await get_tarea(db, usuario_id, tarea_id)
    if tarea is None:
        return None

    apply_fields(tarea, data)
    tarea.updated_at = next_timestamp(tarea.updated_at)

    await db.flush()
    await db.refresh(tarea)
    return tarea


def mark_deleted(tarea: Tarea) -> None:
    tarea.deleted = True
    tarea.deleted_at = datetime.now(timezone.utc)
    tarea.updated_at = next_timestamp(tarea.updated_at)


async def soft_delete_tarea(db: AsyncSession, usuario_id: int, tarea_id: int) -> Tarea | None:
    """Flag a task as deleted. The row stays in the table for sync."""
    tarea = await get_tarea(db, usuario_id, tarea_id)
    if tarea is None:
        return None

    mark_deleted(tarea)

    await db.flush()
    await db.refresh(tarea)
    logger.info("Soft deleted tarea %s for usuario %s", tarea_id, usuario_id)
    return tarea
