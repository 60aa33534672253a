"""Reconcile a mobile client's offline task list with the server.

Each record of the batch is handled on its own, in the order received:

* no ``idApi``: the task was created offline and is inserted for the caller;
* ``idApi`` of one of the caller's tasks and ``deleted``: soft delete, always;
* otherwise last-write-wins on ``updatedAt``. A newer client record
  overwrites the server row and its timestamp is adopted as is; a newer
  server row is left alone and reported back as a conflict; equal
  timestamps mean both sides already agree.

Replaying a batch is therefore a no-op the second time around. The caller
owns the transaction: if any write fails the whole batch is rolled back.
"""
import logging
from typing import Any, Literal

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from tareas_api.config import settings
from tareas_api.models.tarea import Tarea
from tareas_api.naming import to_storage_convention, to_wire_convention
from tareas_api.schemas.sync import ConflictType, SyncConflict, SyncResponse, SyncTareaIn
from tareas_api.schemas.tarea import TareaResponse
from tareas_api.services import tarea_service

logger = logging.getLogger(__name__)

UnmatchedPolicy = Literal["skip", "report"]


async def reconcile(
    db: AsyncSession,
    usuario_id: int,
    records: list[dict[str, Any]],
    unmatched_policy: UnmatchedPolicy | None = None,
) -> SyncResponse:
    policy = unmatched_policy or settings.SYNC_UNMATCHED_POLICY
    result = SyncResponse()

    logger.info("Sync for usuario %s: %d records received", usuario_id, len(records))

    for position, raw in enumerate(records):
        client_version = to_wire_convention(raw)
        try:
            incoming = SyncTareaIn.model_validate(to_storage_convention(client_version))
        except ValidationError as exc:
            logger.warning(
                "Sync record %d for usuario %s is invalid, skipping: %s",
                position, usuario_id, exc.errors(include_url=False),
            )
            continue

        if not incoming.id_api:
            await _create(db, usuario_id, position, incoming, result)
            continue

        tarea = await tarea_service.get_tarea(
            db, usuario_id, incoming.id_api, include_deleted=True
        )
        if tarea is None:
            logger.warning(
                "Sync record %d references tarea %s unknown for usuario %s",
                position, incoming.id_api, usuario_id,
            )
            if policy == "report":
                result.conflicts.append(
                    SyncConflict(
                        task_id=incoming.id_api,
                        client_version=client_version,
                        server_version=None,
                        conflict_type=ConflictType.NOT_FOUND,
                    )
                )
            continue

        if incoming.deleted:
            await _delete(db, tarea)
            continue

        await _resolve(db, tarea, incoming, client_version, result)

    logger.info(
        "Sync for usuario %s done: %d updated, %d conflicts",
        usuario_id, len(result.updated_tasks), len(result.conflicts),
    )
    return result


async def _create(
    db: AsyncSession,
    usuario_id: int,
    position: int,
    incoming: SyncTareaIn,
    result: SyncResponse,
) -> None:
    if incoming.deleted:
        # Created and deleted offline; the server never knew about it.
        logger.debug("Sync record %d is new and already deleted, skipping", position)
        return
    if not incoming.nombre:
        logger.warning("Sync record %d has no nombre, skipping", position)
        return

    data = incoming.model_dump(include=set(tarea_service.MUTABLE_FIELDS))
    data["descripcion"] = data["descripcion"] or ""
    tarea = await tarea_service.create_tarea(db, usuario_id, data)
    result.updated_tasks.append(TareaResponse.model_validate(tarea))


async def _delete(db: AsyncSession, tarea: Tarea) -> None:
    if tarea.deleted:
        logger.debug("Tarea %s already deleted", tarea.id)
        return
    tarea_service.mark_deleted(tarea)
    await db.flush()
    logger.debug("Tarea %s deleted by sync", tarea.id)


async def _resolve(
    db: AsyncSession,
    tarea: Tarea,
    incoming: SyncTareaIn,
    client_version: dict[str, Any],
    result: SyncResponse,
) -> None:
    client_ts = incoming.updated_at or 0
    server_ts = tarea.updated_at

    if client_ts > server_ts:
        data = incoming.model_dump(
            include=set(tarea_service.MUTABLE_FIELDS), exclude_unset=True
        )
        tarea_service.apply_fields(tarea, data)
        tarea.updated_at = client_ts
        await db.flush()
        await db.refresh(tarea)
        result.updated_tasks.append(TareaResponse.model_validate(tarea))
        logger.debug("Tarea %s: client wins (%d > %d)", tarea.id, client_ts, server_ts)
    elif server_ts > client_ts:
        result.conflicts.append(
            SyncConflict(
                task_id=tarea.id,
                client_version=client_version,
                server_version=TareaResponse.model_validate(tarea),
                conflict_type=ConflictType.UPDATE_CONFLICT,
            )
        )
        logger.debug("Tarea %s: server wins (%d > %d)", tarea.id, server_ts, client_ts)
    else:
        logger.debug("Tarea %s unchanged", tarea.id)
