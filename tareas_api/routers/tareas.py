from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tareas_api.database import get_db
from tareas_api.dependencies import get_current_user
from tareas_api.models.user import User
from tareas_api.schemas.sync import SyncResponse
from tareas_api.schemas.tarea import TareaCreate, TareaDeleteResponse, TareaResponse, TareaUpdate
from tareas_api.services import sync_service, tarea_service

router = APIRouter(prefix="/tareas", tags=["tareas"])


@router.get("", response_model=list[TareaResponse])
async def list_tareas(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await tarea_service.get_tareas(db, user.id)


@router.post("", response_model=TareaResponse, status_code=201)
async def create_tarea(
    data: TareaCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tarea = await tarea_service.create_tarea(db, user.id, data.model_dump())
    await db.commit()
    return tarea


@router.post("/sync", response_model=SyncResponse)
async def sync_tareas(
    records: list[dict[str, Any]],
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Reconcile the mobile app's local task list with the server.

    The batch is committed before the response is built, so a failed commit
    is a 500 and none of the batch is kept.
    """
    result = await sync_service.reconcile(db, user.id, records)
    await db.commit()
    return result


@router.put("/{tarea_id}", response_model=TareaResponse)
async def update_tarea(
    tarea_id: int,
    data: TareaUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tarea = await tarea_service.update_tarea(
        db, user.id, tarea_id, data.model_dump(exclude_unset=True)
    )
    if tarea is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tarea not found")
    await db.commit()
    return tarea


@router.delete("/{tarea_id}", response_model=TareaDeleteResponse)
async def delete_tarea(
    tarea_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    tarea = await tarea_service.soft_delete_tarea(db, user.id, tarea_id)
    if tarea is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tarea not found")
    await db.commit()
    return TareaDeleteResponse(
        message="Tarea deleted",
        tarea=TareaResponse.model_validate(tarea),
    )
