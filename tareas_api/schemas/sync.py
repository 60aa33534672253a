import enum
from datetime import date, time
from typing import Any

from pydantic import Field, field_validator

from tareas_api.schemas.common import WireModel
from tareas_api.schemas.tarea import TareaFields, TareaResponse


class ConflictType(str, enum.Enum):
    UPDATE_CONFLICT = "UPDATE_CONFLICT"
    NOT_FOUND = "NOT_FOUND"


class SyncTareaIn(TareaFields):
    """One task as the mobile app holds it locally.

    ``id_api`` is the client's idea of the server id; it is empty for tasks
    created offline. Unknown keys (the client's own local id, etc.) are ignored.
    """

    id_api: int | None = None
    nombre: str | None = None
    descripcion: str | None = None
    fecha_asignacion: date | None = None
    hora_asignacion: time | None = None
    fecha_entrega: date | None = None
    hora_entrega: time | None = None
    finalizada: bool | None = None
    prioridad: int | None = None
    updated_at: int | None = None
    deleted: bool = False

    @field_validator("id_api", mode="before")
    @classmethod
    def blank_id_as_none(cls, value):
        # Lax int parsing would turn true into id 1
        if isinstance(value, bool):
            raise ValueError("idApi must be an integer")
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("deleted", mode="before")
    @classmethod
    def null_deleted_as_false(cls, value):
        return False if value is None else value


class SyncConflict(WireModel):
    task_id: int
    client_version: dict[str, Any]
    server_version: TareaResponse | None
    conflict_type: ConflictType


class SyncResponse(WireModel):
    updated_tasks: list[TareaResponse] = Field(default_factory=list)
    conflicts: list[SyncConflict] = Field(default_factory=list)
