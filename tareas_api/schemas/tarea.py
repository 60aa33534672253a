from datetime import date, datetime, time

from pydantic import Field, field_validator

from tareas_api.models.tarea import Prioridad
from tareas_api.schemas.common import WireModel


class TareaFields(WireModel):
    """Validators shared by every inbound task payload."""

    @field_validator(
        "fecha_asignacion", "hora_asignacion", "fecha_entrega", "hora_entrega",
        mode="before", check_fields=False,
    )
    @classmethod
    def blank_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("prioridad", mode="before", check_fields=False)
    @classmethod
    def parse_prioridad(cls, value):
        return Prioridad.parse(value)


class TareaCreate(TareaFields):
    nombre: str = Field(min_length=1, max_length=255)
    descripcion: str = Field(min_length=1)
    fecha_asignacion: date | None = None
    hora_asignacion: time | None = None
    fecha_entrega: date | None = None
    hora_entrega: time | None = None
    finalizada: bool | None = None
    prioridad: int = Prioridad.MEDIA.value


class TareaUpdate(TareaFields):
    nombre: str | None = Field(default=None, min_length=1, max_length=255)
    descripcion: str | None = Field(default=None, min_length=1)
    fecha_asignacion: date | None = None
    hora_asignacion: time | None = None
    fecha_entrega: date | None = None
    hora_entrega: time | None = None
    finalizada: bool | None = None
    prioridad: int | None = None


class TareaResponse(WireModel):
    id: int
    usuario_id: int
    nombre: str
    descripcion: str
    fecha_asignacion: date
    hora_asignacion: time
    fecha_entrega: date | None
    hora_entrega: time | None
    finalizada: bool
    prioridad: int
    pending_sync: bool
    updated_at: int
    deleted: bool
    deleted_at: datetime | None
    created_at: datetime | None


class TareaDeleteResponse(WireModel):
    message: str
    tarea: TareaResponse
