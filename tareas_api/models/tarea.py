import enum
from datetime import date, datetime, time

from sqlalchemy import BigInteger, Boolean, Date, DateTime, ForeignKey, Integer, String, Text, Time, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tareas_api.models.base import Base


class Prioridad(enum.IntEnum):
    BAJA = 1
    MEDIA = 2
    ALTA = 3

    @classmethod
    def parse(cls, value) -> int:
        """Map a client supplied priority to its stored integer.

        Accepts 1/2/3, the Spanish labels used by the mobile app and their
        English equivalents. Anything else falls back to MEDIA.
        """
        if isinstance(value, bool):
            return cls.MEDIA.value
        if isinstance(value, int):
            return value if value in cls._value2member_map_ else cls.MEDIA.value
        if isinstance(value, str):
            label = value.strip().lower()
            if label.isdigit():
                return cls.parse(int(label))
            return _PRIORITY_LABELS.get(label, cls.MEDIA).value
        return cls.MEDIA.value


_PRIORITY_LABELS = {
    "baja": Prioridad.BAJA,
    "media": Prioridad.MEDIA,
    "alta": Prioridad.ALTA,
    "low": Prioridad.BAJA,
    "medium": Prioridad.MEDIA,
    "high": Prioridad.ALTA,
}


class Tarea(Base):
    __tablename__ = "tareas"

    usuario_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    nombre: Mapped[str] = mapped_column(String(255), nullable=False)
    descripcion: Mapped[str] = mapped_column(Text, nullable=False)
    fecha_asignacion: Mapped[date] = mapped_column(Date, nullable=False)
    hora_asignacion: Mapped[time] = mapped_column(Time, nullable=False)
    fecha_entrega: Mapped[date | None] = mapped_column(Date)
    hora_entrega: Mapped[time | None] = mapped_column(Time)
    finalizada: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    prioridad: Mapped[int] = mapped_column(Integer, nullable=False, default=Prioridad.MEDIA.value)  # 1=baja, 2=media, 3=alta

    # Sync bookkeeping
    pending_sync: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[int] = mapped_column(BigInteger, nullable=False)  # epoch milliseconds
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    usuario: Mapped["User"] = relationship(back_populates="tareas")  # noqa: F821
