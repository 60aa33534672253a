from tareas_api.models.base import Base
from tareas_api.models.tarea import Prioridad, Tarea
from tareas_api.models.user import User

__all__ = [
    "Base",
    "Prioridad",
    "Tarea",
    "User",
]
