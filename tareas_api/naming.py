"""Key naming conversion between the API and the database.

Mobile clients speak camelCase (``fechaAsignacion``), the ``tareas`` table
uses snake_case (``fecha_asignacion``). Only keys are rewritten; values are
returned untouched.
"""
import re
from typing import Any

_UPPER = re.compile(r"[A-Z]")
_UNDERSCORE_LETTER = re.compile(r"_([a-z])")


def camel_to_snake(key: str) -> str:
    """fechaAsignacion -> fecha_asignacion"""
    return _UPPER.sub(lambda m: f"_{m.group(0).lower()}", key)


def snake_to_camel(key: str) -> str:
    """fecha_asignacion -> fechaAsignacion"""
    return _UNDERSCORE_LETTER.sub(lambda m: m.group(1).upper(), key)


def _convert(value: Any, convert_key) -> Any:
    if isinstance(value, list):
        return [_convert(item, convert_key) for item in value]
    if isinstance(value, dict):
        return {
            convert_key(key) if isinstance(key, str) else key: (
                _convert(item, convert_key) if isinstance(item, (dict, list)) else item
            )
            for key, item in value.items()
        }
    return value


def to_storage_convention(value: Any) -> Any:
    """Rewrite every dict key in ``value`` to snake_case.

    Scalars and ``None`` pass through, lists are mapped element-wise and
    nested dicts are converted recursively.
    """
    return _convert(value, camel_to_snake)


def to_wire_convention(value: Any) -> Any:
    """Inverse of :func:`to_storage_convention`."""
    return _convert(value, snake_to_camel)
