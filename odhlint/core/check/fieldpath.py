"""
Dotted field-path queries over unstructured objects.

    query(dsc, ".spec.components.kserve.managementState")

Absence (``FieldNotFoundError``) and misuse (``FieldPathError``) are
distinct: callers normalize absence into a domain value, misuse is a
programming error.
"""

from __future__ import annotations

from typing import Any


class FieldPathError(ValueError):
    """Malformed path, or a path that runs through a non-object value."""


class FieldNotFoundError(LookupError):
    """The path is well-formed but the field is absent."""


def _split(path: str) -> list[str]:
    if not isinstance(path, str) or not path.strip():
        raise FieldPathError("field path must be a non-empty string")
    parts = path.strip().lstrip(".").split(".")
    if any(not p for p in parts):
        raise FieldPathError(f"malformed field path {path!r}")
    return parts


def query(obj: dict[str, Any], path: str) -> Any:
    """Return the value at ``path`` inside ``obj``."""
    current: Any = obj
    walked: list[str] = []
    for part in _split(path):
        if current is None:
            raise FieldNotFoundError(f"{'.'.join(walked)} is null")
        if not isinstance(current, dict):
            raise FieldPathError(
                f"cannot read {part!r}: .{'.'.join(walked)} is {type(current).__name__}, not an object"
            )
        if part not in current:
            raise FieldNotFoundError(f"field .{'.'.join(walked + [part])} not found")
        current = current[part]
        walked.append(part)
    if current is None:
        raise FieldNotFoundError(f"field .{'.'.join(walked)} is null")
    return current


def query_string(obj: dict[str, Any], path: str) -> str:
    """Like ``query`` but the value must be a string."""
    value = query(obj, path)
    if not isinstance(value, str):
        raise FieldPathError(f"field {path} is {type(value).__name__}, expected string")
    return value


def query_default(obj: dict[str, Any], path: str, default: Any = None) -> Any:
    """Like ``query`` but returns ``default`` when the field is absent."""
    try:
        return query(obj, path)
    except FieldNotFoundError:
        return default
