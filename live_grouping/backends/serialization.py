"""Shared serialization utilities for backends."""

from dataclasses import asdict, fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def to_dict_shallow(obj: Any, exclude: tuple[str, ...] = ()) -> dict:
    """Convert a dataclass without recursing into nested dataclass fields.

    Uses ``dataclasses.fields()`` + ``getattr`` instead of ``asdict()``
    so list-of-dataclass fields (a tower's units) can be handled
    separately by the caller.
    """
    return {
        f.name: serialize_value(getattr(obj, f.name))
        for f in fields(obj)
        if f.name not in exclude
    }


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif is_dataclass(value) and not isinstance(value, type):
        return dataclass_to_dict(value)
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value
