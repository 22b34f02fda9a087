"""Shared serialization utilities for sinks."""

from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return dataclass_to_dict(obj)
    elif isinstance(obj, (dict, MappingProxyType)):
        return {k: serialize_value(v) for k, v in obj.items()}
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization.

    Private backing fields (``_features``, ``_owned_properties``...) are
    exported under their public name. Nested entities are reduced to their
    id so that sellers do not re-export every property they own.
    """
    result = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        result[f.name.lstrip("_")] = serialize_value(value, nested=True)
    return result


def serialize_value(value: Any, nested: bool = False) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif nested and hasattr(value, "entity_id"):
        return value.entity_id
    elif is_dataclass(value) and not isinstance(value, type):
        return dataclass_to_dict(value)
    elif isinstance(value, (dict, MappingProxyType)):
        return {k: serialize_value(v, nested) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v, nested) for v in value]
    elif isinstance(value, (set, frozenset)):
        return sorted(serialize_value(v, nested) for v in value)
    return value
