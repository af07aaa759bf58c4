"""Conversion of the documentation model into JSON-ready structures."""

import json
from dataclasses import fields, is_dataclass
from enum import Enum


def _is_empty(value) -> bool:
    return value is None or value is False or value == "" or (
        isinstance(value, (list, tuple, dict)) and len(value) == 0
    )


def to_dict(obj):
    """Recursively convert model objects into plain dicts and lists.

    Fields marked to be omitted when empty are left out instead of being
    emitted as empty values, back-references are dropped, and mappings are
    emitted in key order so the output is deterministic.

    Args:
        obj: Any model object, list, dict or scalar

    Returns:
        A structure made only of dicts, lists, strings, numbers and booleans
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        result = {}
        for f in fields(obj):
            if f.metadata.get("serialize", True) is False:
                continue
            value = getattr(obj, f.name)
            if f.metadata.get("omitempty") and _is_empty(value):
                continue
            result[f.metadata.get("name", f.name)] = to_dict(value)
        for name in getattr(type(obj), "computed_fields", ()):
            result[name] = to_dict(getattr(obj, name))
        return result
    if isinstance(obj, dict):
        return {str(key): to_dict(obj[key]) for key in sorted(obj)}
    if isinstance(obj, (list, tuple)):
        return [to_dict(item) for item in obj]
    if isinstance(obj, Enum):
        return obj.value
    return obj


def to_json(obj, indent: int = 4) -> str:
    """Serialize a model object to JSON text."""
    return json.dumps(to_dict(obj), indent=indent)
