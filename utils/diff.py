# utils/diff.py
"""Diff a partial payload against a stored document.

Each field is compared according to its kind; only fields that are present,
valid for their kind and different from the stored value end up in the
returned patch.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from bson import ObjectId


class FieldKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    DATE = "date"
    REFERENCE = "reference"


def has_valid_change(new_value: Any, old_value: Any, kind: FieldKind = FieldKind.STRING) -> bool:
    if new_value is None:
        return False

    if kind is FieldKind.STRING:
        if not isinstance(new_value, str) or not new_value.strip():
            return False
    elif kind is FieldKind.NUMBER:
        if isinstance(new_value, bool) or not isinstance(new_value, (int, float)):
            return False
    elif kind is FieldKind.BOOLEAN:
        if not isinstance(new_value, bool):
            return False
    elif kind is FieldKind.ARRAY:
        if not isinstance(new_value, list):
            return False
        return new_value != (old_value or [])
    elif kind is FieldKind.OBJECT:
        if not isinstance(new_value, dict):
            return False
    elif kind is FieldKind.DATE:
        if not isinstance(new_value, datetime):
            return False
    elif kind is FieldKind.REFERENCE:
        if not isinstance(new_value, ObjectId):
            return False

    return new_value != old_value


def diff_fields(changes: Mapping, current: Mapping, fields: Mapping[str, FieldKind]) -> dict:
    """Return ``{field: new_value}`` for every field in ``fields`` that changed."""
    patch = {}
    for field, kind in fields.items():
        if field not in changes:
            continue
        if has_valid_change(changes[field], current.get(field), kind):
            patch[field] = changes[field]
    return patch
