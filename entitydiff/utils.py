"""Utility functions for the entitydiff engine."""

from __future__ import annotations

import json
import math
from typing import Any


class _Missing:
    """Marker for a value that is absent (as opposed to JSON null)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


def is_missing(value: Any) -> bool:
    """Check whether a value is the MISSING sentinel."""
    return value is MISSING


def is_numeric(value: Any) -> bool:
    """Check if a value is numeric (int or float)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_number(value: Any) -> Any:
    """Collapse integral floats to ints so 1 and 1.0 compare and print alike."""
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return value


def _canonical_form(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k): _canonical_form(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonical_form(v) for v in value]
    if is_numeric(value):
        return normalize_number(value)
    return value


def canonical_json(value: Any) -> str:
    """
    Serialize a value deterministically.

    Keys are sorted, separators are compact and integral floats are written
    as ints, so two structurally equal documents always produce the same
    string regardless of key insertion order.
    """
    return json.dumps(
        _canonical_form(value),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def js_typeof(value: Any) -> str:
    """Return the JavaScript ``typeof`` name of a JSON value."""
    if value is MISSING:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if is_numeric(value):
        return "number"
    if isinstance(value, str):
        return "string"
    # null, arrays and objects all report "object"
    return "object"


def js_string(value: Any) -> str:
    """Render a value the way JavaScript ``String()`` renders primitives."""
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_numeric(value):
        value = normalize_number(value)
        if isinstance(value, float):
            if math.isnan(value):
                return "NaN"
            if math.isinf(value):
                return "Infinity" if value > 0 else "-Infinity"
        return str(value)
    if isinstance(value, str):
        return value
    return canonical_json(value)


def json_equal(old: Any, new: Any) -> bool:
    """Strict JSON equality: booleans never equal numbers, 1 equals 1.0."""
    if isinstance(old, bool) or isinstance(new, bool):
        return isinstance(old, bool) and isinstance(new, bool) and old == new
    if is_numeric(old) and is_numeric(new):
        return old == new
    if type(old) != type(new):
        return False
    if isinstance(old, (dict, list)):
        return canonical_json(old) == canonical_json(new)
    return old == new


def get_nested_value(obj: Any, path: str) -> Any:
    """
    Resolve a dotted path against a document.

    Each segment must name an existing key of a dict (or a valid index of a
    list). Any missing step makes the whole resolution MISSING.
    """
    if not path:
        return obj

    current = obj
    for key in path.split("."):
        if isinstance(current, dict):
            if key not in current:
                return MISSING
            current = current[key]
        elif isinstance(current, list):
            if not key.isdigit() or int(key) >= len(current):
                return MISSING
            current = current[int(key)]
        else:
            return MISSING
    return current


def build_path(parent_path: str, key: str) -> str:
    """Build a dotted path from a parent path and a key."""
    if not parent_path:
        return str(key)
    return f"{parent_path}.{key}"


def last_segment(path: str) -> str:
    """Return the final dotted segment of a path."""
    return path.rsplit(".", 1)[-1] if path else ""
