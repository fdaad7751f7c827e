# Copyright (c) 2025 PantherianCodeX. All Rights Reserved.

"""Canonical JSON types and helpers used across fmtbridge.

This module defines the JSON value shapes used for formatter options and
structured log payloads. It intentionally has no dependencies on logging,
configuration, or CLI layers to keep the dependency graph acyclic.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import cast

__all__ = [
    "JSONList",
    "JSONMapping",
    "JSONValue",
    "coerce_scalar",
    "normalise_enums_for_json",
    "require_json",
]

type JSONValue = str | int | float | bool | dict[str, JSONValue] | list[JSONValue] | None
type JSONMapping = dict[str, JSONValue]
type JSONList = list[JSONValue]


def require_json(payload: str, fallback: str | None = None) -> JSONMapping:
    """Parse a JSON string into a mapping, with basic validation.

    Args:
        payload: Raw JSON string to parse.
        fallback: Optional fallback string to use when ``payload`` is empty.

    Returns:
        Parsed JSON object as a string-keyed mapping.

    Raises:
        ValueError: If both ``payload`` and ``fallback`` are empty, or if the
            document is not a JSON object.
    """
    data_str = payload.strip() or (fallback or "")
    if not data_str:
        message = "Expected a JSON object but received an empty string"
        raise ValueError(message)
    data = json.loads(data_str)
    if not isinstance(data, dict):
        message = f"Expected a JSON object but received {type(data).__name__}"
        raise ValueError(message)
    return cast("JSONMapping", data)


def coerce_scalar(raw: str) -> JSONValue:
    """Interpret a command-line token as a JSON scalar when it looks like one.

    ``true``/``false``/``null`` and numeric literals are decoded; anything else is
    returned as the original string.
    """
    token = raw.strip()
    if token in {"true", "false", "null"}:
        return cast("JSONValue", json.loads(token))
    try:
        return int(token)
    except ValueError:
        pass
    try:
        return float(token)
    except ValueError:
        return raw


def normalise_enums_for_json(value: object) -> JSONValue:
    """Recursively convert Enum keys/values to their string payloads for JSON serialisation."""

    def _convert(obj: object) -> JSONValue:
        if isinstance(obj, Enum):
            return cast("JSONValue", obj.value)
        if isinstance(obj, dict):
            mapping_obj = cast("dict[object, object]", obj)
            result: dict[str, JSONValue] = {}
            for key, raw_val in mapping_obj.items():
                norm_key = str(key.value) if isinstance(key, Enum) else str(key)
                result[norm_key] = _convert(raw_val)
            return result
        if isinstance(obj, (list, tuple)):
            items = cast("list[object] | tuple[object, ...]", obj)
            return [_convert(item) for item in items]
        if isinstance(obj, (str, int, float, bool)) or obj is None:
            return obj
        return str(obj)

    return _convert(value)
