"""Tolerant accessors for loosely typed JSON records.

Each helper returns the zero value when the key is missing or holds a value of
another type. None of them raise.
"""
from __future__ import annotations

import math
from typing import Any, Mapping


def get_str(record: Mapping[str, Any], key: str) -> str:
    value = record.get(key)
    return value if isinstance(value, str) else ""


def get_bool(record: Mapping[str, Any], key: str) -> bool:
    value = record.get(key)
    return value if isinstance(value, bool) else False


def get_int(record: Mapping[str, Any], key: str) -> int:
    value = record.get(key)
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return 0


def get_mapping(record: Mapping[str, Any], key: str) -> dict[str, Any] | None:
    value = record.get(key)
    return value if isinstance(value, dict) else None


def string_entries(record: Mapping[str, Any]) -> dict[str, str]:
    """Keep only the top-level string values of a mapping."""
    return {str(key): value for key, value in record.items() if isinstance(value, str)}
