"""Mapping helpers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` recursively updated with ``override``.

    Nested mappings are merged key by key; any other value in ``override``
    replaces the one in ``base``. Neither input is modified.

    Examples:
        >>> deep_merge({"smtp": {"host": "a", "port": 25}}, {"smtp": {"port": 587}})
        {'smtp': {'host': 'a', 'port': 587}}
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


__all__ = ["deep_merge"]
