"""Uniform field access over SDK objects and plain mappings.

Vendor SDKs hand back pydantic models; fakes and raw payloads are dicts.
Adapters read both through :func:`read_field`.
"""
from __future__ import annotations

from typing import Any, Mapping


def read_field(obj: Any, name: str, default: Any = None) -> Any:
    """Return ``obj[name]`` for mappings, ``obj.name`` otherwise, else ``default``."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def read_path(obj: Any, *names: str) -> Any:
    """Follow ``names`` one level at a time; ``None`` as soon as a step is missing."""
    current = obj
    for name in names:
        current = read_field(current, name)
        if current is None:
            return None
    return current


__all__ = ["read_field", "read_path"]
