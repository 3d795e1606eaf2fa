"""Narrowing for parsed JSON.

``json.loads`` gives back ``object``. The manifest reader and the HTTP client
pass what they parsed through these checks before touching any key.
"""

from __future__ import annotations

from typing import Mapping, TypeGuard

StrDict = dict[str, object]

_MISSING = object()


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    return isinstance(obj, dict) and all(isinstance(key, str) for key in obj)


def as_str_dict(obj: object) -> StrDict | None:
    return obj if is_str_dict(obj) else None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Non-blank string under ``key``, stripped; None for anything else."""
    value = table.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def get_bool(table: Mapping[str, object], key: str, default: bool = False) -> bool | None:
    """Boolean flag under ``key``.

    An absent key gives ``default``. A present non-boolean gives None so the
    caller can report the bad type instead of guessing.
    """
    value = table.get(key, _MISSING)
    if value is _MISSING:
        return default
    return value if isinstance(value, bool) else None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))
