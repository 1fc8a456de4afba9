"""
Rename one field across entity-shaped mappings.

The API calls a comment's author `username` in request bodies and comment
listings, while storage calls it `author`. Routers apply these helpers at the
boundary so services and SQL only ever see the storage names.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping


def rename_key_one(row: Mapping[str, Any], old: str, new: str) -> dict[str, Any]:
    if old in row and new in row and old != new:
        raise ValueError(f"cannot rename {old!r} to {new!r}: both keys are present")
    # Rebuild so the renamed field keeps its position.
    return {(new if key == old else key): value for key, value in row.items()}


def rename_key(rows: Iterable[Mapping[str, Any]], old: str, new: str) -> list[dict[str, Any]]:
    return [rename_key_one(row, old, new) for row in rows]
