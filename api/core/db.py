"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Failures never leave this module as raw asyncpg exceptions. Every helper
translates them into a `StorageError` whose `kind` is one of a closed set,
so callers can branch on the kind instead of inspecting SQLSTATE codes.
"""

from __future__ import annotations

import asyncio
import enum
import os
from contextlib import contextmanager
from typing import Any, Iterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

_pool: asyncpg.Pool | None = None


class StorageErrorKind(str, enum.Enum):
    TYPE_MISMATCH = "type_mismatch"
    UNDEFINED_COLUMN = "undefined_column"
    NOT_NULL_VIOLATION = "not_null_violation"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    GENERIC = "generic"


class StorageError(RuntimeError):
    def __init__(self, kind: StorageErrorKind, detail: str = "") -> None:
        super().__init__(detail or kind.value)
        self.kind = kind
        self.detail = detail


# Checked in order; the first matching class wins.
_KIND_BY_EXCEPTION: tuple[tuple[type[BaseException], StorageErrorKind], ...] = (
    (asyncpg.exceptions.InvalidTextRepresentationError, StorageErrorKind.TYPE_MISMATCH),
    (asyncpg.exceptions.NumericValueOutOfRangeError, StorageErrorKind.TYPE_MISMATCH),
    (asyncpg.exceptions.DataError, StorageErrorKind.TYPE_MISMATCH),
    (asyncpg.exceptions.UndefinedColumnError, StorageErrorKind.UNDEFINED_COLUMN),
    (asyncpg.exceptions.NotNullViolationError, StorageErrorKind.NOT_NULL_VIOLATION),
    (asyncpg.exceptions.ForeignKeyViolationError, StorageErrorKind.FOREIGN_KEY_VIOLATION),
)


def classify_exception(exc: BaseException) -> StorageErrorKind:
    for exc_type, kind in _KIND_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return kind
    # Client-side argument encoding failures (e.g. int4 overflow) are
    # InterfaceErrors that are also ValueErrors.
    if isinstance(exc, asyncpg.InterfaceError) and isinstance(exc, ValueError):
        return StorageErrorKind.TYPE_MISMATCH
    return StorageErrorKind.GENERIC


@contextmanager
def _translate_errors() -> Iterator[None]:
    try:
        yield
    except StorageError:
        raise
    except (asyncpg.PostgresError, asyncpg.InterfaceError, asyncio.TimeoutError, OSError) as exc:
        raise StorageError(classify_exception(exc), str(exc)) from exc


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def quote_ident(name: str) -> str:
    """
    Quote `name` as a Postgres identifier.

    Used for client-supplied sort columns: an unknown column then fails with
    undefined_column inside Postgres instead of being interpreted as SQL.
    """
    return '"' + name.replace('"', '""') + '"'


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=_env_int("DB_POOL_MIN_SIZE", 1),
        max_size=_env_int("DB_POOL_MAX_SIZE", 5),
        command_timeout=_env_int("DB_COMMAND_TIMEOUT", 30),
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    with _translate_errors():
        row = await pool().fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    with _translate_errors():
        rows = await pool().fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def fetch_val(sql: str, *args: Any) -> Any:
    """
    Run a query and return the first column of the first row (or None).
    """
    with _translate_errors():
        return await pool().fetchval(sql, *args)
