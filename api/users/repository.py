"""
User persistence (raw SQL). Users are seeded externally and read-only here.
"""

from __future__ import annotations

from core import db


async def list_users() -> list[dict]:
    return await db.fetch_all(
        """
        SELECT username, name, avatar_url
        FROM users
        ORDER BY username
        """
    )


async def get_user(username: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT username, name, avatar_url
        FROM users
        WHERE username = $1
        """,
        username,
    )


async def user_exists(username: str) -> bool:
    exists = await db.fetch_val(
        """
        SELECT EXISTS (
            SELECT 1
            FROM users
            WHERE username = $1
        )
        """,
        username,
    )
    return bool(exists)
