"""
Topic persistence (raw SQL).
"""

from __future__ import annotations

from core import db


async def list_topics() -> list[dict]:
    return await db.fetch_all(
        """
        SELECT slug, description
        FROM topics
        ORDER BY slug
        """
    )


async def topic_exists(slug: str) -> bool:
    exists = await db.fetch_val(
        """
        SELECT EXISTS (
            SELECT 1
            FROM topics
            WHERE slug = $1
        )
        """,
        slug,
    )
    return bool(exists)
