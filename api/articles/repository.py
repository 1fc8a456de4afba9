"""
Article persistence (raw SQL).

`comment_count` is never stored; every query that returns articles derives it
from the comments table.
"""

from __future__ import annotations

from core import db
from core.query import ListQuery

_ARTICLE_COLUMNS = "a.article_id, a.title, a.body, a.votes, a.topic, a.author, a.created_at"


def _order_column(sort_by: str) -> str:
    if sort_by == "comment_count":
        return "comment_count"
    return f"a.{db.quote_ident(sort_by)}"


async def list_articles(query: ListQuery) -> list[dict]:
    """
    Return articles matching the author/topic filters, sorted as requested.

    An unknown sort column fails inside Postgres (undefined_column).
    """
    return await db.fetch_all(
        f"""
        SELECT {_ARTICLE_COLUMNS},
               COUNT(c.comment_id) AS comment_count
        FROM articles a
        LEFT JOIN comments c ON c.article_id = a.article_id
        WHERE ($1 = '' OR a.author = $1)
          AND ($2 = '' OR a.topic = $2)
        GROUP BY a.article_id
        ORDER BY {_order_column(query.sort_by)} {query.direction},
                 a.article_id {query.direction}
        """,
        query.filters.get("author", ""),
        query.filters.get("topic", ""),
    )


async def get_article(article_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {_ARTICLE_COLUMNS},
               COUNT(c.comment_id) AS comment_count
        FROM articles a
        LEFT JOIN comments c ON c.article_id = a.article_id
        WHERE a.article_id = $1
        GROUP BY a.article_id
        """,
        article_id,
    )


async def article_exists(article_id: int) -> bool:
    exists = await db.fetch_val(
        """
        SELECT EXISTS (
            SELECT 1
            FROM articles
            WHERE article_id = $1
        )
        """,
        article_id,
    )
    return bool(exists)


async def increment_votes(article_id: int, delta: int) -> dict | None:
    """
    Add `delta` to the article's votes in one statement.

    Returns None when no article has `article_id`.
    """
    return await db.fetch_one(
        """
        WITH updated AS (
            UPDATE articles
            SET votes = votes + $2
            WHERE article_id = $1
            RETURNING article_id, title, body, votes, topic, author, created_at
        )
        SELECT u.article_id, u.title, u.body, u.votes, u.topic, u.author, u.created_at,
               (SELECT COUNT(*) FROM comments c WHERE c.article_id = u.article_id) AS comment_count
        FROM updated u
        """,
        article_id,
        delta,
    )


async def insert_article(*, author: str, title: str, body: str, topic: str) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO articles (author, title, body, topic)
        VALUES ($1, $2, $3, $4)
        RETURNING article_id, title, body, votes, topic, author, created_at,
                  0::bigint AS comment_count
        """,
        author,
        title,
        body,
        topic,
    )
    if row is None:
        raise RuntimeError("Failed to insert article.")
    return row
