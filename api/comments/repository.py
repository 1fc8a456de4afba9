"""
Comment persistence (raw SQL).
"""

from __future__ import annotations

from core import db
from core.query import ListQuery

_COMMENT_COLUMNS = "comment_id, author, article_id, votes, created_at, body"


async def list_comments_for_article(article_id: int, query: ListQuery) -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {_COMMENT_COLUMNS}
        FROM comments
        WHERE article_id = $1
        ORDER BY {db.quote_ident(query.sort_by)} {query.direction},
                 comment_id {query.direction}
        """,
        article_id,
    )


async def insert_comment(*, article_id: int, author: str, body: str) -> dict:
    """
    Insert a comment; an unknown author or article is a foreign-key violation.
    """
    row = await db.fetch_one(
        f"""
        INSERT INTO comments (article_id, author, body)
        VALUES ($1, $2, $3)
        RETURNING {_COMMENT_COLUMNS}
        """,
        article_id,
        author,
        body,
    )
    if row is None:
        raise RuntimeError("Failed to insert comment.")
    return row


async def increment_votes(comment_id: int, delta: int) -> dict | None:
    return await db.fetch_one(
        f"""
        UPDATE comments
        SET votes = votes + $2
        WHERE comment_id = $1
        RETURNING {_COMMENT_COLUMNS}
        """,
        comment_id,
        delta,
    )


async def delete_comment(comment_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM comments
        WHERE comment_id = $1
        RETURNING comment_id
        """,
        comment_id,
    )
    return row is not None
