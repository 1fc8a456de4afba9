"""
Comment resolvers.
"""

from __future__ import annotations

import logging

from articles import repository as articles_repository
from core.errors import NotFoundError
from core.query import ListQuery, ListQueryConfig

from . import repository

logger = logging.getLogger(__name__)

LIST_CONFIG = ListQueryConfig(default_sort="created_at")


async def list_comments(article_id: int, query: ListQuery) -> list[dict]:
    rows = await repository.list_comments_for_article(article_id, query)
    if not rows and not await articles_repository.article_exists(article_id):
        raise NotFoundError()
    return rows


async def create_comment(article_id: int, record: dict) -> dict:
    # Unknown article or author is left to the foreign keys (422), not checked here.
    row = await repository.insert_comment(
        article_id=article_id,
        author=record["author"],
        body=record["body"],
    )
    logger.info("comment_created comment_id=%s article_id=%s", row["comment_id"], article_id)
    return row


async def update_votes(comment_id: int, delta: int) -> dict:
    row = await repository.increment_votes(comment_id, delta)
    if row is None:
        raise NotFoundError.entity("comment")
    return row


async def delete_comment(comment_id: int) -> None:
    if not await repository.delete_comment(comment_id):
        raise NotFoundError()
    logger.info("comment_deleted comment_id=%s", comment_id)
