"""
Article resolvers.

Scope:
- list with sort/order/author/topic, telling "empty" apart from "not found"
- single article lookup
- vote increments and article creation
"""

from __future__ import annotations

import logging

from core.errors import NotFoundError
from core.query import ListQuery, ListQueryConfig
from topics import repository as topics_repository
from users import repository as users_repository

from . import repository

logger = logging.getLogger(__name__)

LIST_CONFIG = ListQueryConfig(
    default_sort="created_at",
    filter_fields=frozenset({"author", "topic"}),
)


async def _ensure_filter_targets_exist(filters: dict[str, str]) -> None:
    author = filters.get("author")
    if author is not None and not await users_repository.user_exists(author):
        raise NotFoundError()

    topic = filters.get("topic")
    if topic is not None and not await topics_repository.topic_exists(topic):
        raise NotFoundError()


async def list_articles(query: ListQuery) -> list[dict]:
    rows = await repository.list_articles(query)
    if not rows and query.filters:
        # Nothing matched: only a 200 if every filter names a real entity.
        await _ensure_filter_targets_exist(query.filters)
    return rows


async def get_article(article_id: int) -> dict:
    row = await repository.get_article(article_id)
    if row is None:
        raise NotFoundError.entity("article")
    return row


async def update_votes(article_id: int, delta: int) -> dict:
    row = await repository.increment_votes(article_id, delta)
    if row is None:
        raise NotFoundError.entity("article")
    logger.info("article_votes_updated article_id=%s delta=%s votes=%s", article_id, delta, row["votes"])
    return row


async def create_article(record: dict) -> dict:
    row = await repository.insert_article(
        author=record["author"],
        title=record["title"],
        body=record["body"],
        topic=record["topic"],
    )
    logger.info("article_created article_id=%s author=%s", row["article_id"], row["author"])
    return row
