"""
Article API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, status

from core.projection import rename_key_one
from core.query import interpret

from . import schemas, service

router = APIRouter()


@router.get("/articles")
async def get_articles(request: Request) -> dict:
    """
    List articles with their comment counts.

    Query: sort_by (default created_at), order (asc|desc, default desc),
    author, topic.
    """
    query = interpret(request.query_params, service.LIST_CONFIG)
    articles = await service.list_articles(query)
    return {"articles": articles}


@router.post("/articles", status_code=status.HTTP_201_CREATED)
async def post_article(request: schemas.ArticleCreate) -> dict:
    record = rename_key_one(request.model_dump(), "username", "author")
    article = await service.create_article(record)
    return {"article": article}


@router.get("/articles/{article_id}")
async def get_article(article_id: int) -> dict:
    article = await service.get_article(article_id)
    return {"article": article}


@router.patch("/articles/{article_id}")
async def patch_article(article_id: int, request: schemas.VoteUpdate | None = None) -> dict:
    delta = request.inc_votes if request is not None else 0
    article = await service.update_votes(article_id, delta)
    return {"article": article}
