"""
Comment API endpoints, including the nested /articles/{article_id}/comments.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from core.projection import rename_key, rename_key_one
from core.query import interpret

from . import schemas, service

router = APIRouter()


@router.get("/articles/{article_id}/comments")
async def get_article_comments(article_id: int, request: Request) -> dict:
    query = interpret(request.query_params, service.LIST_CONFIG)
    comments = await service.list_comments(article_id, query)
    return {"comments": rename_key(comments, "author", "username")}


@router.post("/articles/{article_id}/comments", status_code=status.HTTP_201_CREATED)
async def post_article_comment(article_id: int, request: schemas.CommentCreate) -> dict:
    record = rename_key_one(request.model_dump(), "username", "author")
    comment = await service.create_comment(article_id, record)
    return {"comment": comment}


@router.patch("/comments/{comment_id}")
async def patch_comment(comment_id: int, request: schemas.VoteUpdate | None = None) -> dict:
    delta = request.inc_votes if request is not None else 0
    comment = await service.update_votes(comment_id, delta)
    return {"comment": comment}


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(comment_id: int) -> Response:
    await service.delete_comment(comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
