"""
Topic API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter

from . import repository

router = APIRouter()


@router.get("/topics")
async def get_topics() -> dict:
    topics = await repository.list_topics()
    return {"topics": topics}
