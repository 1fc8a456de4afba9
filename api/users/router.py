"""
User API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter

from core.errors import NotFoundError

from . import repository

router = APIRouter()


@router.get("/users")
async def get_users() -> dict:
    users = await repository.list_users()
    return {"users": users}


@router.get("/users/{username}")
async def get_user(username: str) -> dict:
    user = await repository.get_user(username)
    if user is None:
        raise NotFoundError.entity("user")
    return {"user": user}
