import logging
import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from articles import router as articles_router
from comments import router as comments_router
from core import db, errors
from topics import router as topics_router
from users import router as users_router

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)

API_ENDPOINTS = {
    "/topics": {"get": "responds with an array of topics on key of topics"},
    "/users": {
        "get": "responds with an array of users on key of users",
        "/:username": {"get": "responds with requested user object on the key of user"},
    },
    "/articles": {
        "get": "responds with arrays of articles on key of articles; "
        "queries: sort_by, order (asc|desc), author, topic",
        "post": 'receives "{ username, title, body, topic }" and responds with the new article on key of article',
        "/:article_id": {
            "get": "responds with requested article on key of article",
            "patch": 'receives "{ inc_votes: 1 }", updates the vote count and responds with the updated article on key of article',
            "/comments": {
                "get": "responds with array of comments on article on key of comments; queries: sort_by, order",
                "post": 'receives "{ username: "rogersop", body: "hello" }" and responds with comment object on key of comment',
            },
        },
    },
    "/comments": {
        "/:comment_id": {
            "patch": 'receives "{ inc_votes: 1 }", updates the vote count and responds with the updated comment on key of comment',
            "delete": "responds with status 204",
        }
    },
}


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

errors.register_exception_handlers(app)

api_router = APIRouter(prefix="/api")


@api_router.get("")
def get_api() -> dict:
    return {"api": API_ENDPOINTS}


api_router.include_router(topics_router.router, tags=["topics"])
api_router.include_router(users_router.router, tags=["users"])
api_router.include_router(articles_router.router, tags=["articles"])
api_router.include_router(comments_router.router, tags=["comments"])
app.include_router(api_router)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


def run() -> None:
    uvicorn.run(
        app,
        host=os.environ.get("HOST", "0.0.0.0").strip() or "0.0.0.0",
        port=int(os.environ.get("PORT", "8000").strip() or "8000"),
    )


if __name__ == "__main__":
    run()
