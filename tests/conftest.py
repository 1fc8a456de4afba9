"""Pytest configuration and fixtures.

The API runs against `FakeStore`, an in-memory stand-in for the repository
functions, so no Postgres is needed. The fake reproduces the storage
behaviours the classifier depends on: undefined sort columns and foreign-key
violations surface as `db.StorageError`.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from articles import repository as articles_repository
from comments import repository as comments_repository
from core.db import StorageError, StorageErrorKind
from main import app
from topics import repository as topics_repository
from users import repository as users_repository


def _ts(year, month=1, day=1):
    return datetime(year, month, day, 12, 0, tzinfo=timezone.utc)


TOPICS = [
    {"slug": "mitch", "description": "The man, the Mitch, the legend"},
    {"slug": "cats", "description": "Not dogs"},
    {"slug": "paper", "description": "what books are made of"},
]

USERS = [
    {"username": "butter_bridge", "name": "jonny", "avatar_url": "https://example.com/jonny.jpg"},
    {"username": "icellusedkars", "name": "sam", "avatar_url": "https://example.com/sam.jpg"},
    {"username": "rogersop", "name": "paul", "avatar_url": "https://example.com/paul.jpg"},
    {"username": "lurker", "name": "do_nothing", "avatar_url": "https://example.com/lurker.jpg"},
]

ARTICLES = [
    (1, "Living in the shadow of a great man", "I find this existence challenging", 100, "mitch", "butter_bridge", _ts(2018, 11, 15)),
    (2, "Sony Vaio; or, The Laptop", "Call me Mitchell.", 0, "mitch", "icellusedkars", _ts(2014, 11, 16)),
    (3, "Eight pug gifs that remind me of mitch", "some gifs", 0, "mitch", "icellusedkars", _ts(2010, 11, 17)),
    (4, "Student SUES Mitch!", "We all love Mitch", 0, "mitch", "rogersop", _ts(2006, 11, 18)),
    (5, "UNCOVERED: catspiracy to bring down democracy", "Bastet walks amongst us", 0, "cats", "rogersop", _ts(2002, 11, 19)),
    (6, "A", "Delicious tin of cat food", 0, "mitch", "icellusedkars", _ts(1998, 11, 20)),
]

COMMENTS = [
    (1, "butter_bridge", 1, 16, _ts(2017, 11, 22), "Oh, I've got compassion running out of my nose"),
    (2, "butter_bridge", 1, 14, _ts(2016, 11, 22), "The beautiful thing about treasure is that it exists"),
    (3, "icellusedkars", 1, 100, _ts(2015, 11, 23), "Replacing the quiet elegance of the dark suit"),
    (4, "icellusedkars", 3, -100, _ts(2014, 11, 23), "I carry a log, yes. Is it funny to you?"),
    (5, "rogersop", 3, 0, _ts(2013, 11, 23), "I hate streaming noses"),
    (6, "butter_bridge", 5, 1, _ts(2012, 11, 23), "Lobster pot"),
]


def _sorted(rows, query, id_key):
    if query.sort_by not in _known_columns(id_key):
        raise StorageError(StorageErrorKind.UNDEFINED_COLUMN, f'column "{query.sort_by}" does not exist')
    reverse = query.order == "desc"
    return sorted(rows, key=lambda row: (row[query.sort_by], row[id_key]), reverse=reverse)


def _known_columns(id_key):
    if id_key == "article_id":
        return {"article_id", "title", "body", "votes", "topic", "author", "created_at", "comment_count"}
    return {"comment_id", "author", "article_id", "votes", "created_at", "body"}


class FakeStore:
    def __init__(self):
        self.topics = [dict(t) for t in TOPICS]
        self.users = [dict(u) for u in USERS]
        self.articles = [
            dict(zip(("article_id", "title", "body", "votes", "topic", "author", "created_at"), a))
            for a in ARTICLES
        ]
        self.comments = [
            dict(zip(("comment_id", "author", "article_id", "votes", "created_at", "body"), c))
            for c in COMMENTS
        ]
        self.calls = []

    def _with_count(self, article):
        count = sum(1 for c in self.comments if c["article_id"] == article["article_id"])
        return {**article, "comment_count": count}

    # topics
    async def list_topics(self):
        return [dict(t) for t in self.topics]

    async def topic_exists(self, slug):
        self.calls.append(("topic_exists", slug))
        return any(t["slug"] == slug for t in self.topics)

    # users
    async def list_users(self):
        return [dict(u) for u in self.users]

    async def get_user(self, username):
        return next((dict(u) for u in self.users if u["username"] == username), None)

    async def user_exists(self, username):
        self.calls.append(("user_exists", username))
        return any(u["username"] == username for u in self.users)

    # articles
    async def list_articles(self, query):
        rows = [self._with_count(a) for a in self.articles]
        for key in ("author", "topic"):
            if key in query.filters:
                rows = [r for r in rows if r[key] == query.filters[key]]
        return _sorted(rows, query, "article_id")

    async def get_article(self, article_id):
        article = next((a for a in self.articles if a["article_id"] == article_id), None)
        return self._with_count(article) if article is not None else None

    async def article_exists(self, article_id):
        self.calls.append(("article_exists", article_id))
        return any(a["article_id"] == article_id for a in self.articles)

    async def increment_article_votes(self, article_id, delta):
        for article in self.articles:
            if article["article_id"] == article_id:
                article["votes"] += delta
                return self._with_count(article)
        return None

    async def insert_article(self, *, author, title, body, topic):
        if not any(u["username"] == author for u in self.users) or not any(
            t["slug"] == topic for t in self.topics
        ):
            raise StorageError(StorageErrorKind.FOREIGN_KEY_VIOLATION, "violates foreign key constraint")
        article = {
            "article_id": max(a["article_id"] for a in self.articles) + 1,
            "title": title,
            "body": body,
            "votes": 0,
            "topic": topic,
            "author": author,
            "created_at": datetime.now(timezone.utc),
        }
        self.articles.append(article)
        return {**article, "comment_count": 0}

    # comments
    async def list_comments_for_article(self, article_id, query):
        rows = [dict(c) for c in self.comments if c["article_id"] == article_id]
        return _sorted(rows, query, "comment_id")

    async def insert_comment(self, *, article_id, author, body):
        if not any(u["username"] == author for u in self.users) or not any(
            a["article_id"] == article_id for a in self.articles
        ):
            raise StorageError(StorageErrorKind.FOREIGN_KEY_VIOLATION, "violates foreign key constraint")
        comment = {
            "comment_id": max(c["comment_id"] for c in self.comments) + 1,
            "author": author,
            "article_id": article_id,
            "votes": 0,
            "created_at": datetime.now(timezone.utc),
            "body": body,
        }
        self.comments.append(comment)
        return dict(comment)

    async def increment_comment_votes(self, comment_id, delta):
        for comment in self.comments:
            if comment["comment_id"] == comment_id:
                comment["votes"] += delta
                return dict(comment)
        return None

    async def delete_comment(self, comment_id):
        before = len(self.comments)
        self.comments = [c for c in self.comments if c["comment_id"] != comment_id]
        return len(self.comments) < before


@pytest.fixture
def store(monkeypatch):
    fake = FakeStore()
    monkeypatch.setattr(topics_repository, "list_topics", fake.list_topics)
    monkeypatch.setattr(topics_repository, "topic_exists", fake.topic_exists)
    monkeypatch.setattr(users_repository, "list_users", fake.list_users)
    monkeypatch.setattr(users_repository, "get_user", fake.get_user)
    monkeypatch.setattr(users_repository, "user_exists", fake.user_exists)
    monkeypatch.setattr(articles_repository, "list_articles", fake.list_articles)
    monkeypatch.setattr(articles_repository, "get_article", fake.get_article)
    monkeypatch.setattr(articles_repository, "article_exists", fake.article_exists)
    monkeypatch.setattr(articles_repository, "increment_votes", fake.increment_article_votes)
    monkeypatch.setattr(articles_repository, "insert_article", fake.insert_article)
    monkeypatch.setattr(comments_repository, "list_comments_for_article", fake.list_comments_for_article)
    monkeypatch.setattr(comments_repository, "insert_comment", fake.insert_comment)
    monkeypatch.setattr(comments_repository, "increment_votes", fake.increment_comment_votes)
    monkeypatch.setattr(comments_repository, "delete_comment", fake.delete_comment)
    return fake


@pytest.fixture
def client(store):
    # No context manager: the lifespan (and its DB pool) is never started.
    return TestClient(app)
