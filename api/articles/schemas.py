"""
Pydantic schemas for article endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class VoteUpdate(BaseModel):
    # Any key other than inc_votes makes the body malformed.
    model_config = ConfigDict(extra="forbid")

    inc_votes: StrictInt = 0


class ArticleCreate(BaseModel):
    username: str = Field(..., min_length=1, strict=True)
    title: str = Field(..., min_length=1, strict=True)
    body: str = Field(..., min_length=1, strict=True)
    topic: str = Field(..., min_length=1, strict=True)
