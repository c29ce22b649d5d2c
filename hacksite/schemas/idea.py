"""Idea Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class IdeaOut(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    author_id: int
    vote_count: int
    is_locked: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class VoteCountOut(BaseModel):
    idea_id: int
    currentCount: int
    vote_count: int
