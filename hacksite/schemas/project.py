"""Project Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ProjectOut(BaseModel):
    id: int
    team_id: int
    title: str
    description: Optional[str] = None
    track: Optional[str] = None
    repo_url: Optional[str] = None
    demo_url: Optional[str] = None
    video_url: Optional[str] = None
    presentation_url: Optional[str] = None
    judges_score: Optional[float] = None
    showcase_vote_count: int = 0
    judge_vote_count: int = 0
    is_winner: bool = False
    winner_category: Optional[str] = None
    submitted_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
