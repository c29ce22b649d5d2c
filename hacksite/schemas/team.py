"""Team Pydantic schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class TeamMemberOut(BaseModel):
    user_id: int
    joined_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TeamIdeaOut(BaseModel):
    id: int
    title: str
    vote_count: int

    model_config = {"from_attributes": True}


class TeamOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    leader_id: int
    idea_id: int
    max_members: int
    created_at: Optional[datetime] = None
    members: List[TeamMemberOut] = []
    idea: Optional[TeamIdeaOut] = None

    model_config = {"from_attributes": True}
