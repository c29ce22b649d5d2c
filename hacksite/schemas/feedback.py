"""Feedback Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from hacksite.models.feedback import FeedbackCategory, Severity


class FeedbackOut(BaseModel):
    id: int
    user_id: int
    project_id: Optional[int] = None
    category: FeedbackCategory
    description: str
    severity: Optional[Severity] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
