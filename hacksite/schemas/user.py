"""User Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserOut(BaseModel):
    """Public user representation returned by the API."""
    id: int
    name: str
    created_at: Optional[datetime] = None
    last_seen_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
