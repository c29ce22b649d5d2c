"""Feedback model: attendee reports about the event platform."""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from hacksite.database import Base


class FeedbackCategory(str, enum.Enum):
    DOCS = "docs"
    APIS = "apis"
    TOOLING = "tooling"
    DX = "dx"
    BUGS = "bugs"
    FEATURE_REQUEST = "feature_request"
    OTHER = "other"


class Severity(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Feedback(Base):
    __tablename__ = "feedback"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    project_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("projects.id", ondelete="SET NULL")
    )
    category: Mapped[FeedbackCategory] = mapped_column(
        Enum(FeedbackCategory, values_callable=lambda e: [m.value for m in e]), nullable=False
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)
    severity: Mapped[Optional[Severity]] = mapped_column(
        Enum(Severity, values_callable=lambda e: [m.value for m in e])
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
