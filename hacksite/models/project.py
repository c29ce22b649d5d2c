"""Project model: a team's hackathon submission."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from hacksite.database import Base


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    track: Mapped[Optional[str]] = mapped_column(String(100))

    # ── Links ──
    repo_url: Mapped[Optional[str]] = mapped_column(String(500))
    demo_url: Mapped[Optional[str]] = mapped_column(String(500))
    video_url: Mapped[Optional[str]] = mapped_column(String(500))
    presentation_url: Mapped[Optional[str]] = mapped_column(String(500))

    # ── Scores ──
    judges_score: Mapped[Optional[float]] = mapped_column(Float)
    showcase_vote_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    judge_vote_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # ── Results (written only by winner resolution) ──
    is_winner: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    winner_category: Mapped[Optional[str]] = mapped_column(String(50))

    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
