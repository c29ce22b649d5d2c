"""JudgeVote model: a judge's exclusive 1st/2nd/3rd pick."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from hacksite.database import Base

RANKS = (1, 2, 3)

# Points a rank contributes to Project.judge_vote_count
RANK_POINTS = {1: 3, 2: 2, 3: 1}


class JudgeVote(Base):
    __tablename__ = "judge_votes"
    __table_args__ = (
        UniqueConstraint("project_id", "judge_name", name="uq_judge_project"),
        UniqueConstraint("judge_name", "rank", name="uq_judge_rank"),
        CheckConstraint("rank BETWEEN 1 AND 3", name="ck_judge_rank"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    project_id: Mapped[int] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    judge_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    rank: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
