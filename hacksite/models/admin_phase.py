"""AdminPhase model: admin-controlled feature flags."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column

from hacksite.database import Base


class PhaseName(str, enum.Enum):
    IDEAS_OPEN = "ideas_open"
    IDEAS_VOTING = "ideas_voting"
    TEAMS_OPEN = "teams_open"
    SUBMISSIONS_OPEN = "submissions_open"
    SHOWCASE_VOTING = "showcase_voting"
    WINNERS_REVEALED = "winners_revealed"


class AdminPhase(Base):
    __tablename__ = "admin_phases"

    phase_name: Mapped[PhaseName] = mapped_column(
        Enum(PhaseName, values_callable=lambda e: [m.value for m in e]), primary_key=True
    )
    is_open: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
