"""
hacksite – Application configuration.
Reads environment variables from a .env file via pydantic-settings.
"""

from datetime import datetime
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── App ──
    APP_NAME: str = "hacksite"
    DEBUG: bool = False

    # ── Database ──
    DATABASE_URL: str = "sqlite+aiosqlite:///./hacksite.db"

    # ── JWT (name-based identity cookies) ──
    SECRET_KEY: str = "change-me-to-a-random-secret"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # ── Admin / judges ──
    ADMIN_PASSWORD: str = ""
    ALLOWED_JUDGES: str = "thomas-letan,ryan-tan,asutosh-mourya"

    # ── Headless CMS (event info, schedule, prizes) ──
    CMS_URL: str = "https://mighty-nest-47bf78bca5.strapiapp.com"
    CMS_CACHE_SECONDS: float = 60.0

    # ── Phase flags ──
    PHASE_CACHE_SECONDS: float = 30.0
    IDEAS_OPEN_AT: Optional[datetime] = datetime.fromisoformat("2025-11-01T00:00:00+00:00")
    IDEAS_VOTING_OPEN_AT: Optional[datetime] = datetime.fromisoformat("2025-11-01T00:00:00+00:00")
    TEAMS_OPEN_AT: Optional[datetime] = datetime.fromisoformat("2025-11-28T00:00:00+00:00")
    SUBMISSIONS_OPEN_AT: Optional[datetime] = datetime.fromisoformat("2025-12-01T00:00:00+00:00")
    SHOWCASE_VOTING_OPEN_AT: Optional[datetime] = None

    # ── Voting / teams ──
    MAX_VOTES_PER_IDEA: int = 5
    VOTE_DEBOUNCE_SECONDS: float = 0.5
    TEAM_MAX_MEMBERS: int = 5
    TEAM_ELIGIBLE_IDEAS: int = 8

    @property
    def judges(self) -> List[str]:
        return [j.strip().lower() for j in self.ALLOWED_JUDGES.split(",") if j.strip()]


settings = Settings()
