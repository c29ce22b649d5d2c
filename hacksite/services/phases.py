"""
Phase flags: admin-controlled switches with a date-based fallback.

``PhaseCache`` keeps a process-local copy of the ``admin_phases`` table and
reloads it once the copy is older than ``ttl`` seconds or after
``invalidate()``.  Each process (and each client) owns its own cache, so a
toggle made elsewhere becomes visible here only after expiry.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hacksite.config import settings
from hacksite.models.admin_phase import AdminPhase, PhaseName

logger = logging.getLogger(__name__)

PhaseLoader = Callable[[], Awaitable[Dict[PhaseName, bool]]]


class PhaseCache:
    def __init__(
        self,
        loader: PhaseLoader,
        ttl: float = settings.PHASE_CACHE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self.ttl = ttl
        self._clock = clock
        self._flags: Optional[Dict[PhaseName, bool]] = None
        self._loaded_at = 0.0

    def _is_fresh(self) -> bool:
        return self._flags is not None and (self._clock() - self._loaded_at) < self.ttl

    async def snapshot(self) -> Dict[PhaseName, bool]:
        """Return every known flag, reloading when the copy is stale."""
        if self._is_fresh():
            return dict(self._flags)

        try:
            flags = await self._loader()
        except Exception:
            # An unreachable store means "no overrides"; date gates still apply.
            logger.exception("Error fetching phase flags")
            return {}

        self._flags = dict(flags)
        self._loaded_at = self._clock()
        return dict(self._flags)

    async def get(self, phase: PhaseName) -> bool:
        flags = await self.snapshot()
        return flags.get(PhaseName(phase), False)

    def invalidate(self) -> None:
        self._flags = None
        self._loaded_at = 0.0

    async def is_feature_open(self, phase: PhaseName, date_check: Callable[[], bool]) -> bool:
        """An open flag overrides the schedule; otherwise the date check decides."""
        if await self.get(phase):
            return True
        return bool(date_check())


def date_gate(opens_at: Optional[datetime], now: Optional[Callable[[], datetime]] = None) -> Callable[[], bool]:
    """Build a date check that passes once ``opens_at`` has been reached."""
    now = now or (lambda: datetime.now(timezone.utc))

    def check() -> bool:
        if opens_at is None:
            return False
        at = opens_at if opens_at.tzinfo else opens_at.replace(tzinfo=timezone.utc)
        return now() >= at

    return check


# Schedule fallbacks per phase; winners are never revealed by date alone.
PHASE_SCHEDULE: Dict[PhaseName, Optional[datetime]] = {
    PhaseName.IDEAS_OPEN: settings.IDEAS_OPEN_AT,
    PhaseName.IDEAS_VOTING: settings.IDEAS_VOTING_OPEN_AT,
    PhaseName.TEAMS_OPEN: settings.TEAMS_OPEN_AT,
    PhaseName.SUBMISSIONS_OPEN: settings.SUBMISSIONS_OPEN_AT,
    PhaseName.SHOWCASE_VOTING: settings.SHOWCASE_VOTING_OPEN_AT,
    PhaseName.WINNERS_REVEALED: None,
}


async def is_phase_open(cache: PhaseCache, phase: PhaseName) -> bool:
    return await cache.is_feature_open(phase, date_gate(PHASE_SCHEDULE.get(phase)))


# ═══════════════════════════════════════════════════════════════
#  Store access
# ═══════════════════════════════════════════════════════════════

async def fetch_phase_flags(db: AsyncSession) -> Dict[PhaseName, bool]:
    result = await db.execute(select(AdminPhase.phase_name, AdminPhase.is_open))
    return {PhaseName(name): bool(is_open) for name, is_open in result.all()}


def session_loader(session_factory: async_sessionmaker) -> PhaseLoader:
    """Loader that opens its own short-lived session per refresh."""

    async def load() -> Dict[PhaseName, bool]:
        async with session_factory() as db:
            return await fetch_phase_flags(db)

    return load


async def toggle_phase(db: AsyncSession, phase: PhaseName, is_open: bool) -> AdminPhase:
    """Upsert a phase flag."""
    phase = PhaseName(phase)
    result = await db.execute(select(AdminPhase).where(AdminPhase.phase_name == phase))
    row = result.scalar_one_or_none()
    if row is None:
        row = AdminPhase(phase_name=phase, is_open=is_open)
        db.add(row)
    else:
        row.is_open = is_open
        row.updated_at = datetime.now(timezone.utc)
    await db.commit()
    return row
