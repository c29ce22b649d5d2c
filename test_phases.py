from datetime import datetime, timedelta, timezone

from hacksite.models.admin_phase import PhaseName
from hacksite.services.phases import (
    PhaseCache,
    date_gate,
    fetch_phase_flags,
    session_loader,
    toggle_phase,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class CountingLoader:
    def __init__(self, flags):
        self.flags = flags
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if isinstance(self.flags, Exception):
            raise self.flags
        return dict(self.flags)


async def test_cache_reuses_snapshot_until_expiry():
    clock = FakeClock()
    loader = CountingLoader({PhaseName.IDEAS_OPEN: True})
    cache = PhaseCache(loader, ttl=30, clock=clock)

    assert await cache.get(PhaseName.IDEAS_OPEN) is True
    loader.flags = {PhaseName.IDEAS_OPEN: False}
    clock.now = 29
    assert await cache.get(PhaseName.IDEAS_OPEN) is True
    assert loader.calls == 1

    clock.now = 31
    assert await cache.get(PhaseName.IDEAS_OPEN) is False
    assert loader.calls == 2


async def test_invalidate_forces_reload():
    loader = CountingLoader({PhaseName.TEAMS_OPEN: False})
    cache = PhaseCache(loader, ttl=30, clock=FakeClock())
    await cache.snapshot()

    loader.flags = {PhaseName.TEAMS_OPEN: True}
    cache.invalidate()

    assert await cache.get(PhaseName.TEAMS_OPEN) is True
    assert loader.calls == 2


async def test_loader_failure_means_no_overrides():
    cache = PhaseCache(CountingLoader(RuntimeError("db down")), ttl=30, clock=FakeClock())

    assert await cache.snapshot() == {}
    assert await cache.get(PhaseName.SHOWCASE_VOTING) is False


async def test_flag_overrides_date_check():
    cache = PhaseCache(CountingLoader({PhaseName.SUBMISSIONS_OPEN: True}), ttl=30, clock=FakeClock())

    assert await cache.is_feature_open(PhaseName.SUBMISSIONS_OPEN, lambda: False) is True
    assert await cache.is_feature_open(PhaseName.SHOWCASE_VOTING, lambda: True) is True
    assert await cache.is_feature_open(PhaseName.SHOWCASE_VOTING, lambda: False) is False


def test_date_gate():
    fixed = datetime(2025, 11, 28, tzinfo=timezone.utc)

    assert date_gate(fixed, now=lambda: fixed)() is True
    assert date_gate(fixed, now=lambda: fixed - timedelta(seconds=1))() is False
    assert date_gate(datetime(2025, 11, 28), now=lambda: fixed)() is True
    assert date_gate(None, now=lambda: fixed)() is False


async def test_toggle_phase_upserts(db):
    await toggle_phase(db, PhaseName.IDEAS_VOTING, True)
    await toggle_phase(db, PhaseName.IDEAS_VOTING, False)
    await toggle_phase(db, PhaseName.TEAMS_OPEN, True)

    assert await fetch_phase_flags(db) == {
        PhaseName.IDEAS_VOTING: False,
        PhaseName.TEAMS_OPEN: True,
    }


async def test_session_loader_reads_store(db):
    from hacksite.database import async_session

    await toggle_phase(db, PhaseName.SHOWCASE_VOTING, True)

    cache = PhaseCache(session_loader(async_session), ttl=30, clock=FakeClock())
    assert await cache.get(PhaseName.SHOWCASE_VOTING) is True
