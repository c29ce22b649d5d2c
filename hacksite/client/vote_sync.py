"""
Optimistic, debounced idea voting for async clients.

Rapid clicks on the same idea only move a local pending target; one write
carrying the final target goes out once the clicks stop for ``delay``
seconds.  The server's answer (or a change notification) updates the shadow
copy.  A failed write throws away all optimistic state and reloads from the
server; there is no retry.  Writes from other tabs are not coordinated, so
the last one to reach the server wins.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Set

from hacksite.config import settings

logger = logging.getLogger(__name__)

VoteWriter = Callable[[int, int], Awaitable[int]]
VoteReloader = Callable[[], Awaitable[Dict[int, int]]]


class IdeaVoteSync:
    def __init__(
        self,
        write: VoteWriter,
        reload: VoteReloader,
        delay: float = settings.VOTE_DEBOUNCE_SECONDS,
        max_votes: int = settings.MAX_VOTES_PER_IDEA,
    ):
        self._write = write
        self._reload = reload
        self.delay = delay
        self.max_votes = max_votes

        self.shadow: Dict[int, int] = {}    # last count confirmed by the server
        self.pending: Dict[int, int] = {}   # optimistic target not yet confirmed
        self._timers: Dict[int, asyncio.Task] = {}
        self._in_flight: Set[asyncio.Task] = set()

    def count(self, idea_id: int) -> int:
        """What the UI should show for this idea right now."""
        if idea_id in self.pending:
            return self.pending[idea_id]
        return self.shadow.get(idea_id, 0)

    def click(self, idea_id: int, delta: int = 1) -> int:
        """Move the optimistic count and (re)start the idea's flush timer."""
        target = max(0, min(self.max_votes, self.count(idea_id) + delta))
        self.pending[idea_id] = target

        timer = self._timers.pop(idea_id, None)
        if timer is not None:
            timer.cancel()
        self._timers[idea_id] = asyncio.create_task(self._flush_later(idea_id))
        return target

    async def _flush_later(self, idea_id: int) -> None:
        await asyncio.sleep(self.delay)

        # From here on the write can only be superseded, never cancelled.
        task = asyncio.current_task()
        if self._timers.get(idea_id) is task:
            del self._timers[idea_id]
        self._in_flight.add(task)
        try:
            await self._flush(idea_id)
        finally:
            self._in_flight.discard(task)

    async def _flush(self, idea_id: int) -> None:
        target = self.pending.get(idea_id)
        if target is None:
            return
        try:
            confirmed = await self._write(idea_id, target)
        except Exception:
            logger.exception("Vote sync failed for idea %s; reloading", idea_id)
            await self.refresh()
            return

        self.shadow[idea_id] = confirmed
        # A later click may have moved the target while we were writing
        if self.pending.get(idea_id) == target and idea_id not in self._timers:
            del self.pending[idea_id]

    def reconcile(self, idea_id: int, server_count: int) -> None:
        """Apply a change notification for one idea."""
        self.shadow[idea_id] = server_count
        if idea_id not in self._timers and not self._in_flight:
            self.pending.pop(idea_id, None)

    async def refresh(self) -> None:
        """Discard optimistic state and reload every count from the server."""
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self.pending.clear()
        try:
            self.shadow = dict(await self._reload())
        except Exception:
            logger.exception("Reloading idea votes failed")

    async def drain(self) -> None:
        """Wait for every scheduled and in-flight write to settle."""
        while self._timers or self._in_flight:
            await asyncio.gather(*self._timers.values(), *self._in_flight, return_exceptions=True)

    def close(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
