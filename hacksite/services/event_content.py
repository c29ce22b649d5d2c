"""
Event content: title, schedule and prizes from the headless CMS.

The CMS is read-only from our side.  Responses are cached for
``CMS_CACHE_SECONDS``; any HTTP or transport failure is logged and reported
as "no event" so pages degrade instead of erroring.
"""

import logging
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import requests

from hacksite.config import settings

logger = logging.getLogger(__name__)

SCHEDULE_SORT = ["date:asc", "time:asc"]

# Cap on cached events, current plus one per looked-up slug
MAX_CACHED_EVENTS = 32


def current_event_params() -> Dict[str, Any]:
    """Query for the single event flagged ``is_current``."""
    params: Dict[str, Any] = {
        "filters[is_current][$eq]": "true",
        "pagination[limit]": 1,
    }
    for i, key in enumerate(SCHEDULE_SORT):
        params[f"populate[schedule_items][sort][{i}]"] = key
    return params


def slug_params(slug: str) -> Dict[str, Any]:
    params: Dict[str, Any] = {"filters[slug][$eq]": slug}
    for i, key in enumerate(SCHEDULE_SORT):
        params[f"populate[schedule_items][sort][{i}]"] = key
    return params


def rich_text_to_plain(nodes: Union[List[dict], str, None]) -> str:
    """Flatten CMS rich-text blocks to a single line of text."""
    if isinstance(nodes, str):
        return nodes
    if not isinstance(nodes, list):
        return ""

    parts = []
    for node in nodes:
        if not isinstance(node, dict):
            continue
        if node.get("text"):
            parts.append(node["text"])
        elif node.get("children"):
            parts.append(rich_text_to_plain(node["children"]))
    return " ".join(" ".join(parts).split())


def normalize_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """Guarantee list-valued schedule/prizes and a present description."""
    schedule = event.get("schedule_items")
    prizes = event.get("prizes")
    return {
        **event,
        "description": event.get("description") or [],
        "schedule_items": schedule if isinstance(schedule, list) else [],
        "prizes": prizes if isinstance(prizes, list) else [],
    }


def group_schedule(items: List[Dict[str, Any]]) -> "OrderedDict[str, List[Dict[str, Any]]]":
    """Schedule items bucketed by their ``date`` (YYYY-MM-DD), CMS order kept."""
    grouped: "OrderedDict[str, List[Dict[str, Any]]]" = OrderedDict()
    for item in items:
        grouped.setdefault(item.get("date") or "TBA", []).append(item)
    return grouped


class EventContent:
    def __init__(
        self,
        base_url: str = settings.CMS_URL,
        ttl: float = settings.CMS_CACHE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
        max_entries: int = MAX_CACHED_EVENTS,
    ):
        self.base_url = base_url.rstrip("/")
        self.ttl = ttl
        self.timeout = timeout
        self.max_entries = max_entries
        self._clock = clock
        self._session = session or requests.Session()
        self._cache: Dict[str, Tuple[float, Optional[Dict[str, Any]]]] = {}

    def _fetch_first(self, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            resp = self._session.get(
                f"{self.base_url}/api/hackathons",
                params=params,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"CMS request failed: {e}")
            return None

        if not resp.ok:
            logger.error(f"CMS fetch failed: {resp.status_code} {resp.text}")
            return None

        try:
            data = resp.json().get("data") or []
        except ValueError as e:
            logger.error(f"CMS returned invalid JSON: {e}")
            return None

        if not data:
            return None
        return normalize_event(data[0])

    def _cached(self, key: str, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        now = self._clock()
        hit = self._cache.get(key)
        if hit and now - hit[0] < self.ttl:
            return hit[1]

        event = self._fetch_first(params)
        # Failures are not cached so the next request retries the CMS
        if event is not None:
            self._store(key, now, event)
        return event

    def _store(self, key: str, now: float, event: Dict[str, Any]) -> None:
        self._cache.pop(key, None)
        for stale in [k for k, (at, _) in self._cache.items() if now - at >= self.ttl]:
            del self._cache[stale]
        while len(self._cache) >= self.max_entries:
            # Oldest insertion goes first
            del self._cache[next(iter(self._cache))]
        self._cache[key] = (now, event)

    def current(self) -> Optional[Dict[str, Any]]:
        """The event marked ``is_current`` in the CMS, or None."""
        event = self._cached("current", current_event_params())
        if event is None:
            logger.warning("No current hackathon found (is_current = true)")
        return event

    def by_slug(self, slug: str) -> Optional[Dict[str, Any]]:
        return self._cached(f"slug:{slug}", slug_params(slug))

    def clear(self) -> None:
        self._cache.clear()
