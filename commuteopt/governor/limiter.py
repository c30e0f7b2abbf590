"""
Per-client request governor for the directions proxy
"""

import logging
import math
import threading
import zlib
from datetime import datetime, time, timedelta
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from .store import InMemoryStore, KeyValueStore

SHORT_WINDOW_SECONDS = 60
SHORT_WINDOW_LIMIT = 60
DAILY_LIMIT = 1000

# Clients share this many locks; a client always maps to the same one
LOCK_STRIPES = 64


def seconds_per_request(per_window: int = SHORT_WINDOW_LIMIT, window_seconds: int = SHORT_WINDOW_SECONDS) -> float:
    """Smallest spacing between requests that never trips the short window"""
    return window_seconds / per_window


class RateLimitEntry(BaseModel):
    """Counters for one client identity"""

    count: int = Field(0, ge=0, description="Requests in the current short window")
    window_start: float = Field(..., description="Short window start (epoch seconds)")
    daily_count: int = Field(0, ge=0, description="Requests on the recorded day")
    day: str = Field(..., description="Calendar day of the daily counter (ISO date)")


class GovernorDecision(BaseModel):
    """Outcome of a governor check"""

    allowed: bool
    reason: Optional[str] = None
    retry_after: Optional[int] = Field(None, description="Seconds until the short window resets")

    @classmethod
    def allow(cls) -> "GovernorDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str, retry_after: Optional[int] = None) -> "GovernorDecision":
        return cls(allowed=False, reason=reason, retry_after=retry_after)


class RequestGovernor:
    """
    Caps requests per client with a short sliding window and a calendar-day quota
    Denied requests never consume quota
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        per_window: int = SHORT_WINDOW_LIMIT,
        window_seconds: int = SHORT_WINDOW_SECONDS,
        per_day: int = DAILY_LIMIT,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store if store is not None else InMemoryStore()
        self.per_window = per_window
        self.window_seconds = window_seconds
        self.per_day = per_day
        self.clock = clock or datetime.now
        self.logger = logging.getLogger(__name__)

        self._locks: List[threading.Lock] = [threading.Lock() for _ in range(LOCK_STRIPES)]

    def _lock_for(self, client_id: str) -> threading.Lock:
        return self._locks[zlib.crc32(client_id.encode("utf-8")) % len(self._locks)]

    def _entry_ttl(self, now: datetime) -> float:
        """Keep an entry until both its short window and its calendar day are over"""
        midnight = datetime.combine(now.date() + timedelta(days=1), time.min, tzinfo=now.tzinfo)
        return max(float(self.window_seconds), (midnight - now).total_seconds())

    def check(self, client_id: str) -> GovernorDecision:
        """
        Decide whether a client may make one more request

        Args:
            client_id: Client identity (the caller's IP address)

        Returns:
            GovernorDecision; counters are incremented only when allowed
        """
        key = f"ratelimit:{client_id}"

        # Check and increment form one step per client
        with self._lock_for(client_id):
            now = self.clock()
            timestamp = now.timestamp()
            today = now.date().isoformat()

            data = self.store.get(key)
            if data is None:
                entry = RateLimitEntry(window_start=timestamp, day=today)
            else:
                entry = RateLimitEntry(**data)

            if timestamp - entry.window_start >= self.window_seconds:
                entry.count = 0
                entry.window_start = timestamp

            if entry.day != today:
                entry.daily_count = 0
                entry.day = today

            if entry.daily_count >= self.per_day:
                decision = GovernorDecision.deny("Daily limit reached. Try again tomorrow.")
            elif entry.count >= self.per_window:
                retry_after = math.ceil(entry.window_start + self.window_seconds - timestamp)
                decision = GovernorDecision.deny(
                    f"Rate limit exceeded. Try again in {retry_after} seconds.",
                    retry_after=retry_after,
                )
            else:
                entry.count += 1
                entry.daily_count += 1
                decision = GovernorDecision.allow()

            self.store.set(key, entry.model_dump(), ttl_seconds=self._entry_ttl(now))

        if not decision.allowed:
            self.logger.warning(f"Rate limited client {client_id}: {decision.reason}")
        return decision
