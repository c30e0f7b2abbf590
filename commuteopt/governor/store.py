"""
Key-value storage for rate limit state
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

SWEEP_INTERVAL_SECONDS = 60


class KeyValueStore(ABC):
    """Minimal store interface so a shared backend can replace process memory"""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Get a value, or None if missing or expired"""

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        """Store a value, optionally expiring after ttl_seconds"""


class InMemoryStore(KeyValueStore):
    """
    Process-local store with per-key expiry
    State is lost on restart and not shared between processes.
    Expired keys are swept from writes at most once per sweep interval.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        sweep_interval: float = SWEEP_INTERVAL_SECONDS,
    ):
        self.clock = clock or time.monotonic
        self.sweep_interval = sweep_interval
        self._data: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._lock = threading.Lock()
        self._next_sweep = self.clock() + sweep_interval

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            item = self._data.get(key)
            if item is None:
                return None

            value, expires_at = item
            if expires_at is not None and self.clock() >= expires_at:
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        now = self.clock()
        expires_at = now + ttl_seconds if ttl_seconds is not None else None
        with self._lock:
            self._data[key] = (value, expires_at)
            if now >= self._next_sweep:
                self._sweep(now)

    def _sweep(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self._data.items() if expires_at is not None and now >= expires_at]
        for key in expired:
            del self._data[key]
        self._next_sweep = now + self.sweep_interval

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
