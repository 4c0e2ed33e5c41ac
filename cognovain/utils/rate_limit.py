import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from cognovain.utils.logger import logger


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    retry_after: Optional[int] = None

    @classmethod
    def allow(cls) -> "RateLimitResult":
        return cls(allowed=True)

    @classmethod
    def deny(cls, retry_after: int) -> "RateLimitResult":
        return cls(allowed=False, retry_after=retry_after)


@dataclass
class RateLimitRecord:
    window_start: float
    count: int


class RateLimiter:
    """
    A fixed-window, in-memory rate limiter guarding the expensive LLM call.
    State lives for the life of the process; records whose window has elapsed
    are swept once the map grows past `max_entries`. If a sweep leaves the map
    full, the next one waits until the map has doubled.
    """
    def __init__(
        self,
        limit: int = 5,
        window_seconds: float = 60,
        retry_after: int = 60,
        max_entries: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self.retry_after = retry_after
        self.max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        # Stores identity -> RateLimitRecord
        self._store: Dict[str, RateLimitRecord] = {}
        self._sweep_at = max_entries

    def check_and_record(self, identity: str) -> RateLimitResult:
        """Counts a request for `identity` and tells whether it may proceed."""
        with self._lock:
            now = self._clock()
            record = self._store.get(identity)

            if record is None:
                if len(self._store) >= self._sweep_at:
                    self._sweep_locked(now)
                    self._sweep_at = max(self.max_entries, 2 * len(self._store))
                self._store[identity] = RateLimitRecord(window_start=now, count=1)
                return RateLimitResult.allow()

            # If the window has expired, reset
            if now - record.window_start >= self.window_seconds:
                record.window_start = now
                record.count = 1
                return RateLimitResult.allow()

            # Below limit in window
            if record.count < self.limit:
                record.count += 1
                return RateLimitResult.allow()

            return RateLimitResult.deny(self.retry_after)

    def get_record(self, identity: str) -> Optional[RateLimitRecord]:
        with self._lock:
            record = self._store.get(identity)
            if record is None:
                return None
            return RateLimitRecord(window_start=record.window_start, count=record.count)

    def sweep(self) -> int:
        """Drops records whose window has elapsed. Returns how many were removed."""
        with self._lock:
            return self._sweep_locked(self._clock())

    def _sweep_locked(self, now: float) -> int:
        expired = [
            identity for identity, record in self._store.items()
            if now - record.window_start >= self.window_seconds
        ]
        for identity in expired:
            del self._store[identity]
        if expired:
            logger.info(f"Rate limiter swept {len(expired)} expired records.")
        return len(expired)

    def reset(self):
        with self._lock:
            self._store.clear()
            self._sweep_at = self.max_entries

    def __len__(self) -> int:
        return len(self._store)
