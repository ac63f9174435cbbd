"""In-memory implementation of RateCounterStore.

Counters live in a dict keyed by (tool_slug, requester_key, period). Each key
has its own threading.Lock, so requests for different tools or requesters
never wait on each other. State is lost on restart; use it for tests, local
development and single-process deployments.
"""

import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterator, Optional, Tuple

from application.models import Period, UsageCounter

_Key = Tuple[str, str, Period]


class InMemoryRateCounterRepository:
    """Process-local usage counters with per-key locking."""

    def __init__(self) -> None:
        self._counters: Dict[_Key, UsageCounter] = {}
        self._locks: Dict[_Key, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _locked(self, key: _Key) -> Iterator[None]:
        """Hold the lock for `key`.

        Cleanup may retire a key's lock while another thread waits on it, so
        the lock is re-checked after acquiring and the wait repeated if it was
        replaced.
        """
        while True:
            with self._locks_guard:
                lock = self._locks.get(key)
                if lock is None:
                    lock = threading.Lock()
                    self._locks[key] = lock
            lock.acquire()
            if self._locks.get(key) is lock:
                break
            lock.release()
        try:
            yield
        finally:
            lock.release()

    def get(
        self, tool_slug: str, requester_key: str, period: Period
    ) -> Optional[UsageCounter]:
        key = (tool_slug, requester_key, period)
        if key not in self._counters:
            return None
        with self._locked(key):
            counter = self._counters.get(key)
            if counter is None:
                return None
            return UsageCounter(**vars(counter))

    def get_or_create(
        self,
        tool_slug: str,
        requester_key: str,
        period: Period,
        reset_at: datetime,
        now: datetime,
    ) -> UsageCounter:
        key = (tool_slug, requester_key, period)
        with self._locked(key):
            counter = self._live_counter(key, reset_at, now)
            return UsageCounter(**vars(counter))

    def increment_if_below(
        self,
        tool_slug: str,
        requester_key: str,
        period: Period,
        ceiling: int,
        reset_at: datetime,
        now: datetime,
    ) -> Tuple[int, bool]:
        key = (tool_slug, requester_key, period)
        with self._locked(key):
            counter = self._live_counter(key, reset_at, now)
            if counter.count >= ceiling:
                return counter.count, False
            counter.count += 1
            return counter.count, True

    def cleanup(self, now: datetime) -> int:
        """Delete expired counters. Keys busy in another thread are left for the next sweep."""
        deleted = 0
        with self._locks_guard:
            for key in list(self._counters):
                lock = self._locks.get(key)
                if lock is None or not lock.acquire(blocking=False):
                    continue
                try:
                    counter = self._counters.get(key)
                    if counter is not None and counter.reset_at < now:
                        del self._counters[key]
                        del self._locks[key]
                        deleted += 1
                finally:
                    lock.release()
        return deleted

    def _live_counter(self, key: _Key, reset_at: datetime, now: datetime) -> UsageCounter:
        """Existing unexpired counter, or a fresh one. Must hold the key's lock."""
        counter = self._counters.get(key)
        if counter is None or counter.is_expired(now):
            tool_slug, requester_key, period = key
            counter = UsageCounter(
                tool_slug=tool_slug,
                requester_key=requester_key,
                period=period,
                count=0,
                reset_at=reset_at,
            )
            self._counters[key] = counter
        return counter
