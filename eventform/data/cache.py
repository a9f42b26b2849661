"""Process-wide dataset cache with in-flight load tracking.

Every form in the process shares one ``ResourceCache`` so that several
forms on a page pay the network cost of a dataset once. Entries expire
after a TTL chosen by the reader and are evicted lazily on read.
"""

import asyncio
import time
from collections.abc import Callable
from typing import Any

from eventform.data.models import CacheEntry, ResourceKey
from eventform.observability.logging import get_logger

logger = get_logger(__name__)

Clock = Callable[[], float]


class ResourceCache:
    """TTL cache and in-flight registry keyed by ``ResourceKey``.

    The clock is injected (epoch seconds) so TTL behavior can be tested
    without real timers.
    """

    def __init__(self, clock: Clock = time.time) -> None:
        self._clock = clock
        self._entries: dict[ResourceKey, CacheEntry] = {}
        self._in_flight: dict[ResourceKey, asyncio.Task[Any]] = {}

    def now(self) -> float:
        return self._clock()

    def get(self, key: ResourceKey, ttl_hours: float) -> Any | None:
        """Return cached data for ``key`` if it is still fresh.

        A stale entry is deleted and None is returned.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_fresh(self._clock(), ttl_hours):
            logger.debug("dataset_cache_hit", resource=key.value)
            return entry.data

        del self._entries[key]
        logger.debug("dataset_cache_expired", resource=key.value)
        return None

    def set(self, key: ResourceKey, data: Any) -> CacheEntry:
        entry = CacheEntry(key=key, data=data, timestamp=self._clock())
        self._entries[key] = entry
        return entry

    def invalidate(self, key: ResourceKey) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Drop every cached entry. Pending loads are left to settle."""
        self._entries.clear()

    def __contains__(self, key: ResourceKey) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    # In-flight loads

    def in_flight(self, key: ResourceKey) -> asyncio.Task[Any] | None:
        return self._in_flight.get(key)

    def track(self, key: ResourceKey, task: asyncio.Task[Any]) -> asyncio.Task[Any]:
        """Register a pending load; it is removed as soon as it settles."""
        self._in_flight[key] = task

        def _settled(done: asyncio.Task[Any]) -> None:
            if self._in_flight.get(key) is done:
                del self._in_flight[key]

        task.add_done_callback(_settled)
        return task

    def release(self, key: ResourceKey) -> None:
        """Remove the pending load of the running task for ``key``."""
        task = self._in_flight.get(key)
        if task is not None and task is asyncio.current_task():
            del self._in_flight[key]

    def pending(self) -> list[ResourceKey]:
        return list(self._in_flight)

    def reset(self) -> None:
        """Forget every entry and pending load."""
        self._entries.clear()
        self._in_flight.clear()


_shared_cache = ResourceCache()


def shared_cache() -> ResourceCache:
    """The cache shared by every loader in the process."""
    return _shared_cache
