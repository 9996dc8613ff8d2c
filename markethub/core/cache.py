"""In-process TTL cache with one in-flight computation per key."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from markethub.core.logging import get_logger

log = get_logger("core.cache")


@dataclass
class CacheEntry:
    key: str
    value: Any
    computed_at: float
    expires_at: float


class SingleFlightCache:
    """Memoizes async factories for a TTL.

    Callers that arrive while a computation for the same key is pending await
    that computation instead of starting their own, and all of them see its
    outcome. Failures are never stored, so the next caller after a failure
    starts a fresh computation.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._inflight: Dict[str, asyncio.Task] = {}

    def peek(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry and entry.expires_at > self._clock():
            return entry
        return None

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    async def get_or_create(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
        ttl: float,
    ) -> Any:
        entry = self.peek(key)
        if entry is not None:
            return entry.value

        task = self._inflight.get(key)
        if task is None:
            log.debug(f"Cache miss for {key}; starting computation")
            task = asyncio.ensure_future(self._compute(key, factory, ttl))
            task.add_done_callback(_consume_outcome)
            self._inflight[key] = task
        else:
            log.debug(f"Joining in-flight computation for {key}")

        # shield: one caller being cancelled must not cancel the shared flight
        return await asyncio.shield(task)

    async def _compute(self, key: str, factory: Callable[[], Awaitable[Any]], ttl: float) -> Any:
        try:
            value = await factory()
            now = self._clock()
            self._entries[key] = CacheEntry(key=key, value=value, computed_at=now, expires_at=now + ttl)
            return value
        finally:
            self._inflight.pop(key, None)


def _consume_outcome(task: asyncio.Task) -> None:
    # Marks the exception as retrieved when every waiter was cancelled
    if not task.cancelled():
        task.exception()
