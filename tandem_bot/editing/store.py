"""Short-lived storage for in-progress edit sessions.

Sessions are JSON strings kept under ``<workflow>_edit_session:<user_id>``
with a TTL; an expired key simply reads back as ``None``.  Production uses
Redis, tests and single-process deployments use :class:`MemorySessionStore`.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional, Protocol

import redis.asyncio as aioredis

LOGGER = logging.getLogger(__name__)

SESSION_TTL_SECONDS = 1800
SESSION_KEY_SUFFIX = "_edit_session"


def make_session_key(workflow: str, user_id: int) -> str:
    return f"{workflow}{SESSION_KEY_SUFFIX}:{user_id}"


class SessionStore(Protocol):
    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str, ttl: int) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...

    async def ping(self) -> None:
        ...

    async def close(self) -> None:
        ...


class RedisSessionStore:
    def __init__(self, client: aioredis.Redis) -> None:
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisSessionStore":
        client = aioredis.from_url(url, encoding="utf-8", decode_responses=True)
        return cls(client)

    async def ping(self) -> None:
        await self.client.ping()
        LOGGER.info("Redis session store is reachable")

    async def close(self) -> None:
        await self.client.aclose()

    async def get(self, key: str) -> Optional[str]:
        return await self.client.get(key)

    async def set(self, key: str, value: str, ttl: int) -> None:
        await self.client.setex(key, ttl, value)

    async def delete(self, key: str) -> None:
        await self.client.delete(key)


class MemorySessionStore:
    """Process-local TTL map with the same contract as the Redis store."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[str]:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def _evict_expired(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            LOGGER.debug("Evicted %d expired session(s)", len(expired))

    async def set(self, key: str, value: str, ttl: int) -> None:
        async with self._lock:
            now = self._clock()
            self._evict_expired(now)
            self._entries[key] = (value, now + ttl)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def ping(self) -> None:
        return None

    async def close(self) -> None:
        async with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = [
    "MemorySessionStore",
    "RedisSessionStore",
    "SESSION_TTL_SECONDS",
    "SessionStore",
    "make_session_key",
]
