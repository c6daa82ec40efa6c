import asyncio
import math
import time
from collections.abc import AsyncIterator
from fnmatch import fnmatchcase
from logging import getLogger
from typing import Optional

from cachex_core.types import StoredEntry

from .base import BaseCacheBackend

logger = getLogger(__name__)


class MemoryBackend(BaseCacheBackend):
    """In-memory storage backend implementation."""

    def __init__(self, namespace: Optional[str] = None) -> None:
        self.cache: dict[str, StoredEntry] = {}
        self.lock = asyncio.Lock()
        self.cleanup_interval = 60
        self.namespace = namespace
        self._cleanup: asyncio.Task[None] | None = None

    def _physical(self, key: str) -> str:
        return f"{self.namespace}:{key}" if self.namespace else key

    def _logical(self, key: str) -> str:
        return key[len(self.namespace) + 1 :] if self.namespace else key

    @staticmethod
    def _is_live(entry: StoredEntry, now: float) -> bool:
        return entry.expiry is None or entry.expiry > now

    async def get(self, key: str) -> Optional[bytes]:
        async with self.lock:
            entry = self.cache.get(self._physical(key))
            if entry and self._is_live(entry, time.time()):
                return entry.value
            return None

    async def set(self, key: str, value: bytes) -> bool:
        async with self.lock:
            self.cache[self._physical(key)] = StoredEntry(value=value)
            return True

    async def setex(self, key: str, value: bytes, ttl: int) -> bool:
        # A non-positive ttl stores an entry that is already expired
        async with self.lock:
            self.cache[self._physical(key)] = StoredEntry(
                value=value, expiry=time.time() + ttl
            )
            return True

    async def delete(self, key: str) -> bool:
        async with self.lock:
            return self.cache.pop(self._physical(key), None) is not None

    async def ttl(self, key: str) -> Optional[int]:
        async with self.lock:
            entry = self.cache.get(self._physical(key))
            now = time.time()
            if entry is None or not self._is_live(entry, now):
                return -1
            if entry.expiry is None:
                return None
            return math.ceil(entry.expiry - now)

    async def exists(self, key: str) -> bool:
        return await self.get(key) is not None

    async def keys(self, pattern: Optional[str] = None) -> AsyncIterator[str]:
        async with self.lock:
            now = time.time()
            prefix = f"{self.namespace}:" if self.namespace else ""
            found = [
                self._logical(k)
                for k, v in self.cache.items()
                if k.startswith(prefix) and self._is_live(v, now)
            ]
        for key in found:
            if pattern is None or fnmatchcase(key, pattern):
                yield key

    async def flush(self) -> bool:
        async with self.lock:
            if self.namespace:
                prefix = f"{self.namespace}:"
                for key in [k for k in self.cache if k.startswith(prefix)]:
                    del self.cache[key]
            else:
                self.cache.clear()
            return True

    def get_namespace(self) -> Optional[str]:
        return self.namespace

    def start_cleanup(self) -> None:
        """Start the periodic removal of expired entries."""
        if self._cleanup is None or self._cleanup.done():
            self._cleanup = asyncio.get_running_loop().create_task(
                self._cleanup_task()
            )

    def stop_cleanup(self) -> None:
        if self._cleanup is not None:
            self._cleanup.cancel()
            self._cleanup = None

    async def _cleanup_task(self) -> None:
        while True:
            await asyncio.sleep(self.cleanup_interval)
            await self.cleanup()

    async def cleanup(self) -> None:
        async with self.lock:
            now = time.time()
            expired_keys = [
                k for k, v in self.cache.items() if not self._is_live(v, now)
            ]
            for key in expired_keys:
                self.cache.pop(key, None)
        if expired_keys:
            logger.debug("Removed %d expired entries", len(expired_keys))
