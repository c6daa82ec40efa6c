from abc import ABC
from abc import abstractmethod
from collections.abc import AsyncIterator
from typing import Optional


class BaseCacheBackend(ABC):
    """Base class for all storage backends.

    Backends only see prefixed keys and ready-to-store byte strings.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        """Retrieve a stored value, None if missing or expired."""

    @abstractmethod
    async def set(self, key: str, value: bytes) -> bool:
        """Store a value without expiration."""

    @abstractmethod
    async def setex(self, key: str, value: bytes, ttl: int) -> bool:
        """Store a value expiring after ttl seconds."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a value, False if it was not stored."""

    @abstractmethod
    async def ttl(self, key: str) -> Optional[int]:
        """Seconds left, -1 if the key is not stored, None if permanent."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check whether a live value is stored for the key."""

    @abstractmethod
    def keys(self, pattern: Optional[str] = None) -> AsyncIterator[str]:
        """Iterate over stored keys, optionally filtered by a glob pattern."""

    @abstractmethod
    async def flush(self) -> bool:
        """Remove every stored value."""

    @abstractmethod
    def get_namespace(self) -> Optional[str]:
        """Namespace isolating this backend's keys, if any."""

    async def purge(self, prefix: str) -> int:
        """Remove every value whose key starts with prefix, taken literally.

        Returns:
            The number of removed values
        """
        stored_keys = [key async for key in self.keys() if key.startswith(prefix)]
        for stored_key in stored_keys:
            await self.delete(stored_key)
        return len(stored_keys)
