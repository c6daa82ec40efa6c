"""Item pool storing CacheItems into a storage backend."""

from collections.abc import Iterable
from logging import getLogger
from typing import Optional

from .backends import BaseCacheBackend
from .backends import MemoryBackend
from .codecs import BaseCodec
from .codecs import get_codec
from .config import CacheConfig
from .exceptions import SerializationError
from .expiration import ExpirationConverter
from .item import CacheItem
from .keys import KeyValidator
from .types import INFINITE

logger = getLogger(__name__)


class CachePool:
    """Validate keys, persist items through their wire record and mark hits.

    Args:
        backend: Storage backend, a fresh MemoryBackend if None
        config: Key rules, prefix and codec choice
        codec: Overrides the codec named by the config
        converter: Expiration converter handed to the items this pool creates
    """

    def __init__(
        self,
        backend: Optional[BaseCacheBackend] = None,
        config: Optional[CacheConfig] = None,
        codec: Optional[BaseCodec] = None,
        converter: Optional[ExpirationConverter] = None,
    ) -> None:
        if backend is None:
            # Fallback to memory backend if no backend is given
            backend = MemoryBackend()
            logger.info("No backend given, using <%s>", backend.__class__.__name__)

        self.backend = backend
        self.config = config or CacheConfig()
        self.codec = codec or get_codec(self.config.codec)
        self.converter = converter or ExpirationConverter()
        self.validator = KeyValidator(self.config)
        self.deferred: dict[str, CacheItem] = {}

    def _new_item(self, key: str) -> CacheItem:
        return CacheItem(
            key,
            codec=self.codec,
            context=self.validator.context,
            converter=self.converter,
        )

    async def _fetch(self, key: str, stored_key: str) -> CacheItem:
        if stored_key in self.deferred:
            # A pending save reads back as a hit, detached from the queued item
            item = CacheItem.from_bytes(
                self.deferred[stored_key].to_bytes(self.codec),
                codec=self.codec,
                context=self.validator.context,
                converter=self.converter,
            )
            item.set_hit()
            logger.debug("Deferred hit for <%s>", key)
            return item

        data = await self.backend.get(stored_key)
        if data is None:
            logger.debug("Cache miss for <%s>", key)
            return self._new_item(key)

        try:
            item = CacheItem.from_bytes(
                data,
                codec=self.codec,
                context=self.validator.context,
                converter=self.converter,
            )
        except SerializationError as e:
            logger.warning("Cannot restore cache item <%s>: %s", key, e)
            return self._new_item(key)

        item.set_hit()
        logger.debug("Cache hit for <%s>", key)
        return item

    async def get_item(self, key: str) -> CacheItem:
        """Return the stored item, or a new unhit item for the key.

        Raises:
            TypeError: If the key is not a string
            InvalidKeyError: If the key is invalid
        """
        return await self._fetch(key, self.validator.validate(key))

    async def get_items(self, keys: Iterable[str]) -> dict[str, CacheItem]:
        if isinstance(keys, Iterable) and not isinstance(keys, (str, bytes)):
            keys = list(keys)
        stored_keys = self.validator.validate_many(keys)
        return {
            key: await self._fetch(key, stored_key)
            for key, stored_key in zip(keys, stored_keys)
        }

    async def has_item(self, key: str) -> bool:
        stored_key = self.validator.validate(key)
        return stored_key in self.deferred or await self.backend.exists(stored_key)

    async def save(self, item: CacheItem) -> bool:
        """Persist an item, with expiration when its ttl is a number of seconds.

        A negative ttl is handed to the backend unchanged.
        """
        stored_key = self.validator.validate(item.key)
        data = item.to_bytes(self.codec)
        ttl = item.get_ttl()
        self.deferred.pop(stored_key, None)

        if ttl is INFINITE or ttl is None:
            return await self.backend.set(stored_key, data)
        return await self.backend.setex(stored_key, data, ttl)

    def save_deferred(self, item: CacheItem) -> bool:
        self.deferred[self.validator.validate(item.key)] = item
        return True

    async def commit(self) -> bool:
        """Save every deferred item, True if all of them were stored."""
        items = list(self.deferred.values())
        results = [await self.save(item) for item in items]
        return all(results)

    async def delete_item(self, key: str) -> bool:
        stored_key = self.validator.validate(key)
        self.deferred.pop(stored_key, None)
        return await self.backend.delete(stored_key)

    async def delete_items(self, keys: Iterable[str]) -> bool:
        stored_keys = self.validator.validate_many(keys)
        results = []
        for stored_key in stored_keys:
            self.deferred.pop(stored_key, None)
            results.append(await self.backend.delete(stored_key))
        return all(results)

    async def clear(self) -> bool:
        """Delete every item stored under this pool's key prefix."""
        self.deferred.clear()
        prefix = self.config.key_prefix
        if not prefix:
            return await self.backend.flush()

        count = await self.backend.purge(prefix)
        logger.debug("Cleared %d items with prefix <%s>", count, prefix)
        return True
