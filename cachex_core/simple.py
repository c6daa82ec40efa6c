"""Key/value cache: plain values in, plain values out.

Values still travel as cache item records, so strings and normalized values
come back exactly as they were stored. Every invalid argument is reported
with ``ErrorContext.SIMPLE``.
"""

from collections.abc import Iterable
from collections.abc import Mapping
from datetime import timedelta
from typing import Any
from typing import Optional
from typing import Union

from .backends import BaseCacheBackend
from .codecs import BaseCodec
from .config import CacheConfig
from .expiration import DURATION_TYPES
from .expiration import ExpirationConverter
from .expiration import validate_expiration
from .item import CacheItem
from .pool import CachePool
from .types import INFINITE
from .types import ErrorContext
from .types import Infinite

SIMPLE_KEY_PREFIX = "cachex_simple_"

Ttl = Union[Infinite, timedelta, int, None]


class SimpleCache:
    """Get, set and delete values by key over a storage backend.

    Args:
        backend: Storage backend, a fresh MemoryBackend if None
        config: Key rules, prefix and codec choice. Its error context is
            replaced by ``ErrorContext.SIMPLE``
        codec: Overrides the codec named by the config
        converter: Expiration converter used for every ttl
        default_ttl: Ttl applied when a write does not give one, None for
            no expiration
        namespace: Appended to the default key prefix when no config is given
    """

    def __init__(
        self,
        backend: Optional[BaseCacheBackend] = None,
        config: Optional[CacheConfig] = None,
        codec: Optional[BaseCodec] = None,
        converter: Optional[ExpirationConverter] = None,
        default_ttl: Union[timedelta, int, None] = None,
        namespace: str = "global",
    ) -> None:
        if config is None:
            config = CacheConfig(key_prefix=f"{SIMPLE_KEY_PREFIX}{namespace}_")
        config = config.model_copy(update={"error_context": ErrorContext.SIMPLE})

        validate_expiration(default_ttl, DURATION_TYPES, ErrorContext.SIMPLE)
        self.default_ttl = default_ttl
        self.pool = CachePool(backend, config, codec, converter)

    @property
    def context(self) -> ErrorContext:
        return self.pool.validator.context

    async def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value, or default when the key is missing.

        Raises:
            TypeError: If the key is not a string
            InvalidKeyError: If the key is invalid
        """
        item = await self.pool.get_item(key)
        return item.get() if item.is_hit else default

    async def set(self, key: str, value: Any, ttl: Ttl = INFINITE) -> bool:
        """Store a value, expiring after ttl (INFINITE means the default ttl).

        Raises:
            TypeError: If the key is not a string
            InvalidKeyError: If the key is invalid
            InvalidExpirationError: If ttl is not a timedelta, an int or None
            SerializationError: If the value cannot be encoded
        """
        self.pool.validator.validate(key)
        return await self.pool.save(self._new_item(key, value, ttl))

    async def delete(self, key: str) -> bool:
        return await self.pool.delete_item(key)

    async def clear(self) -> bool:
        """Delete every value stored under this cache's key prefix."""
        return await self.pool.clear()

    async def get_multiple(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        """Map each key to its stored value or to default.

        Raises:
            TypeError: If keys is a string or not iterable
            InvalidKeyError: If any key is invalid, before anything is read
        """
        items = await self.pool.get_items(keys)
        return {key: item.get() if item.is_hit else default for key, item in items.items()}

    async def set_multiple(self, values: Mapping[str, Any], ttl: Ttl = INFINITE) -> bool:
        """Store every value of a key/value mapping with the same ttl.

        Keys, ttl and values are all checked before anything is written.
        """
        if not isinstance(values, Mapping):
            msg = f"Values MUST be a mapping. '{type(values).__name__}' given"
            raise TypeError(msg)

        self.pool.validator.validate_many(list(values))
        items = [self._new_item(key, value, ttl) for key, value in values.items()]
        results = [await self.pool.save(item) for item in items]
        return all(results)

    async def delete_multiple(self, keys: Iterable[str]) -> bool:
        return await self.pool.delete_items(keys)

    async def has(self, key: str) -> bool:
        return await self.pool.has_item(key)

    def _new_item(self, key: str, value: Any, ttl: Ttl) -> CacheItem:
        if ttl is INFINITE:
            ttl = self.default_ttl
        item = CacheItem(
            key,
            codec=self.pool.codec,
            context=self.context,
            converter=self.pool.converter,
        )
        return item.expires_after(ttl).set(value)
