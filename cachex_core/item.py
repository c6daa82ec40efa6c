"""Cache item entity and its wire record."""

import math
from datetime import datetime
from datetime import timedelta
from typing import Any
from typing import Optional
from typing import Union

from .codecs import BaseCodec
from .exceptions import SerializationError
from .expiration import DURATION_TYPES
from .expiration import INSTANT_TYPES
from .expiration import ExpirationConverter
from .expiration import validate_expiration
from .proxy import CodecProxy
from .types import INFINITE
from .types import ErrorContext
from .types import TtlValue

WIRE_VERSION = 1
WIRE_FIELDS = frozenset({"version", "key", "normalized", "value", "ttl", "is_hit"})


def ttl_to_wire(ttl: TtlValue) -> Union[int, float, None]:
    """INFINITE travels as float infinity, None and ints as themselves."""
    return math.inf if ttl is INFINITE else ttl


def ttl_from_wire(value: Any) -> TtlValue:
    if value is None:
        return None
    if isinstance(value, float) and math.isinf(value) and value > 0:
        return INFINITE
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    msg = f"Invalid ttl in cache item record: {value!r}"
    raise SerializationError(msg)


class CacheItem:
    """A key, its value, its time to live and whether it came from a store.

    Non-string values are encoded with the item's codec as soon as they are
    set, so an unsupported value is rejected before the item changes.

    Args:
        key: Cache key, fixed for the life of the item
        codec: Codec for values and the wire record, CodecProxy's default if None
        context: Convention carried by invalid expiration errors
        converter: Expiration converter, one using the system clock if None
    """

    def __init__(
        self,
        key: str,
        codec: Optional[BaseCodec] = None,
        context: ErrorContext = ErrorContext.POOL,
        converter: Optional[ExpirationConverter] = None,
    ) -> None:
        self._key = key
        self.codec = codec or CodecProxy.get_codec()
        self.context = context
        self.converter = converter or ExpirationConverter()

        self._value: Any = None
        # Wire form of the value: the string itself or the codec payload
        self._payload: Union[str, bytes, None] = None
        self._normalized = True
        self._ttl: TtlValue = INFINITE
        self._is_hit = False

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(key={self._key!r}, value={self._value!r}, "
            f"ttl={self._ttl!r}, is_hit={self._is_hit})"
        )

    @property
    def key(self) -> str:
        return self._key

    def get_key(self) -> str:
        return self._key

    def get(self) -> Any:
        return self._value

    def set(self, value: Any) -> "CacheItem":
        """Set the item value.

        Raises:
            SerializationError: If the codec cannot encode the value
        """
        if isinstance(value, str):
            payload: Union[str, bytes] = value
            normalized = False
        else:
            payload = self.codec.encode(value)
            normalized = True

        self._value = value
        self._payload = payload
        self._normalized = normalized
        return self

    @property
    def normalized(self) -> bool:
        return self._normalized

    @property
    def is_hit(self) -> bool:
        return self._is_hit

    def set_hit(self) -> None:
        """Mark the item as found in a store. Meant for the storage layer."""
        self._is_hit = True

    def expires_at(self, expiration: Optional[datetime]) -> "CacheItem":
        """Expire the item at an absolute instant, or never when None.

        Raises:
            InvalidExpirationError: If expiration is neither a datetime nor None
        """
        validate_expiration(expiration, INSTANT_TYPES, self.context)
        self._ttl = self.converter.convert(expiration, self.context)
        return self

    def expires_after(self, time: Union[timedelta, int, None]) -> "CacheItem":
        """Expire the item after a duration or a number of seconds, or never.

        Raises:
            InvalidExpirationError: If time is not a timedelta, an int or None
        """
        validate_expiration(time, DURATION_TYPES, self.context)
        self._ttl = self.converter.convert(time, self.context)
        return self

    @property
    def ttl(self) -> TtlValue:
        return self._ttl

    def get_ttl(self) -> TtlValue:
        """Seconds left, None if it never expires or INFINITE if never set."""
        return self._ttl

    def to_bytes(self, codec: Optional[BaseCodec] = None) -> bytes:
        """Encode the whole item as a record.

        Args:
            codec: Codec for the record, defaults to the item's codec. The
                value payload is re-encoded when it differs.
        """
        codec = codec or self.codec
        payload = self._payload
        if payload is None:
            payload = codec.encode(self._value)
        elif self._normalized and codec.name != self.codec.name:
            payload = codec.encode(self.codec.decode(payload))

        return codec.encode(
            {
                "version": WIRE_VERSION,
                "key": self._key,
                "normalized": self._normalized,
                "value": payload,
                "ttl": ttl_to_wire(self._ttl),
                "is_hit": self._is_hit,
            }
        )

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        codec: Optional[BaseCodec] = None,
        context: ErrorContext = ErrorContext.POOL,
        converter: Optional[ExpirationConverter] = None,
    ) -> "CacheItem":
        """Restore an item encoded by :meth:`to_bytes`.

        Raises:
            SerializationError: If data does not hold a valid item record
        """
        codec = codec or CodecProxy.get_codec()
        record = codec.decode(data)
        if not isinstance(record, dict) or set(record) != WIRE_FIELDS:
            msg = "Payload is not a cache item record"
            raise SerializationError(msg)
        if record["version"] != WIRE_VERSION:
            msg = f"Unsupported cache item record version: {record['version']!r}"
            raise SerializationError(msg)

        key, normalized, payload = record["key"], record["normalized"], record["value"]
        if not isinstance(key, str) or not isinstance(normalized, bool):
            msg = "Malformed cache item record"
            raise SerializationError(msg)
        if normalized and not isinstance(payload, bytes):
            msg = "Normalized value of a cache item record must be bytes"
            raise SerializationError(msg)
        if not normalized and not isinstance(payload, str):
            msg = "Plain value of a cache item record must be a string"
            raise SerializationError(msg)

        item = cls(key, codec=codec, context=context, converter=converter)
        item._value = codec.decode(payload) if normalized else payload
        item._payload = payload
        item._normalized = normalized
        item._ttl = ttl_from_wire(record["ttl"])
        item._is_hit = bool(record["is_hit"])
        return item
