"""CacheX-Core: value normalization for cache items."""

from .codecs import CompactBinaryCodec as CompactBinaryCodec
from .codecs import PlainCodec as PlainCodec
from .config import CacheConfig as CacheConfig
from .expiration import ExpirationConverter as ExpirationConverter
from .item import CacheItem as CacheItem
from .keys import KeyValidator as KeyValidator
from .keys import validate_key as validate_key
from .pool import CachePool as CachePool
from .proxy import CodecProxy as CodecProxy
from .simple import SimpleCache as SimpleCache
from .types import INFINITE as INFINITE
from .types import ErrorContext as ErrorContext

__all__ = [
    "INFINITE",
    "CacheConfig",
    "CacheItem",
    "CachePool",
    "CodecProxy",
    "CompactBinaryCodec",
    "ErrorContext",
    "ExpirationConverter",
    "KeyValidator",
    "PlainCodec",
    "SimpleCache",
    "validate_key",
]
