"""Cache key validation and prefixing."""

import re
from collections.abc import Iterable
from functools import lru_cache
from typing import Any
from typing import Optional

from cachex_core.config import CacheConfig
from cachex_core.exceptions import InvalidKeyError
from cachex_core.types import ALLOWED_CHARACTERS
from cachex_core.types import MAX_KEY_LENGTH
from cachex_core.types import RESERVED_CHARACTERS
from cachex_core.types import ErrorContext


@lru_cache(maxsize=32)
def _key_pattern(allowed: str) -> re.Pattern[str]:
    return re.compile(f"[{allowed}]+")


def validate_key(
    key: Any,
    allowed: str = ALLOWED_CHARACTERS,
    reserved: str = RESERVED_CHARACTERS,
    max_length: int = MAX_KEY_LENGTH,
    prefix: str = "",
    context: ErrorContext = ErrorContext.POOL,
) -> str:
    """Validate a cache key and return it prefixed.

    Args:
        key: The key to validate
        allowed: Body of a regex character class the whole key must match
        reserved: Characters the key must not contain
        max_length: Maximum number of characters allowed
        prefix: Prepended to the key once validated
        context: Convention carried by a raised InvalidKeyError

    Returns:
        The prefixed key

    Raises:
        TypeError: If the key is not a string
        InvalidKeyError: If the key breaks one of the character or length rules
    """
    if not isinstance(key, str):
        msg = f"Key given MUST be a string. '{type(key).__name__}' given"
        raise TypeError(msg)

    if _key_pattern(allowed).fullmatch(key) is None:
        msg = f"This key '{key}' is invalid. Supported characters : '{allowed}'"
        raise InvalidKeyError(msg, context)

    found = [char for char in key if char in reserved]
    if found:
        msg = (
            f"This key '{key}' contains reserved characters '{''.join(found)}' "
            f"from list '{reserved}'"
        )
        raise InvalidKeyError(msg, context)

    if len(key) > max_length:
        msg = f"Max characters allowed for cache key '{key}' reached. Max set to '{max_length}'"
        raise InvalidKeyError(msg, context)

    return prefix + key


def validate_keys(
    keys: Any,
    allowed: str = ALLOWED_CHARACTERS,
    reserved: str = RESERVED_CHARACTERS,
    max_length: int = MAX_KEY_LENGTH,
    prefix: str = "",
    context: ErrorContext = ErrorContext.POOL,
) -> list[str]:
    """Validate a collection of keys, see :func:`validate_key`.

    Raises:
        TypeError: If keys is a string or not iterable, or holds a non-string
        InvalidKeyError: On the first invalid key
    """
    if isinstance(keys, (str, bytes)) or not isinstance(keys, Iterable):
        msg = f"Keys given MUST be an iterable of strings. '{type(keys).__name__}' given"
        raise TypeError(msg)

    return [
        validate_key(key, allowed, reserved, max_length, prefix, context)
        for key in keys
    ]


class KeyValidator:
    """Key validation bound to the rules of a CacheConfig."""

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        context: Optional[ErrorContext] = None,
    ) -> None:
        self.config = config or CacheConfig()
        self.context = context or self.config.error_context

    def validate(self, key: Any) -> str:
        return validate_key(
            key,
            self.config.allowed_characters,
            self.config.reserved_characters,
            self.config.max_key_length,
            self.config.key_prefix,
            self.context,
        )

    def validate_many(self, keys: Any) -> list[str]:
        return validate_keys(
            keys,
            self.config.allowed_characters,
            self.config.reserved_characters,
            self.config.max_key_length,
            self.config.key_prefix,
            self.context,
        )

    def strip_prefix(self, key: str) -> str:
        """Return a stored key without the configured prefix."""
        prefix = self.config.key_prefix
        return key[len(prefix) :] if prefix and key.startswith(prefix) else key
