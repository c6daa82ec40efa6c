"""Type definitions and type aliases for CacheX-Core."""

from dataclasses import dataclass
from enum import Enum
from typing import Literal
from typing import Union

# Key rules shared by the pool and the simple cache
ALLOWED_CHARACTERS = r"A-Za-z0-9_.{}()/\@:"
RESERVED_CHARACTERS = r"{}()/\@:"
MAX_KEY_LENGTH = 64


class Infinite(Enum):
    """Sentinel TTL of an item whose expiration was never touched."""

    INFINITE = "infinite"

    def __repr__(self) -> str:
        return "INFINITE"


INFINITE = Infinite.INFINITE

# INFINITE (untouched), None (explicitly never expires) or seconds left
TtlValue = Union[Literal[Infinite.INFINITE], None, int]


class ErrorContext(str, Enum):
    """Client-facing convention used to report invalid arguments."""

    POOL = "pool"
    SIMPLE = "simple"


@dataclass
class StoredEntry:
    """Raw bytes held by a backend with optional expiry time.

    Args:
        value: The stored byte string
        expiry: Epoch timestamp when this entry expires (None = never expires)
    """

    value: bytes
    expiry: float | None = None
