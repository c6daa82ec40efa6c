import io
import socket
import threading
import types
from abc import ABC
from abc import abstractmethod
from datetime import date
from datetime import datetime
from datetime import time
from datetime import timedelta
from decimal import Decimal
from typing import Any
from uuid import UUID

from cachex_core.exceptions import SerializationError

RESOURCE_TYPES: tuple[type, ...] = (
    io.IOBase,
    socket.socket,
    types.GeneratorType,
    types.AsyncGeneratorType,
    types.CoroutineType,
    types.FunctionType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.ModuleType,
    type(threading.Lock()),
    type(threading.RLock()),
)


def is_resource(value: Any) -> bool:
    """Return True for handles and callables that cannot be cached."""
    return isinstance(value, RESOURCE_TYPES)


def ensure_not_resource(value: Any) -> None:
    if is_resource(value):
        msg = f"Impossible to serialize resource value of type '{type(value).__name__}'"
        raise SerializationError(msg)


def dump_timedelta(value: timedelta) -> list[int]:
    return [value.days, value.seconds, value.microseconds]


def load_timedelta(payload: list[int]) -> timedelta:
    days, seconds, microseconds = payload
    return timedelta(days=days, seconds=seconds, microseconds=microseconds)


# Scalars without a native representation, as (tag, type, dump, load).
# datetime comes before date since it subclasses it.
EXTENDED_SCALARS: tuple[tuple[str, type, Any, Any], ...] = (
    ("datetime", datetime, datetime.isoformat, datetime.fromisoformat),
    ("date", date, date.isoformat, date.fromisoformat),
    ("time", time, time.isoformat, time.fromisoformat),
    ("timedelta", timedelta, dump_timedelta, load_timedelta),
    ("decimal", Decimal, str, Decimal),
    ("uuid", UUID, str, UUID),
)


class BaseCodec(ABC):
    """Base class for all value codecs."""

    name: str

    @abstractmethod
    def encode(self, value: Any) -> bytes:
        """Encode a value into a byte string.

        Raises:
            SerializationError: If the value cannot be represented
        """

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """Restore a value, returning data unchanged when it is not an encoding."""
