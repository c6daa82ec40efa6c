"""Binary codec built on MessagePack.

Wire format: ``COMPACT_HEADER`` (0xc1 is never emitted by MessagePack, the
second byte is the format version) followed by one MessagePack object.
``None`` always encodes to ``COMPACT_NULL``. Types MessagePack lacks travel
as extension types whose data is itself a MessagePack object.
"""

from datetime import date
from datetime import datetime
from datetime import time
from datetime import timedelta
from decimal import Decimal
from logging import getLogger
from typing import Any
from uuid import UUID

from cachex_core.exceptions import CodecUnavailableError
from cachex_core.exceptions import SerializationError

from .base import BaseCodec
from .base import dump_timedelta
from .base import ensure_not_resource
from .base import load_timedelta

COMPACT_HEADER = b"\xc1\x01"
COMPACT_NULL = COMPACT_HEADER + b"\xc0"

# Extension type codes
EXT_TUPLE = 1
EXT_SET = 2
EXT_FROZENSET = 3
EXT_DATETIME = 4
EXT_DATE = 5
EXT_TIME = 6
EXT_TIMEDELTA = 7
EXT_DECIMAL = 8
EXT_UUID = 9
EXT_BYTEARRAY = 10

logger = getLogger(__name__)


class CompactBinaryCodec(BaseCodec):
    """Compact codec, requires the ``msgpack`` package."""

    name = "compact"

    def __init__(self) -> None:
        try:
            import msgpack
        except ImportError as e:
            msg = "msgpack is not installed. Install it with: pip install cachex-core[compact]"
            raise CodecUnavailableError(msg) from e

        self._msgpack = msgpack
        # code -> (type of the unpacked ext data, loader)
        self._loaders = {
            EXT_TUPLE: (list, tuple),
            EXT_SET: (list, set),
            EXT_FROZENSET: (list, frozenset),
            EXT_DATETIME: (str, datetime.fromisoformat),
            EXT_DATE: (str, date.fromisoformat),
            EXT_TIME: (str, time.fromisoformat),
            EXT_TIMEDELTA: (list, load_timedelta),
            EXT_DECIMAL: (str, Decimal),
            EXT_UUID: (bytes, lambda payload: UUID(bytes=payload)),
            EXT_BYTEARRAY: (bytes, bytearray),
        }

    def encode(self, value: Any) -> bytes:
        ensure_not_resource(value)
        if value is None:
            return COMPACT_NULL

        try:
            return COMPACT_HEADER + self._pack(value)
        except SerializationError:
            raise
        except (OverflowError, RecursionError, TypeError, ValueError) as e:
            msg = f"Cannot serialize value of type '{type(value).__name__}': {e}"
            raise SerializationError(msg) from e

    def decode(self, data: bytes) -> Any:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            return data
        data = bytes(data)
        if not data:
            return data
        if data == COMPACT_NULL:
            return None
        if not data.startswith(COMPACT_HEADER):
            return data

        try:
            return self._unpack(data[len(COMPACT_HEADER) :])
        except (
            self._msgpack.UnpackException,
            ArithmeticError,
            KeyError,
            RecursionError,
            TypeError,
            ValueError,
        ) as e:
            logger.debug("Returning undecodable payload verbatim: %s", e)
            return data

    def _pack(self, value: Any) -> bytes:
        return self._msgpack.packb(
            value, default=self._default, use_bin_type=True, strict_types=True
        )

    def _unpack(self, data: bytes) -> Any:
        return self._msgpack.unpackb(
            data, raw=False, strict_map_key=False, ext_hook=self._ext_hook
        )

    def _default(self, obj: Any) -> Any:  # noqa: C901
        """Map values MessagePack cannot pack natively under strict_types."""
        ext = self._msgpack.ExtType
        if isinstance(obj, tuple):
            return ext(EXT_TUPLE, self._pack(list(obj)))
        if isinstance(obj, frozenset):
            return ext(EXT_FROZENSET, self._pack(list(obj)))
        if isinstance(obj, set):
            return ext(EXT_SET, self._pack(list(obj)))
        if isinstance(obj, datetime):
            return ext(EXT_DATETIME, self._pack(obj.isoformat()))
        if isinstance(obj, date):
            return ext(EXT_DATE, self._pack(obj.isoformat()))
        if isinstance(obj, time):
            return ext(EXT_TIME, self._pack(obj.isoformat()))
        if isinstance(obj, timedelta):
            return ext(EXT_TIMEDELTA, self._pack(dump_timedelta(obj)))
        if isinstance(obj, Decimal):
            return ext(EXT_DECIMAL, self._pack(str(obj)))
        if isinstance(obj, UUID):
            return ext(EXT_UUID, self._pack(obj.bytes))
        if isinstance(obj, bytearray):
            return ext(EXT_BYTEARRAY, self._pack(bytes(obj)))

        # Subclasses of native types (IntEnum, OrderedDict, ...)
        for native in (bool, int, float, str, bytes, list, dict):
            if isinstance(obj, native):
                return native(obj)

        ensure_not_resource(obj)
        msg = f"Value of type '{type(obj).__name__}' is not supported by {self.name} codec"
        raise SerializationError(msg)

    def _ext_hook(self, code: int, data: bytes) -> Any:
        kind, load = self._loaders[code]
        payload = self._unpack(data)
        if not isinstance(payload, kind):
            msg = f"Extension type {code} expects {kind.__name__}, got '{type(payload).__name__}'"
            raise TypeError(msg)
        return load(payload)
