"""Text codec built on a versioned, tagged JSON envelope.

Wire format:

* ``PLAIN_NULL`` and ``PLAIN_FALSE`` are the encodings of ``None`` and ``False``.
* Any other value is ``PLAIN_HEADER`` followed by UTF-8 JSON. Lists stay JSON
  arrays; every other container and every scalar JSON lacks is written as
  ``{"t": tag, "v": payload}``, so a JSON object is always a tag.
"""

import base64
import json
from logging import getLogger
from typing import Any

from cachex_core.exceptions import SerializationError

from .base import EXTENDED_SCALARS
from .base import BaseCodec
from .base import ensure_not_resource

PLAIN_NULL = b"N;"
PLAIN_FALSE = b"b:0;"
PLAIN_HEADER = b"p1:"

logger = getLogger(__name__)


class PlainCodec(BaseCodec):
    """Human readable codec with no third-party dependency."""

    name = "plain"

    def encode(self, value: Any) -> bytes:
        ensure_not_resource(value)
        if value is None:
            return PLAIN_NULL
        if value is False:
            return PLAIN_FALSE

        try:
            document = json.dumps(
                self._dump(value), separators=(",", ":"), ensure_ascii=False
            )
            return PLAIN_HEADER + document.encode("utf-8")
        except (RecursionError, UnicodeEncodeError, ValueError) as e:
            msg = f"Cannot serialize value of type '{type(value).__name__}': {e}"
            raise SerializationError(msg) from e

    def decode(self, data: bytes) -> Any:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            return data
        data = bytes(data)
        if len(data) < 2:
            return data
        if data == PLAIN_NULL:
            return None
        if data == PLAIN_FALSE:
            return False
        if not data.startswith(PLAIN_HEADER):
            return data

        try:
            return self._load(json.loads(data[len(PLAIN_HEADER) :]))
        except (
            ArithmeticError,
            KeyError,
            RecursionError,
            TypeError,
            ValueError,
        ) as e:
            logger.debug("Returning undecodable payload verbatim: %s", e)
            return data

    def _dump(self, value: Any) -> Any:  # noqa: C901
        if value is None or isinstance(value, (bool, int, float, str)):
            return value
        if isinstance(value, list):
            return [self._dump(item) for item in value]
        if isinstance(value, tuple):
            return self._tag("tuple", [self._dump(item) for item in value])
        if isinstance(value, dict):
            pairs = [[self._dump(k), self._dump(v)] for k, v in value.items()]
            return self._tag("dict", pairs)
        if isinstance(value, frozenset):
            return self._tag("frozenset", [self._dump(item) for item in value])
        if isinstance(value, set):
            return self._tag("set", [self._dump(item) for item in value])
        if isinstance(value, bytes):
            return self._tag("bytes", base64.b64encode(value).decode("ascii"))
        if isinstance(value, bytearray):
            return self._tag("bytearray", base64.b64encode(value).decode("ascii"))

        for tag, kind, dump, _ in EXTENDED_SCALARS:
            if isinstance(value, kind):
                return self._tag(tag, dump(value))

        ensure_not_resource(value)
        msg = f"Value of type '{type(value).__name__}' is not supported by {self.name} codec"
        raise SerializationError(msg)

    def _load(self, node: Any) -> Any:  # noqa: C901
        if isinstance(node, list):
            return [self._load(item) for item in node]
        if not isinstance(node, dict):
            return node

        tag, payload = node["t"], node["v"]
        if tag == "tuple":
            return tuple(self._load(item) for item in payload)
        if tag == "dict":
            return {self._load(k): self._load(v) for k, v in payload}
        if tag == "set":
            return {self._load(item) for item in payload}
        if tag == "frozenset":
            return frozenset(self._load(item) for item in payload)
        if tag == "bytes":
            return base64.b64decode(payload, validate=True)
        if tag == "bytearray":
            return bytearray(base64.b64decode(payload, validate=True))

        for name, _, _, load in EXTENDED_SCALARS:
            if tag == name:
                return load(payload)

        msg = f"Unknown tag '{tag}'"
        raise ValueError(msg)

    @staticmethod
    def _tag(tag: str, payload: Any) -> dict[str, Any]:
        return {"t": tag, "v": payload}
