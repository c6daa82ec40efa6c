"""Tests for the plain text codec."""

import threading
from datetime import date
from datetime import datetime
from datetime import time
from datetime import timedelta
from datetime import timezone
from decimal import Decimal
from pathlib import Path
from uuid import UUID

import pytest

from cachex_core.codecs import PLAIN_FALSE
from cachex_core.codecs import PLAIN_HEADER
from cachex_core.codecs import PLAIN_NULL
from cachex_core.codecs import PlainCodec
from cachex_core.exceptions import SerializationError


@pytest.fixture
def plain() -> PlainCodec:
    return PlainCodec()


@pytest.mark.parametrize(
    "value",
    [
        True,
        0,
        -7,
        2**80,
        3.25,
        "",
        "héllo",
        b"\x00\xff",
        bytearray(b"ab"),
        [1, "a", None, False, [2.5]],
        (1, (2, 3)),
        {"a": 1, 2: [3], None: "none"},
        {(1, 2): "tuple key", frozenset({"x"}): "frozenset key"},
        {"t": "bytes", "v": "not a tag"},
        {1, 2, 3},
        frozenset({"x", "y"}),
        datetime(2024, 1, 2, 3, 4, 5, 6, tzinfo=timezone.utc),
        datetime(2024, 1, 2, 3, 4, 5),
        date(2024, 1, 2),
        time(12, 30, 15),
        timedelta(days=1, seconds=3, microseconds=9),
        Decimal("1.10"),
        UUID("12345678-1234-5678-1234-567812345678"),
    ],
)
def test_roundtrip(plain: PlainCodec, value: object) -> None:
    encoded = plain.encode(value)

    assert encoded.startswith(PLAIN_HEADER)
    decoded = plain.decode(encoded)
    assert decoded == value
    assert type(decoded) is type(value)


def test_null_and_false_sentinels(plain: PlainCodec) -> None:
    assert plain.encode(None) == PLAIN_NULL
    assert plain.encode(False) == PLAIN_FALSE
    assert plain.decode(PLAIN_NULL) is None
    assert plain.decode(PLAIN_FALSE) is False


def test_encoding_is_readable(plain: PlainCodec) -> None:
    assert plain.encode([1, "a"]) == b'p1:[1,"a"]'
    assert plain.encode((1,)) == b'p1:{"t":"tuple","v":[1]}'


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"a",
        b"\xff",
        b"hello world",
        b"\xff\xfe\xfd",
        b"p1:",
        b"p1:{not json",
        b'p1:{"t":"nope","v":1}',
        b'p1:{"missing":"tag"}',
        b'p1:{"t":"bytes","v":"@@@"}',
        b'p1:{"t":"dict","v":[[[1],2]]}',
        b"p1:\xc3\x28",
    ],
)
def test_malformed_input_is_returned_unchanged(plain: PlainCodec, data: bytes) -> None:
    assert plain.decode(data) == data


@pytest.mark.parametrize(
    "data",
    [
        b'p1:{"t":"decimal","v":"abc"}',
        b'p1:{"t":"timedelta","v":[999999999999,0,0]}',
        b'p1:{"t":"timedelta","v":[1,2]}',
        b'p1:{"t":"uuid","v":"not-a-uuid"}',
    ],
)
def test_tagged_payload_out_of_range_is_returned_unchanged(
    plain: PlainCodec, data: bytes
) -> None:
    assert plain.decode(data) == data


def test_decode_accepts_bytes_like(plain: PlainCodec) -> None:
    assert plain.decode(bytearray(PLAIN_NULL)) is None
    assert plain.decode(memoryview(b'p1:"x"')) == "x"


def test_resources_are_rejected(plain: PlainCodec, tmp_path: Path) -> None:
    with open(tmp_path / "handle.txt", "w") as handle:
        with pytest.raises(SerializationError, match="resource"):
            plain.encode(handle)
        with pytest.raises(SerializationError, match="resource"):
            plain.encode({"nested": [handle]})

    with pytest.raises(SerializationError, match="resource"):
        plain.encode(lambda: None)
    with pytest.raises(SerializationError, match="resource"):
        plain.encode(x for x in range(3))
    with pytest.raises(SerializationError, match="resource"):
        plain.encode(threading.Lock())


def test_unsupported_values_are_rejected(plain: PlainCodec) -> None:
    with pytest.raises(SerializationError, match="not supported"):
        plain.encode(object())
    with pytest.raises(SerializationError):
        plain.encode("\ud800")


def test_recursive_value_is_rejected(plain: PlainCodec) -> None:
    value: list[object] = []
    value.append(value)

    with pytest.raises(SerializationError):
        plain.encode(value)
