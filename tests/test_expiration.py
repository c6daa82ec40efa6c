"""Tests for expiration conversion."""

from datetime import datetime
from datetime import timedelta
from datetime import timezone

import pytest

from cachex_core.exceptions import InvalidExpirationError
from cachex_core.expiration import DURATION_TYPES
from cachex_core.expiration import INSTANT_TYPES
from cachex_core.expiration import ExpirationConverter
from cachex_core.expiration import validate_expiration
from cachex_core.types import INFINITE
from cachex_core.types import ErrorContext


def test_none_means_never(frozen_converter: ExpirationConverter) -> None:
    assert frozen_converter.convert(None) is None


def test_infinite_is_kept(frozen_converter: ExpirationConverter) -> None:
    assert frozen_converter.convert(INFINITE) is INFINITE


def test_absolute_instant(frozen_converter: ExpirationConverter) -> None:
    now = frozen_converter.clock()
    instant = datetime.fromtimestamp(now + 10, tz=timezone.utc)
    assert frozen_converter.convert(instant) == 10


def test_naive_instant_is_local_time(frozen_converter: ExpirationConverter) -> None:
    now = frozen_converter.clock()
    instant = datetime.fromtimestamp(now + 25)
    assert frozen_converter.convert(instant) == 25


def test_past_instant_gives_negative_ttl(frozen_converter: ExpirationConverter) -> None:
    now = frozen_converter.clock()
    instant = datetime.fromtimestamp(now - 5, tz=timezone.utc)
    assert frozen_converter.convert(instant) == -5


@pytest.mark.parametrize(
    ("duration", "expected"),
    [
        (timedelta(seconds=30), 30),
        (timedelta(minutes=2), 120),
        (timedelta(seconds=-3), -3),
        (45, 45),
        (0, 0),
        (-7, -7),
    ],
)
def test_relative_duration(
    frozen_converter: ExpirationConverter, duration: object, expected: int
) -> None:
    assert frozen_converter.convert(duration) == expected


def test_fractional_now_is_truncated() -> None:
    converter = ExpirationConverter(clock=lambda: 1_000_000.75)
    assert converter.convert(timedelta(seconds=10)) == 10


def test_uses_system_clock_by_default() -> None:
    converter = ExpirationConverter()
    ttl = converter.convert(datetime.now(timezone.utc) + timedelta(seconds=10))
    assert 9 <= ttl <= 10


@pytest.mark.parametrize(
    ("expression", "type_name"),
    [
        ("10", "str"),
        (1.5, "float"),
        (True, "bool"),
        ([], "list"),
        (object(), "object"),
    ],
)
def test_invalid_expression(
    frozen_converter: ExpirationConverter, expression: object, type_name: str
) -> None:
    with pytest.raises(InvalidExpirationError, match=f"'{type_name}' given"):
        frozen_converter.convert(expression)


def test_invalid_expression_carries_context(
    frozen_converter: ExpirationConverter,
) -> None:
    with pytest.raises(InvalidExpirationError) as exc_info:
        frozen_converter.convert("soon", ErrorContext.SIMPLE)
    assert exc_info.value.context is ErrorContext.SIMPLE


def test_validate_expiration_shapes() -> None:
    validate_expiration(None, INSTANT_TYPES)
    validate_expiration(datetime.now(timezone.utc), INSTANT_TYPES)
    validate_expiration(timedelta(seconds=1), DURATION_TYPES)
    validate_expiration(10, DURATION_TYPES)

    with pytest.raises(InvalidExpirationError, match="datetime or None"):
        validate_expiration(timedelta(seconds=1), INSTANT_TYPES)
    with pytest.raises(InvalidExpirationError, match="'datetime' given"):
        validate_expiration(datetime.now(timezone.utc), DURATION_TYPES)
