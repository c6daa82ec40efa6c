"""Conversion of expiration expressions into relative TTLs."""

import time
from collections.abc import Callable
from datetime import datetime
from datetime import timedelta
from typing import Any

from cachex_core.exceptions import InvalidExpirationError
from cachex_core.types import INFINITE
from cachex_core.types import ErrorContext
from cachex_core.types import Infinite
from cachex_core.types import TtlValue

# Accepted shapes per entry point
INSTANT_TYPES: tuple[type, ...] = (datetime,)
DURATION_TYPES: tuple[type, ...] = (timedelta, int)


def describe_type(value: Any) -> str:
    """Name of the value's type as shown in error messages."""
    if value is None:
        return "None"
    return type(value).__qualname__


def is_expiration(value: Any, accepted: tuple[type, ...]) -> bool:
    """Return True for None or an instance of one of the accepted types.

    bool is never a duration even though it subclasses int.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    return isinstance(value, accepted)


def validate_expiration(
    value: Any,
    accepted: tuple[type, ...],
    context: ErrorContext = ErrorContext.POOL,
) -> None:
    """Raise InvalidExpirationError unless value is None or one of accepted."""
    if not is_expiration(value, accepted):
        names = " or ".join(t.__qualname__ for t in accepted)
        msg = (
            f"Expiration MUST be a {names} or None. "
            f"'{describe_type(value)}' given"
        )
        raise InvalidExpirationError(msg, context)


class ExpirationConverter:
    """Normalize expiration expressions into a TtlValue.

    Args:
        clock: Returns the current epoch time in seconds
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self.clock = clock

    def convert(
        self,
        expression: Any,
        context: ErrorContext = ErrorContext.POOL,
    ) -> TtlValue:
        """Convert an expression into seconds left, None or INFINITE.

        Args:
            expression: None, INFINITE, a datetime, a timedelta or int seconds
            context: Convention carried by a raised InvalidExpirationError

        Returns:
            The relative TTL; negative when the instant is already past

        Raises:
            InvalidExpirationError: For any other shape
        """
        if isinstance(expression, Infinite):
            return INFINITE
        validate_expiration(expression, INSTANT_TYPES + DURATION_TYPES, context)
        if expression is None:
            return None

        now = self.clock()
        if isinstance(expression, datetime):
            return self._seconds_until(expression.timestamp(), now)

        if isinstance(expression, int):
            expression = timedelta(seconds=expression)
        return self._seconds_until(now + expression.total_seconds(), now)

    @staticmethod
    def _seconds_until(instant: float, now: float) -> int:
        return int(instant) - int(now)
