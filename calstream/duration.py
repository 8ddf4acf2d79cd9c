"""DURATION value parsing."""

import logging
from datetime import timedelta

from .exceptions import InvalidIntegerError

logger = logging.getLogger(__name__)

UNITS = {
    "W": timedelta(weeks=1),
    "D": timedelta(days=1),
    "H": timedelta(hours=1),
    "M": timedelta(minutes=1),
    "S": timedelta(seconds=1),
}


def parse_duration(value: str) -> timedelta:
    """Parse an iCalendar DURATION such as ``PT1H30M`` or ``-P2D``.

    Each run of digits is closed by a unit letter (W, D, H, M, S) and added
    to the running total. Each ``-`` negates the whole value, so a leading
    sign gives a negative duration and a second sign cancels it again. Any
    other character is skipped.

    Args:
        value: Raw DURATION property value

    Returns:
        Signed total duration

    Raises:
        InvalidIntegerError: If a unit letter has no digits before it
    """
    total = timedelta(0)
    digits = ""
    negative = False
    for char in value:
        if char.isdigit():
            digits += char
        elif char == "-":
            negative = not negative
        elif char in UNITS:
            if not digits:
                raise InvalidIntegerError(f"Missing count before {char!r} in duration {value!r}")
            total += int(digits) * UNITS[char]
            digits = ""

    if value.count("-") > 1:
        logger.debug("Duration %r carries %d sign characters", value, value.count("-"))
    return -total if negative else total
