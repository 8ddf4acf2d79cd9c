"""Range filters over an ordered occurrence stream.

The merged stream may be infinite, so every filter here relies on it being
ascending: items before the lower bound are skipped and iteration stops at
the first item past the upper bound. Callers pass "now" explicitly.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable, Iterator
from itertools import dropwhile, islice, takewhile
from typing import Optional

from .date_value import AllDay, DateValue, Instant
from .models import EventRecord

logger = logging.getLogger(__name__)


def as_date_value(value: DateValue | datetime.datetime | datetime.date) -> DateValue:
    """Accept plain datetimes and dates as bounds.

    Raises:
        ValueError: If a datetime is timezone-naive
    """
    if isinstance(value, DateValue):
        return value
    if isinstance(value, datetime.datetime):
        return Instant(value)
    return AllDay(value)


def between(
    occurrences: Iterable[EventRecord],
    lower: DateValue | datetime.datetime | datetime.date,
    upper: DateValue | datetime.datetime | datetime.date,
) -> Iterator[EventRecord]:
    """Occurrences starting within ``[lower, upper]``.

    Args:
        occurrences: Ascending occurrence stream, possibly infinite
        lower: Inclusive lower bound on start
        upper: Inclusive upper bound on start

    Yields:
        Matching occurrences in order; stops at the first start past ``upper``
    """
    low = as_date_value(lower)
    high = as_date_value(upper)
    started = dropwhile(lambda event: event.start < low, occurrences)
    return takewhile(lambda event: not event.start > high, started)


def upcoming(
    occurrences: Iterable[EventRecord],
    now: DateValue | datetime.datetime,
    limit: Optional[int] = None,
) -> Iterator[EventRecord]:
    """Occurrences that have not ended yet at ``now``.

    An occurrence that started before ``now`` but is still running is
    included. Items are examined in start order, so a long event that began
    before shorter ones is still found. Without ``limit`` the result is as
    long as the input, so pass a limit for streams with unbounded rules.

    Args:
        occurrences: Ascending occurrence stream
        now: Current time, supplied by the caller
        limit: Maximum number of occurrences (None for no limit)
    """
    current = as_date_value(now)
    pending = (event for event in occurrences if event.end_date > current)
    return islice(pending, limit) if limit is not None else pending


def on_day(
    occurrences: Iterable[EventRecord], day: datetime.date, zone: datetime.tzinfo
) -> Iterator[EventRecord]:
    """Occurrences starting on a civil day in ``zone``."""
    midnight = datetime.datetime.combine(day, datetime.time(), tzinfo=zone)
    # the all-day value sorts before every instant of its own day
    lower = AllDay(day, zone)
    upper = Instant(midnight + datetime.timedelta(days=1) - datetime.timedelta(microseconds=1))
    return between(occurrences, lower, upper)
