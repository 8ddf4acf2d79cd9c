"""Dual-mode date values for calendar processing.

A calendar date is either an ``Instant`` (a timezone-aware point in time) or
an ``AllDay`` civil date. Both variants share one total order and
variant-preserving arithmetic so events can be sorted and shifted without
caring which shape their dates have.

Ordering between the variants projects the all-day value onto the time line
at civil midnight in its own zone: an all-day date sorts before every instant
falling on the same civil day and by plain day comparison otherwise.
"""

from __future__ import annotations

import calendar
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Optional

from .exceptions import InvalidDateError
from .timezone_utils import UTC, resolve_timezone

logger = logging.getLogger(__name__)

ALL_DAY_PATTERN = re.compile(r"^\d{8}$")
TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"
UTC_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"


class DateValue:
    """Common behaviour of ``Instant`` and ``AllDay``."""

    __slots__ = ()

    @classmethod
    def parse(
        cls,
        text: str,
        zone_hint: str = "",
        *,
        strict_timezone: bool = False,
        strict_timestamp: bool = False,
    ) -> DateValue:
        """Parse an iCalendar date or date-time value.

        Args:
            text: ``YYYYMMDD``, ``YYYYMMDDTHHMMSS`` or ``YYYYMMDDTHHMMSSZ``
            zone_hint: TZID of the property; ignored for UTC (``Z``) values
            strict_timezone: Raise on unknown zone names instead of using UTC
            strict_timestamp: Raise on malformed timestamps instead of
                degrading to the Unix epoch

        Returns:
            ``Instant`` for timestamps, ``AllDay`` for 8-digit dates

        Raises:
            InvalidDateError: If the value is not a valid date
            InvalidTimezoneError: If strict_timezone and the zone is unknown
        """
        text = (text or "").strip()
        if not text:
            raise InvalidDateError("Empty date value")

        absolute = text.endswith("Z")
        zone = UTC if absolute else resolve_timezone(zone_hint, strict=strict_timezone)

        if "T" in text:
            pattern = UTC_TIMESTAMP_FORMAT if absolute else TIMESTAMP_FORMAT
            try:
                moment = datetime.strptime(text, pattern)
            except ValueError as e:
                if strict_timestamp:
                    raise InvalidDateError(f"Invalid timestamp: {text!r}") from e
                logger.warning("Malformed timestamp %r, using the epoch", text)
                return cls.epoch()
            return Instant(moment.replace(tzinfo=zone))

        if not ALL_DAY_PATTERN.match(text):
            raise InvalidDateError(f"Invalid date: {text!r}")
        try:
            day = date(int(text[0:4]), int(text[4:6]), int(text[6:8]))
        except ValueError as e:
            raise InvalidDateError(f"Invalid date: {text!r}") from e
        return AllDay(day, zone)

    @staticmethod
    def epoch() -> Instant:
        """Return the Unix epoch as a UTC instant."""
        return Instant(datetime(1970, 1, 1, tzinfo=UTC))

    # Accessors implemented by the variants

    def civil_date(self) -> date:
        raise NotImplementedError

    def with_date(self, day: date) -> DateValue:
        """Return the same time of day and zone on another civil date."""
        raise NotImplementedError

    def format(self, pattern: str, zone: Optional[tzinfo] = None) -> str:
        raise NotImplementedError

    @property
    def is_all_day(self) -> bool:
        return isinstance(self, AllDay)

    @property
    def day(self) -> int:
        return self.civil_date().day

    @property
    def month(self) -> int:
        return self.civil_date().month

    @property
    def year(self) -> int:
        return self.civil_date().year

    def weekday(self) -> int:
        """Day of the week, Monday is 0."""
        return self.civil_date().weekday()

    def with_day(self, day: int) -> Optional[DateValue]:
        return self._replace_civil(day=day)

    def with_month(self, month: int) -> Optional[DateValue]:
        return self._replace_civil(month=month)

    def with_year(self, year: int) -> Optional[DateValue]:
        return self._replace_civil(year=year)

    def _replace_civil(self, **fields: int) -> Optional[DateValue]:
        try:
            return self.with_date(self.civil_date().replace(**fields))
        except ValueError:
            return None

    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    def week_of_month(self) -> tuple[int, int]:
        """Week index of the day counted from both ends of its month.

        Returns:
            ``(week, -week_from_end)``, e.g. ``(2, -4)`` for the 10th of a
            31-day month
        """
        week = (self.day - 1) // 7 + 1
        neg_week = (self.days_in_month() - self.day) // 7 + 1
        return week, -neg_week

    def same_day(self, other: DateValue) -> bool:
        """True when both values fall on the same civil date."""
        return self.civil_date() == other.civil_date()

    # Ordering

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return compare(self, other) < 0

    def __le__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return compare(self, other) <= 0

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return compare(self, other) > 0

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return compare(self, other) >= 0


@dataclass(frozen=True)
class Instant(DateValue):
    """A timezone-aware point in time."""

    moment: datetime

    def __post_init__(self) -> None:
        if self.moment.tzinfo is None:
            raise ValueError("Instant requires a timezone-aware datetime")

    def __str__(self) -> str:
        return self.moment.isoformat()

    def civil_date(self) -> date:
        return self.moment.date()

    def with_date(self, day: date) -> Instant:
        return Instant(self.moment.replace(year=day.year, month=day.month, day=day.day))

    def format(self, pattern: str, zone: Optional[tzinfo] = None) -> str:
        moment = self.moment.astimezone(zone) if zone is not None else self.moment
        return moment.strftime(pattern)

    def __add__(self, other: object) -> Instant:
        if not isinstance(other, timedelta):
            return NotImplemented
        return Instant(self.moment + other)

    __radd__ = __add__

    def __sub__(self, other: object) -> timedelta:
        if isinstance(other, Instant):
            return self.moment - other.moment
        if isinstance(other, AllDay):
            return self.moment - other.midnight()
        return NotImplemented


@dataclass(frozen=True)
class AllDay(DateValue):
    """A civil date without time of day.

    ``zone`` is only used for formatting and to place the day on the time
    line when comparing against instants; equality looks at the date alone.
    """

    day_value: date
    zone: tzinfo = field(default=UTC, compare=False)

    def __str__(self) -> str:
        return self.day_value.isoformat()

    def civil_date(self) -> date:
        return self.day_value

    def with_date(self, day: date) -> AllDay:
        return AllDay(day, self.zone)

    def midnight(self) -> datetime:
        """Start of the civil day in the value's zone."""
        return datetime.combine(self.day_value, time(), tzinfo=self.zone)

    def format(self, pattern: str, zone: Optional[tzinfo] = None) -> str:
        return self.midnight().strftime(pattern)

    def __add__(self, other: object) -> AllDay:
        if not isinstance(other, timedelta):
            return NotImplemented
        # whole days only, truncated toward zero
        days = other.days if other >= timedelta(0) else -((-other).days)
        return AllDay(self.day_value + timedelta(days=days), self.zone)

    __radd__ = __add__

    def __sub__(self, other: object) -> timedelta:
        if isinstance(other, AllDay):
            return self.day_value - other.day_value
        if isinstance(other, Instant):
            return self.midnight() - other.moment
        return NotImplemented


def compare(a: DateValue, b: DateValue) -> int:
    """Three-way comparison across both date variants.

    Returns:
        -1, 0 or 1 as ``a`` sorts before, together with or after ``b``
    """
    if isinstance(a, Instant) and isinstance(b, Instant):
        return (a.moment > b.moment) - (a.moment < b.moment)
    if isinstance(a, AllDay) and isinstance(b, AllDay):
        return (a.day_value > b.day_value) - (a.day_value < b.day_value)
    if isinstance(a, AllDay) and isinstance(b, Instant):
        # same civil day: the all-day value comes first
        local_day = b.moment.astimezone(a.zone).date()
        return -1 if a.day_value <= local_day else 1
    if isinstance(a, Instant) and isinstance(b, AllDay):
        return -compare(b, a)
    raise TypeError(f"Cannot compare {type(a).__name__} with {type(b).__name__}")
