"""RRULE parsing and lazy occurrence generation.

A RecurrenceRule is built from an empty rule by applying RRULE parts one at
a time. Once bound to its template event, ``produce()`` returns a fresh
generator of occurrences in ascending order. Unbounded rules never end, so
consumers must stop pulling on their own (see ``event_filter``).

All validation happens while the rule is built; generation never raises.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from datetime import MAXYEAR, MINYEAR, date, timedelta
from enum import Enum
from typing import NamedTuple, Optional, Union

from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta

from .date_value import AllDay, DateValue
from .exceptions import InvalidFrequencyError, InvalidIntegerError, InvalidWeekdaySpecError
from .models import EventRecord

logger = logging.getLogger(__name__)

WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")
WEEKDAYS = (MO, TU, WE, TH, FR, SA, SU)
BYDAY_PATTERN = re.compile(r"^([+-]?\d{1,2})?(MO|TU|WE|TH|FR|SA|SU)$")

# Give up on a rule after this many consecutive periods without an occurrence
MAX_EMPTY_PERIODS = 1000


class Frequency(str, Enum):
    """Supported FREQ values."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class WeekdaySelector(NamedTuple):
    """One BYDAY entry, e.g. ``2MO`` (second Monday) or ``-1FR`` (last Friday)."""

    ordinal: Optional[int]
    weekday: int

    @classmethod
    def parse(cls, token: str) -> WeekdaySelector:
        """Parse a single BYDAY token.

        Raises:
            InvalidWeekdaySpecError: If the token is malformed or the ordinal
                is zero or beyond five
        """
        match = BYDAY_PATTERN.match(token.strip().upper())
        if not match:
            raise InvalidWeekdaySpecError(f"Invalid BYDAY token: {token!r}")
        ordinal_text, code = match.groups()
        ordinal = int(ordinal_text) if ordinal_text else None
        if ordinal is not None and not 1 <= abs(ordinal) <= 5:
            raise InvalidWeekdaySpecError(f"BYDAY ordinal out of range: {token!r}")
        return cls(ordinal, WEEKDAY_CODES.index(code))

    def dates_in_month(self, year: int, month: int) -> list[date]:
        """Days of the given month matched by this selector."""
        first = date(year, month, 1)
        if self.ordinal is None:
            offset = (self.weekday - first.weekday()) % 7
            length = (first + relativedelta(day=31)).day
            return [first.replace(day=day) for day in range(offset + 1, length + 1, 7)]

        # count forward from the 1st, or backward from the last day (day=31 clamps)
        found = first + relativedelta(
            day=1 if self.ordinal > 0 else 31,
            weekday=WEEKDAYS[self.weekday](self.ordinal),
        )
        return [found] if found.month == month else []

    def __str__(self) -> str:
        prefix = str(self.ordinal) if self.ordinal is not None else ""
        return f"{prefix}{WEEKDAY_CODES[self.weekday]}"


@dataclass(frozen=True)
class Unbounded:
    """Rule without COUNT or UNTIL."""


@dataclass(frozen=True)
class Count:
    """Stop after ``count`` occurrences."""

    count: int


@dataclass(frozen=True)
class Until:
    """Stop once an occurrence starts after ``bound`` (inclusive bound)."""

    bound: DateValue

    def exceeded_by(self, start: DateValue) -> bool:
        if isinstance(self.bound, AllDay):
            # a date-only bound covers its whole day
            return start.civil_date() > self.bound.civil_date()
        return start > self.bound


UNBOUNDED = Unbounded()

Termination = Union[Unbounded, Count, Until]


def _parse_int(key: str, value: str, minimum: int) -> int:
    try:
        number = int(value.strip())
    except ValueError as e:
        raise InvalidIntegerError(f"Invalid {key} value: {value!r}") from e
    if number < minimum:
        raise InvalidIntegerError(f"{key} must be at least {minimum}, got {number}")
    return number


@dataclass
class RecurrenceRule:
    """A parsed RRULE together with the event it repeats."""

    frequency: Optional[Frequency] = None
    interval: int = 1
    termination: Termination = UNBOUNDED
    selectors: tuple[WeekdaySelector, ...] = ()
    zone: str = ""
    template: EventRecord = field(default_factory=EventRecord)

    @classmethod
    def from_rrule(
        cls,
        value: str,
        params: Optional[Mapping[str, str]] = None,
        *,
        strict_timezone: bool = False,
    ) -> RecurrenceRule:
        """Build a rule from an RRULE value and its property parameters.

        Property parameters (such as TZID) are applied first so that a
        floating UNTIL is read in the right zone.

        Args:
            value: RRULE value, e.g. ``FREQ=WEEKLY;BYDAY=MO,WE``
            params: Parameters attached to the RRULE property
            strict_timezone: Reject unknown zone names in UNTIL

        Returns:
            Rule without a template; bind one with ``with_template``

        Raises:
            InvalidFrequencyError: If FREQ is missing or unsupported
            InvalidIntegerError: If INTERVAL or COUNT is not a valid integer
            InvalidWeekdaySpecError: If a BYDAY token is malformed
            InvalidDateError: If UNTIL is malformed
        """
        rule = cls()
        for key, param_value in (params or {}).items():
            rule.set_param(key, param_value, strict_timezone=strict_timezone)

        for entry in value.split(";"):
            if not entry.strip():
                continue
            key, _, part_value = entry.partition("=")
            rule.set_param(key, part_value, strict_timezone=strict_timezone)

        if rule.frequency is None:
            raise InvalidFrequencyError(f"RRULE missing FREQ: {value!r}")

        logger.debug("Parsed RRULE %r -> %s", value, rule.describe())
        return rule

    def set_param(self, key: str, value: str, *, strict_timezone: bool = False) -> None:
        """Apply one rule parameter; unknown keys are ignored."""
        key = key.strip().upper()
        if key == "FREQ":
            try:
                self.frequency = Frequency(value.strip().upper())
            except ValueError as e:
                raise InvalidFrequencyError(f"Unsupported FREQ: {value!r}") from e
        elif key == "INTERVAL":
            self.interval = _parse_int(key, value, minimum=1)
        elif key == "COUNT":
            self.termination = Count(_parse_int(key, value, minimum=0))
        elif key == "UNTIL":
            bound = DateValue.parse(
                value, self.zone, strict_timezone=strict_timezone, strict_timestamp=True
            )
            self.termination = Until(bound)
        elif key == "BYDAY":
            selectors: list[WeekdaySelector] = []
            for token in value.split(","):
                selector = WeekdaySelector.parse(token)
                if selector not in selectors:
                    selectors.append(selector)
            self.selectors = tuple(selectors)
        elif key == "TZID":
            self.zone = value.strip()
        else:
            logger.debug("Ignoring unsupported RRULE part %s=%s", key, value)

    def with_template(self, template: EventRecord) -> RecurrenceRule:
        """Copy of this rule repeating ``template``."""
        return replace(self, template=template)

    def describe(self) -> str:
        parts = [f"FREQ={self.frequency.value if self.frequency else None}"]
        if self.interval != 1:
            parts.append(f"INTERVAL={self.interval}")
        if isinstance(self.termination, Count):
            parts.append(f"COUNT={self.termination.count}")
        elif isinstance(self.termination, Until):
            parts.append(f"UNTIL={self.termination.bound}")
        if self.selectors:
            parts.append("BYDAY=" + ",".join(str(s) for s in self.selectors))
        return ";".join(parts)

    def produce(self) -> Iterator[EventRecord]:
        """Lazily generate occurrences in ascending order.

        Each call returns an independent generator. The template's start is
        the seed and always the first occurrence, counted by COUNT like any
        other; every occurrence keeps the template's duration.
        """
        template = self.template
        seed = template.start
        termination = self.termination
        emitted = 0
        empty_periods = 0
        period = 0

        while True:
            try:
                starts = self._period_starts(seed, period)
            except OverflowError:
                logger.debug("RRULE for %r reached the end of the date range", template.summary)
                return
            if period == 0 and self.frequency in (Frequency.MONTHLY, Frequency.YEARLY):
                # selector days earlier in the seed's month or year are not occurrences
                starts = [seed] + [start for start in starts if start > seed]
            period += 1

            if not starts:
                empty_periods += 1
                if empty_periods > MAX_EMPTY_PERIODS:
                    logger.warning(
                        "RRULE %s for %r produced nothing for %d periods, stopping",
                        self.describe(),
                        template.summary,
                        MAX_EMPTY_PERIODS,
                    )
                    return
                continue
            empty_periods = 0

            for start in starts:
                if isinstance(termination, Count) and emitted >= termination.count:
                    return
                if isinstance(termination, Until) and termination.exceeded_by(start):
                    return
                try:
                    occurrence = template if start == seed else template.shifted_to(start)
                    occurrence.end_date  # overflows past the end of the date range
                except OverflowError:
                    logger.debug(
                        "RRULE for %r: occurrence end past the end of the date range",
                        template.summary,
                    )
                    return
                emitted += 1
                yield occurrence

    def __iter__(self) -> Iterator[EventRecord]:
        return self.produce()

    def _period_starts(self, seed: DateValue, period: int) -> list[DateValue]:
        """Occurrence starts of the ``period``-th recurrence period, ascending."""
        step = period * self.interval

        if self.frequency is Frequency.DAILY:
            return [seed + timedelta(days=step)]

        if self.frequency is Frequency.WEEKLY:
            if not self.selectors:
                return [seed + timedelta(weeks=step)]
            monday = seed.civil_date() - timedelta(days=seed.weekday()) + timedelta(weeks=step)
            days = sorted({monday + timedelta(days=s.weekday) for s in self.selectors})
            return [seed.with_date(day) for day in days]

        if self.frequency is Frequency.MONTHLY:
            year, month = divmod(seed.year * 12 + seed.month - 1 + step, 12)
            month += 1
        else:
            year, month = seed.year + step, seed.month
        if not MINYEAR <= year <= MAXYEAR:
            raise OverflowError(f"year {year} is out of range")

        if not self.selectors:
            try:
                day = date(year, month, seed.day)
            except ValueError:
                # e.g. the 31st in a 30-day month
                return []
            return [seed.with_date(day)]

        days = {day for selector in self.selectors for day in selector.dates_in_month(year, month)}
        return [seed.with_date(day) for day in sorted(days)]
