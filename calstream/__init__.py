"""calstream - ordered occurrence streams from iCalendar documents.

Parses VEVENT components into one-off events and recurrence rules and merges
them lazily into a single ascending stream of EventRecord occurrences.
"""

__version__ = "0.1.0"

from .calendar_store import CalendarStore, ingest, load_calendar, parse_calendar, parse_documents
from .config_loader import Config, load_config
from .date_value import AllDay, DateValue, Instant, compare
from .duration import parse_duration
from .event_filter import between, on_day, upcoming
from .exceptions import (
    CalendarError,
    InvalidDateError,
    InvalidFrequencyError,
    InvalidIntegerError,
    InvalidStatusError,
    InvalidTimezoneError,
    InvalidWeekdaySpecError,
    PropertyParseError,
)
from .logging_config import configure_logging
from .models import AbsoluteEnd, EventRecord, EventStatus, PropertyRecord, RelativeEnd
from .ordered_merge import merge_occurrences, merge_periodic, ordered_merge
from .recurrence import Frequency, RecurrenceRule, WeekdaySelector

__all__ = [
    "AbsoluteEnd",
    "AllDay",
    "CalendarError",
    "CalendarStore",
    "Config",
    "DateValue",
    "EventRecord",
    "EventStatus",
    "Frequency",
    "Instant",
    "InvalidDateError",
    "InvalidFrequencyError",
    "InvalidIntegerError",
    "InvalidStatusError",
    "InvalidTimezoneError",
    "InvalidWeekdaySpecError",
    "PropertyParseError",
    "PropertyRecord",
    "RecurrenceRule",
    "RelativeEnd",
    "WeekdaySelector",
    "between",
    "compare",
    "configure_logging",
    "ingest",
    "load_calendar",
    "load_config",
    "merge_occurrences",
    "merge_periodic",
    "on_day",
    "ordered_merge",
    "parse_calendar",
    "parse_documents",
    "parse_duration",
    "upcoming",
]
