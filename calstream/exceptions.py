"""Exception hierarchy for calendar ingestion errors.

Every failure raised while turning a document into a CalendarStore is a
subclass of CalendarError so callers can catch the whole family at once,
while still telling a bad document apart from a bad recurrence rule or a
bad date.
"""


class CalendarError(Exception):
    """Base exception for all calendar ingestion errors.

    Ingestion is fail-fast: the first CalendarError raised while reading a
    document aborts the whole parse and no partial store is returned.
    """


class PropertyParseError(CalendarError):
    """A content line could not be split into name, parameters and value.

    Raised when the icalendar content-line layer rejects a line. The original
    exception is chained as ``__cause__``.
    """


class InvalidIntegerError(CalendarError):
    """An integer-valued field could not be parsed.

    Raised when:
    - INTERVAL is not a positive integer
    - COUNT is not a non-negative integer
    - a DURATION unit letter is not preceded by digits
    """


class InvalidStatusError(CalendarError):
    """STATUS text is not one of CONFIRMED, TENTATIVE or CANCELLED."""


class InvalidFrequencyError(CalendarError):
    """FREQ is missing from a rule or names an unsupported frequency."""


class InvalidWeekdaySpecError(CalendarError):
    """A BYDAY token does not match ``[+-]N?WEEKDAY``."""


class InvalidDateError(CalendarError):
    """A date value cannot be parsed.

    Raised when:
    - an all-day value is not an existing YYYYMMDD civil date
    - a rule's UNTIL bound is malformed
    - a malformed timestamp is read with strict timestamps enabled
    """


class InvalidTimezoneError(CalendarError):
    """A TZID could not be resolved while strict time zones are enabled.

    With the default permissive settings unknown zones fall back to UTC
    and this error is never raised.
    """
