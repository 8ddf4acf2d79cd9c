"""Calendar ingestion: property records to a CalendarStore.

Every VEVENT becomes either a one-off EventRecord or, when it carries an
RRULE, a RecurrenceRule whose template is the event itself. Ingestion is
fail-fast: the first invalid property aborts the whole document.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from datetime import timedelta
from itertools import chain
from typing import Any, Optional, Union

from .config_loader import Config
from .date_value import DateValue
from .duration import parse_duration
from .models import AbsoluteEnd, EventRecord, EventStatus, PropertyRecord, RelativeEnd
from .ordered_merge import merge_occurrences
from .property_reader import read_components
from .recurrence import RecurrenceRule

logger = logging.getLogger(__name__)

Component = Iterable[Union[PropertyRecord, tuple[str, str, Mapping[str, str]]]]


def ingest(
    properties: Component,
    *,
    default_timezone: str = "",
    strict_timezone: bool = False,
    strict_timestamp: bool = False,
) -> Union[EventRecord, RecurrenceRule]:
    """Build one event or recurrence rule from a component's properties.

    Args:
        properties: ``(name, value, params)`` records of one component
        default_timezone: Zone for dates without a TZID parameter
        strict_timezone: Reject unknown TZID values instead of using UTC
        strict_timestamp: Reject malformed timestamps instead of using the epoch

    Returns:
        RecurrenceRule if the component has an RRULE, else EventRecord

    Raises:
        CalendarError: The first invalid property value found
    """
    fields: dict[str, Any] = {}
    rrule: Optional[tuple[str, Mapping[str, str]]] = None
    start_zone = default_timezone

    def parse_date(value: str, zone: str) -> DateValue:
        return DateValue.parse(
            value, zone, strict_timezone=strict_timezone, strict_timestamp=strict_timestamp
        )

    for name, value, params in properties:
        params = params or {}
        name = name.upper()
        zone = params.get("TZID") or default_timezone

        if name == "SUMMARY":
            fields["summary"] = value
        elif name == "LOCATION":
            fields["location"] = value
        elif name == "DESCRIPTION":
            fields["description"] = value
        elif name == "STATUS":
            fields["status"] = EventStatus.parse(value)
        elif name == "DTSTART":
            fields["start"] = parse_date(value, zone)
            start_zone = zone
        elif name == "DTEND":
            fields["end"] = AbsoluteEnd(parse_date(value, zone))
        elif name == "DURATION":
            fields["end"] = RelativeEnd(parse_duration(value))
        elif name == "RRULE":
            rrule = (value, params)

    if "start" not in fields:
        logger.warning("Event %r has no DTSTART, using the epoch", fields.get("summary", ""))
        fields["start"] = DateValue.epoch()
    if "end" not in fields:
        # all-day events without an end last one day, timed events are instantaneous
        length = timedelta(days=1) if fields["start"].is_all_day else timedelta(0)
        fields["end"] = RelativeEnd(length)

    event = EventRecord(**fields)
    if rrule is None:
        return event

    value, params = rrule
    # floating UNTIL values are read in the zone of DTSTART
    rule = RecurrenceRule.from_rrule(
        value, {"TZID": start_zone, **params}, strict_timezone=strict_timezone
    )
    return rule.with_template(event)


class CalendarStore:
    """One-off events and recurrence rules of a parsed calendar.

    One-off events are kept sorted; rules keep document order. The store is
    not modified after construction.
    """

    def __init__(
        self,
        singles: Iterable[EventRecord] = (),
        periodics: Iterable[RecurrenceRule] = (),
    ):
        self._singles = tuple(sorted(singles))
        self._periodics = tuple(periodics)

    @classmethod
    def from_components(
        cls, components: Iterable[Component], config: Optional[Config] = None
    ) -> CalendarStore:
        """Classify every component and build the store.

        Raises:
            CalendarError: The first ingestion error; no partial store is built
        """
        config = config or Config()
        singles: list[EventRecord] = []
        periodics: list[RecurrenceRule] = []

        for properties in components:
            item = ingest(
                properties,
                default_timezone=config.default_timezone,
                strict_timezone=config.strict_timezones,
                strict_timestamp=config.strict_timestamps,
            )
            if isinstance(item, RecurrenceRule):
                periodics.append(item)
            else:
                singles.append(item)

        store = cls(singles, periodics)
        logger.info(
            "Parsed calendar: %d single events, %d recurring events",
            len(store.singles),
            len(store.periodics),
        )
        return store

    @property
    def singles(self) -> tuple[EventRecord, ...]:
        return self._singles

    @property
    def periodics(self) -> tuple[RecurrenceRule, ...]:
        return self._periodics

    def occurrences(self) -> Iterator[EventRecord]:
        """All occurrences in ascending order; infinite if any rule is unbounded."""
        return merge_occurrences(self._singles, self._periodics)

    def __iter__(self) -> Iterator[EventRecord]:
        return self.occurrences()

    def summary(self) -> dict[str, int]:
        return {
            "single_events": len(self._singles),
            "recurring_events": len(self._periodics),
        }

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(singles={len(self._singles)}, "
            f"periodics={len(self._periodics)})"
        )


def parse_calendar(text: str, config: Optional[Config] = None) -> CalendarStore:
    """Parse one iCalendar document.

    Raises:
        CalendarError: If any component is invalid
    """
    return CalendarStore.from_components(read_components(text), config)


def parse_documents(texts: Iterable[str], config: Optional[Config] = None) -> CalendarStore:
    """Parse several documents into one store by concatenating their events."""
    components = chain.from_iterable(read_components(text) for text in texts)
    return CalendarStore.from_components(components, config)


def load_calendar(config: Config) -> CalendarStore:
    """Read and parse every source listed in the configuration.

    Raises:
        OSError: If a source cannot be read
        CalendarError: If any document is invalid
    """
    return parse_documents(config.load_sources(), config)
