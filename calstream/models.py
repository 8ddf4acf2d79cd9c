"""Data models for calendar occurrences."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any, NamedTuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .date_value import DateValue, compare
from .exceptions import InvalidStatusError


class PropertyRecord(NamedTuple):
    """One decoded content line of a calendar component."""

    name: str
    value: str
    params: Mapping[str, str] = MappingProxyType({})


class EventStatus(str, Enum):
    """Lifecycle status of an event."""

    CONFIRMED = "CONFIRMED"
    TENTATIVE = "TENTATIVE"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, text: str) -> EventStatus:
        """Map STATUS property text to a status.

        Raises:
            InvalidStatusError: If the text is not a known status
        """
        try:
            return cls(text.strip().upper())
        except ValueError as e:
            raise InvalidStatusError(f"Invalid event status: {text!r}") from e


@dataclass(frozen=True)
class AbsoluteEnd:
    """End given as a date (DTEND)."""

    value: DateValue


@dataclass(frozen=True)
class RelativeEnd:
    """End given as a duration from the start (DURATION)."""

    duration: timedelta


EndSpec = Union[AbsoluteEnd, RelativeEnd]


def _default_end() -> RelativeEnd:
    return RelativeEnd(timedelta(0))


class EventRecord(BaseModel):
    """One concrete occurrence of an event.

    Records sort by start, then by effective end. Equality compares every
    field, so two different events at the same time sort together but are
    not equal.
    """

    start: DateValue = Field(default_factory=DateValue.epoch, description="Occurrence start")
    end: EndSpec = Field(default_factory=_default_end, description="DTEND or DURATION")
    summary: str = Field(default="", description="Event title")
    location: str = Field(default="", description="Event location")
    description: str = Field(default="", description="Event description")
    status: EventStatus = Field(default=EventStatus.CONFIRMED, description="Lifecycle status")

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def end_date(self) -> DateValue:
        """Effective end: the DTEND value or start plus DURATION."""
        if isinstance(self.end, AbsoluteEnd):
            return self.end.value
        return self.start + self.end.duration

    @property
    def duration(self) -> timedelta:
        return self.end_date - self.start

    @property
    def is_all_day(self) -> bool:
        return self.start.is_all_day

    def shifted_to(self, start: DateValue) -> EventRecord:
        """Copy of this record starting at ``start`` with the same duration."""
        if isinstance(self.end, RelativeEnd):
            end: EndSpec = self.end
        else:
            end = AbsoluteEnd(start + self.duration)
        return self.model_copy(update={"start": start, "end": end})

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, EventRecord):
            return NotImplemented
        return compare_events(self, other) < 0

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, EventRecord):
            return NotImplemented
        return compare_events(self, other) <= 0

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, EventRecord):
            return NotImplemented
        return compare_events(self, other) > 0

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, EventRecord):
            return NotImplemented
        return compare_events(self, other) >= 0

    def __str__(self) -> str:
        text = f"{self.start}-{self.end_date}: {self.summary}"
        if self.location:
            text += f" ({self.location})"
        if self.description:
            text += f"\n\t{self.description}"
        return text


def compare_events(a: EventRecord, b: EventRecord) -> int:
    """Three-way comparison by start, then effective end."""
    return compare(a.start, b.start) or compare(a.end_date, b.end_date)
