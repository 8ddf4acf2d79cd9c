"""Shared fixtures for calstream tests."""

import logging

import pytest

from calstream.logging_config import CALSTREAM_MODULES

SAMPLE_ICS = """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//calstream//tests//EN
BEGIN:VEVENT
UID:single-1
SUMMARY:Planning\\, Q3
DTSTART:20240102T100000Z
DTEND:20240102T110000Z
LOCATION:Room 1
END:VEVENT
BEGIN:VEVENT
UID:daily-1
SUMMARY:Standup
DTSTART:20240101T090000Z
DURATION:PT15M
RRULE:FREQ=DAILY;COUNT=3
BEGIN:VALARM
ACTION:DISPLAY
DESCRIPTION:Reminder
TRIGGER:-PT5M
END:VALARM
END:VEVENT
BEGIN:VEVENT
UID:holiday-1
SUMMARY:Holiday
DTSTART;VALUE=DATE:20240103
END:VEVENT
END:VCALENDAR
"""


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast isolated unit tests")


@pytest.fixture
def sample_ics() -> str:
    return SAMPLE_ICS


@pytest.fixture(autouse=True)
def reset_calstream_loggers():
    """Restore calstream logger levels changed by a test."""
    names = ["", "icalendar", *CALSTREAM_MODULES]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)
