"""Split iCalendar text into per-component property records.

Tokenizing is delegated to the icalendar content-line parser: lines are
unfolded, split into name, parameters and value, and grouped by component.
Values are passed on as text; only TEXT-typed properties are unescaped.
"""

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from icalendar.parser import Contentlines
from icalendar.prop import vText

from .exceptions import PropertyParseError
from .models import PropertyRecord

logger = logging.getLogger(__name__)

TEXT_PROPERTIES = frozenset({"SUMMARY", "LOCATION", "DESCRIPTION"})


def _flatten_params(params: Mapping[str, Any]) -> dict[str, str]:
    """Keep the first value of multi-valued parameters."""
    flat = {}
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            value = value[0] if value else ""
        flat[str(key).upper()] = str(value)
    return flat


def read_components(text: str, component: str = "VEVENT") -> Iterator[list[PropertyRecord]]:
    """Yield the properties of every ``component`` in a document.

    Properties of nested components (such as a VALARM inside a VEVENT) are
    skipped.

    Args:
        text: iCalendar document
        component: Component name to collect

    Yields:
        One list of PropertyRecord per component, in document order

    Raises:
        PropertyParseError: If a content line cannot be parsed or the
            document ends inside a component
    """
    component = component.upper()
    stack: list[str] = []
    current: list[PropertyRecord] | None = None
    depth = 0

    for line in Contentlines.from_ical(text):
        if not line.strip():
            continue
        try:
            name, params, value = line.parts()
        except ValueError as e:
            raise PropertyParseError(f"Malformed content line: {line!r}") from e
        name = name.upper()

        if name == "BEGIN":
            stack.append(value.strip().upper())
            if current is None and stack[-1] == component:
                current = []
                depth = len(stack)
            continue

        if name == "END":
            if current is not None and len(stack) == depth:
                yield current
                current = None
            if stack:
                stack.pop()
            else:
                logger.warning("Unbalanced END:%s in calendar document", value)
            continue

        if current is not None and len(stack) == depth:
            if name in TEXT_PROPERTIES:
                value = str(vText.from_ical(value))
            current.append(PropertyRecord(name, value, _flatten_params(params)))

    if current is not None:
        raise PropertyParseError(f"Calendar document ended inside BEGIN:{component}")
