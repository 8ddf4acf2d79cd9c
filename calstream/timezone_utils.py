"""Time zone resolution for calstream."""

from __future__ import annotations

import datetime
import logging
from functools import lru_cache
from typing import ClassVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import InvalidTimezoneError

logger = logging.getLogger(__name__)

UTC = datetime.timezone.utc


class TimezoneResolver:
    """Resolves TZID parameter values to tzinfo objects."""

    # Windows timezone names to IANA identifier mapping
    # Common Windows timezones used in ICS files from Outlook/Exchange
    WINDOWS_TZ_MAP: ClassVar[dict[str, str]] = {
        "Pacific Standard Time": "America/Los_Angeles",
        "Mountain Standard Time": "America/Denver",
        "Central Standard Time": "America/Chicago",
        "Eastern Standard Time": "America/New_York",
        "Alaskan Standard Time": "America/Anchorage",
        "Hawaiian Standard Time": "Pacific/Honolulu",
        "Arizona Standard Time": "America/Phoenix",
        "GMT Standard Time": "Europe/London",
        "Central European Standard Time": "Europe/Paris",
        "W. Europe Standard Time": "Europe/Berlin",
        "Romance Standard Time": "Europe/Paris",
        "China Standard Time": "Asia/Shanghai",
        "Tokyo Standard Time": "Asia/Tokyo",
        "India Standard Time": "Asia/Kolkata",
        "AUS Eastern Standard Time": "Australia/Sydney",
        "UTC": "UTC",
    }

    def resolve(self, name: str, strict: bool = False) -> datetime.tzinfo:
        """Resolve a zone name, falling back to UTC.

        Args:
            name: IANA or Windows zone name; empty means UTC
            strict: Raise instead of falling back when the name is unknown

        Returns:
            Matching tzinfo, or UTC for empty and unknown names

        Raises:
            InvalidTimezoneError: If strict and the name cannot be resolved
        """
        name = (name or "").strip().strip('"')
        if not name or name.upper() in ("UTC", "Z", "GMT"):
            return UTC

        zone = _lookup(self.WINDOWS_TZ_MAP.get(name, name))
        if zone is not None:
            return zone

        if strict:
            raise InvalidTimezoneError(f"Unknown time zone: {name!r}")
        logger.warning("Unknown time zone %r, assuming UTC", name)
        return UTC


@lru_cache(maxsize=128)
def _lookup(iana_name: str) -> ZoneInfo | None:
    try:
        return ZoneInfo(iana_name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None


_resolver = TimezoneResolver()


def resolve_timezone(name: str, strict: bool = False) -> datetime.tzinfo:
    """Resolve a zone name (convenience function).

    Returns:
        tzinfo for the name, UTC when it is empty or unknown
    """
    return _resolver.resolve(name, strict=strict)


def windows_tz_to_iana(windows_tz: str) -> str | None:
    """Convert Windows timezone name to IANA timezone identifier.

    Args:
        windows_tz: Windows timezone name (e.g., "Mountain Standard Time")

    Returns:
        IANA timezone identifier (e.g., "America/Denver") or None if not found
    """
    return _resolver.WINDOWS_TZ_MAP.get(windows_tz)
