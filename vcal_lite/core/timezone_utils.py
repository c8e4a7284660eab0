"""TZID normalization and lookup for vcal_lite.

VCAL files carry whatever timezone identifier the sending device used: IANA
names, obsolete aliases, or Windows names from Outlook/Exchange. This module
maps them to IANA identifiers and resolves them through zoneinfo.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, tzinfo
from functools import lru_cache
from typing import ClassVar, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_TIMEZONE = "UTC"

# Any callable mapping a TZID to rules, or None when the name is unknown
TimezoneResolver = Callable[[str], Optional[tzinfo]]


class TimezoneLookup:
    """Resolves TZID parameter values to tzinfo objects."""

    # https://docs.microsoft.com/en-us/windows-hardware/manufacture/desktop/default-time-zones
    WINDOWS_TZ_MAP: ClassVar[dict[str, str]] = {
        # North America
        "Pacific Standard Time": "America/Los_Angeles",
        "Mountain Standard Time": "America/Denver",
        "US Mountain Standard Time": "America/Phoenix",
        "Central Standard Time": "America/Chicago",
        "Eastern Standard Time": "America/New_York",
        "Alaskan Standard Time": "America/Anchorage",
        "Hawaiian Standard Time": "Pacific/Honolulu",
        "Atlantic Standard Time": "America/Halifax",
        "Newfoundland Standard Time": "America/St_Johns",
        # South America
        "SA Pacific Standard Time": "America/Bogota",
        "Argentina Standard Time": "America/Buenos_Aires",
        "E. South America Standard Time": "America/Sao_Paulo",
        # Europe and Africa
        "GMT Standard Time": "Europe/London",
        "W. Europe Standard Time": "Europe/Berlin",
        "Romance Standard Time": "Europe/Paris",
        "Central Europe Standard Time": "Europe/Budapest",
        "E. Europe Standard Time": "Europe/Bucharest",
        "FLE Standard Time": "Europe/Helsinki",
        "GTB Standard Time": "Europe/Athens",
        "Russian Standard Time": "Europe/Moscow",
        "South Africa Standard Time": "Africa/Johannesburg",
        "Egypt Standard Time": "Africa/Cairo",
        # Asia and Pacific
        "India Standard Time": "Asia/Kolkata",
        "China Standard Time": "Asia/Shanghai",
        "Tokyo Standard Time": "Asia/Tokyo",
        "Korea Standard Time": "Asia/Seoul",
        "Singapore Standard Time": "Asia/Singapore",
        "Arabian Standard Time": "Asia/Dubai",
        "Israel Standard Time": "Asia/Jerusalem",
        "AUS Eastern Standard Time": "Australia/Sydney",
        "W. Australia Standard Time": "Australia/Perth",
        "New Zealand Standard Time": "Pacific/Auckland",
    }

    # Obsolete or shorthand names found in older devices' exports
    TZ_ALIAS_MAP: ClassVar[dict[str, str]] = {
        "US/Pacific": "America/Los_Angeles",
        "US/Mountain": "America/Denver",
        "US/Central": "America/Chicago",
        "US/Eastern": "America/New_York",
        "US/Alaska": "America/Anchorage",
        "US/Hawaii": "Pacific/Honolulu",
        "US/Arizona": "America/Phoenix",
        "GMT": "UTC",
        "Z": "UTC",
        "Zulu": "UTC",
        "Universal": "UTC",
        "Etc/UTC": "UTC",
        "Etc/GMT": "UTC",
        "PST8PDT": "America/Los_Angeles",
        "MST7MDT": "America/Denver",
        "CST6CDT": "America/Chicago",
        "EST5EDT": "America/New_York",
        "Asia/Calcutta": "Asia/Kolkata",
        "Asia/Rangoon": "Asia/Yangon",
        "America/Godthab": "America/Nuuk",
    }

    def normalize(self, tz_name: str) -> str | None:
        """Map a TZID to a validated IANA identifier.

        Windows names are tried first, then aliases, then the name itself.

        Args:
            tz_name: TZID value as it appeared in the document

        Returns:
            IANA identifier, or None if zoneinfo does not know the zone

        Examples:
            >>> TimezoneLookup().normalize("Pacific Standard Time")
            'America/Los_Angeles'
            >>> TimezoneLookup().normalize("GMT")
            'UTC'
            >>> TimezoneLookup().normalize("Mars/Olympus_Mons") is None
            True
        """
        if not tz_name:
            return None

        candidate = tz_name.strip()
        candidate = self.WINDOWS_TZ_MAP.get(candidate, candidate)
        candidate = self.TZ_ALIAS_MAP.get(candidate, candidate)

        if candidate == "UTC":
            return candidate
        if _load_zone(candidate) is None:
            return None
        return candidate

    def resolve(self, tz_name: str) -> tzinfo | None:
        """Return timezone rules for a TZID, or None when unknown."""
        iana_name = self.normalize(tz_name)
        if iana_name is None:
            return None
        if iana_name == "UTC":
            return UTC
        return _load_zone(iana_name)


@lru_cache(maxsize=128)
def _load_zone(iana_name: str) -> ZoneInfo | None:
    try:
        return ZoneInfo(iana_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.debug("zoneinfo has no zone named %r", iana_name)
        return None


_lookup = TimezoneLookup()


def normalize_timezone_name(tz_name: str) -> str | None:
    """Normalize a TZID to a canonical IANA identifier (convenience function)."""
    return _lookup.normalize(tz_name)


def resolve_timezone(tz_name: str) -> tzinfo | None:
    """Resolve a TZID to tzinfo rules (convenience function).

    This is the default TimezoneResolver used by the parser.
    """
    return _lookup.resolve(tz_name)


def get_fallback_timezone(tz_name: str = DEFAULT_FALLBACK_TIMEZONE) -> tzinfo:
    """Return rules for the configured fallback zone, or UTC if that is unknown."""
    zone = resolve_timezone(tz_name)
    if zone is None:
        logger.warning("Invalid fallback timezone %r, using UTC", tz_name)
        return UTC
    return zone
