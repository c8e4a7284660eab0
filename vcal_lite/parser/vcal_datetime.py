"""DTSTART/DTEND value parsing for VCAL documents - vcal_lite.

Only the compact forms are accepted:

    YYYYMMDD            date only (all-day)
    YYYYMMDDTHHMMSS     local time in the property's timezone
    YYYYMMDDTHHMMSSZ    UTC, whatever the TZID says
"""

import logging
import re
from datetime import UTC, datetime, tzinfo
from typing import NamedTuple, Optional

from icalendar.prop import vDate, vDatetime

from vcal_lite.core.timezone_utils import TimezoneResolver, resolve_timezone

logger = logging.getLogger(__name__)

DATE_ONLY_LENGTH = 8

_DATE_RE = re.compile(r"^\d{8}$")
_DATETIME_RE = re.compile(r"^\d{8}T\d{6}Z?$")


class ParsedDateTime(NamedTuple):
    instant: datetime
    date_only: bool


def format_duration(start: datetime, end: datetime) -> str:
    """Format the span between two instants as "+P<seconds>S".

    Seconds are truncated toward zero. A DTEND before DTSTART gives a negative
    count, e.g. "+P-60S".

    Examples:
        >>> format_duration(datetime(2023, 6, 15, 9, tzinfo=UTC), datetime(2023, 6, 15, 10, tzinfo=UTC))
        '+P3600S'
    """
    # Compare in UTC; subtracting datetimes that share a tzinfo ignores DST offsets
    seconds = int((end.astimezone(UTC) - start.astimezone(UTC)).total_seconds())
    return f"+P{seconds}S"


def parse_compact_datetime(value: str, zone: tzinfo) -> ParsedDateTime:
    """Parse a compact date or date-time value against a timezone.

    Date-only values resolve to midnight in zone.

    Raises:
        ValueError: If value is not one of the accepted forms or names an
            impossible calendar date/time
    """
    if _DATE_RE.match(value):
        day = vDate.from_ical(value)
        midnight = datetime(day.year, day.month, day.day, tzinfo=zone)
        return ParsedDateTime(midnight, True)

    if _DATETIME_RE.match(value):
        naive = vDatetime.from_ical(value[:15])
        return ParsedDateTime(naive.replace(tzinfo=UTC if value.endswith("Z") else zone), False)

    raise ValueError(f"Unrecognized date-time format: {value!r}")


class VCalDateTimeParser:
    """Resolves TZIDs and parses DTSTART/DTEND values.

    The timezone lookup is injected so a caller can back it with its own
    timezone service. Unknown identifiers never fail the parse; they fall back
    to fallback_zone with a warning.
    """

    def __init__(
        self,
        resolver: Optional[TimezoneResolver] = None,
        fallback_zone: tzinfo = UTC,
    ) -> None:
        self.resolver = resolver or resolve_timezone
        self.fallback_zone = fallback_zone

    def zone_for(self, tzid: Optional[str]) -> tzinfo:
        if not tzid:
            return UTC

        zone = self.resolver(tzid)
        if zone is None:
            logger.warning("Unknown timezone %r, assuming %s", tzid, self.fallback_zone)
            return self.fallback_zone
        return zone

    def parse(self, value: str, tzid: Optional[str] = None) -> ParsedDateTime:
        """Parse value in the zone named by tzid (UTC when tzid is empty).

        Raises:
            ValueError: If value is not a recognized compact date-time
        """
        parsed = parse_compact_datetime(value, self.zone_for(tzid))
        logger.debug("Parsed %r (tzid=%r) -> %s", value, tzid, parsed.instant.isoformat())
        return parsed
