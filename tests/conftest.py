"""Shared fixtures for vcal_lite tests."""

import logging
from collections.abc import Generator
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

# Recurring event: event fields at root followed by its VTIMEZONE definition,
# with one folded RRULE inside the DAYLIGHT block.
RECURRING_WITH_VTIMEZONE = (
    'DTSTART;TZID="America/Los_Angeles":20060908T170000\r\n'
    'DURATION;X-TEST=joe;X-Test="http://joe;":PT3600S\r\n'
    "RRULE:FREQ=WEEKLY;BYDAY=FR;WKST=SU\r\n"
    "BEGIN:VTIMEZONE\r\n"
    "TZID:America/Los_Angeles\r\n"
    "X-LIC-LOCATION:America/Los_Angeles\r\n"
    "BEGIN:STANDARD\r\n"
    "TZOFFSETFROM:-0700\r\n"
    "TZOFFSETTO:-0800\r\n"
    "TZNAME:PST\r\n"
    "DTSTART:19701025T020000\r\n"
    "RRULE:FREQ=YEARLY;BYMONTH=10;BYDAY=-1SU\r\n"
    "END:STANDARD\r\n"
    "BEGIN:DAYLIGHT\r\n"
    "TZOFFSETFROM:-0800\r\n"
    "TZOFFSETTO:-0700\r\n"
    "TZNAME:PDT\r\n"
    "DTSTART:19700405T020000\r\n"
    "RRULE:\r\n"
    " FREQ=YEARLY;BYMONTH=4;BYDAY=1SU\r\n"
    "END:DAYLIGHT\r\n"
    "END:VTIMEZONE\r\n"
)


def _has_zone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


@pytest.fixture
def require_tzdata() -> None:
    """Skip when the system timezone database is not available."""
    if not (_has_zone("America/Los_Angeles") and _has_zone("America/New_York")):
        pytest.skip("system timezone database not available")


@pytest.fixture
def recurring_with_vtimezone() -> str:
    """VCAL text with root event fields and a nested VTIMEZONE block."""
    return RECURRING_WITH_VTIMEZONE


@pytest.fixture
def simple_event() -> str:
    """A VCALENDAR holding one VEVENT with a nested VALARM."""
    return (
        "BEGIN:VCALENDAR\r\n"
        "VERSION:1.0\r\n"
        "BEGIN:VEVENT\r\n"
        "SUMMARY:Team sync\r\n"
        "LOCATION:Room 4\r\n"
        "BEGIN:VALARM\r\n"
        "TRIGGER:-PT15M\r\n"
        "END:VALARM\r\n"
        "END:VEVENT\r\n"
        "END:VCALENDAR\r\n"
    )


@pytest.fixture(autouse=True)
def clean_vcal_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Keep VCAL_LITE_* variables from the host shell out of every test."""
    for name in (
        "VCAL_LITE_CONFIG",
        "VCAL_LITE_DEBUG",
        "VCAL_LITE_LOG_LEVEL",
        "VCAL_LITE_MAX_CONTENT_BYTES",
        "VCAL_LITE_STRICT_BLOCKS",
        "VCAL_LITE_FALLBACK_TIMEZONE",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def restore_logging() -> Generator[None, Any, None]:
    """Put logger levels and root handlers back after configure_vcal_logging()."""
    names = ["vcal_lite", "icalendar", "pydantic", "yaml"]
    names += [name for name in logging.root.manager.loggerDict if name.startswith("vcal_lite.")]
    root = logging.getLogger()
    saved_root = (root.level, list(root.handlers))
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)
    root.setLevel(saved_root[0])
    root.handlers[:] = saved_root[1]


def pytest_configure(config: Any) -> None:
    """Register markers used across the suite."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "critical_path: Core functionality tests")
