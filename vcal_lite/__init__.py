"""vcal_lite - parser for legacy vCalendar (VCAL) interchange text.

Typical use:

    from vcal_lite import parse_vcal

    document = parse_vcal(raw_text)
    document.dtstart, document.duration, document.rrule, document.all_day
"""

__version__ = "0.1.0"

from vcal_lite.config_loader import VCalConfig, load_config
from vcal_lite.exceptions import (
    DateTimeParseError,
    MalformedLineError,
    UnbalancedBlockError,
    VCalConfigError,
    VCalContentTooLargeError,
    VCalError,
    VCalParseError,
)
from vcal_lite.parser import (
    VCalBegin,
    VCalDocument,
    VCalParameter,
    VCalParser,
    VCalProperty,
    parse_vcal,
)

__all__ = [
    "DateTimeParseError",
    "MalformedLineError",
    "UnbalancedBlockError",
    "VCalBegin",
    "VCalConfig",
    "VCalConfigError",
    "VCalContentTooLargeError",
    "VCalDocument",
    "VCalError",
    "VCalParameter",
    "VCalParseError",
    "VCalParser",
    "VCalProperty",
    "load_config",
    "parse_vcal",
]
