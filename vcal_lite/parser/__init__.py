"""VCAL parsing: line tokenizing, date-time handling, models and the parser."""

from vcal_lite.parser.vcal_models import VCalBegin, VCalDocument, VCalParameter, VCalProperty
from vcal_lite.parser.vcal_parser import VCalParser, parse_vcal

__all__ = [
    "VCalBegin",
    "VCalDocument",
    "VCalParameter",
    "VCalParser",
    "VCalProperty",
    "parse_vcal",
]
