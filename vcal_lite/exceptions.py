"""Exception hierarchy for VCAL parsing.

Every fatal parse failure derives from VCalParseError so callers can reject an
import with a single except clause. Unknown timezones are not errors: the
parser substitutes the fallback zone and logs a warning.
"""

from typing import Optional


class VCalError(Exception):
    """Base exception for all vcal_lite errors."""


class VCalConfigError(VCalError):
    """Configuration file could not be used.

    Raised when:
    - The config file parses but its top level is not a mapping
    """


class VCalParseError(VCalError):
    """A VCAL document could not be parsed.

    No partial Document is ever produced alongside this error.

    Attributes:
        line_number: 1-based logical line number (after unfolding), if known
        line: Offending logical line, if known
        property_name: Property whose value failed to parse, if known
    """

    def __init__(
        self,
        message: str,
        *,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
        property_name: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.line_number = line_number
        self.line = line
        self.property_name = property_name


class MalformedLineError(VCalParseError):
    """A property line could not be tokenized.

    Raised when:
    - The line has neither ';' nor ':' after the property name
    - A parameter runs off the end of the line (unterminated quote or value)
    - The ':' delimiter before the value is missing
    """


class UnbalancedBlockError(VCalParseError):
    """BEGIN/END markers do not pair up.

    Only raised when strict block checking is enabled. By default an END with
    no open block is ignored and blocks left open at end of input are kept.
    """


class DateTimeParseError(VCalParseError):
    """DTSTART or DTEND is not a recognized compact date-time."""


class VCalContentTooLargeError(VCalParseError):
    """Raised when VCAL content exceeds the configured size limit."""
