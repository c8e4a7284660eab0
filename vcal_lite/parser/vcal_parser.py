"""VCAL document parser - vcal_lite.

Turns a vCalendar/iCalendar text blob into a VCalDocument: an arena of
property nodes nested under BEGIN/END blocks, plus the start, timezone,
duration, recurrence and all-day fields derived from the root-level
properties.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from vcal_lite.config_loader import VCalConfig
from vcal_lite.core.timezone_utils import TimezoneResolver, get_fallback_timezone
from vcal_lite.exceptions import (
    DateTimeParseError,
    UnbalancedBlockError,
    VCalContentTooLargeError,
)
from vcal_lite.parser.vcal_datetime import ParsedDateTime, VCalDateTimeParser, format_duration
from vcal_lite.parser.vcal_lines import TokenizedLine, tokenize_line, unfold_lines
from vcal_lite.parser.vcal_models import VCalBegin, VCalDocument, VCalNode, VCalProperty

logger = logging.getLogger(__name__)

BEGIN = "BEGIN"
END = "END"

ZERO_DURATION = "+P0S"


@dataclass
class _NodeDraft:
    name: str
    parameters: tuple
    value: str
    parent_id: Optional[int]
    line_number: int
    children: Optional[list[int]] = None


@dataclass
class _TreeBuilder:
    """Mutable tree state for one parse; frozen into models at the end."""

    strict_blocks: bool = False
    drafts: list[_NodeDraft] = field(default_factory=list)
    root: list[int] = field(default_factory=list)
    current: Optional[int] = None

    def add(self, token: TokenizedLine, line_number: int, line: str) -> None:
        if token.name == END:
            self._close_block(token, line_number, line)
            return

        node_id = len(self.drafts)
        draft = _NodeDraft(
            name=token.name,
            parameters=token.parameters,
            value=token.value,
            parent_id=self.current,
            line_number=line_number,
            children=[] if token.name == BEGIN else None,
        )
        self.drafts.append(draft)
        if self.current is None:
            self.root.append(node_id)
        else:
            self.drafts[self.current].children.append(node_id)

        if token.name == BEGIN:
            self.current = node_id

    def _close_block(self, token: TokenizedLine, line_number: int, line: str) -> None:
        if self.current is None:
            if self.strict_blocks:
                raise UnbalancedBlockError(
                    f"Line {line_number}: END:{token.value} with no open block",
                    line_number=line_number,
                    line=line,
                )
            # Stay at root
            logger.warning(
                "Ignoring END:%s on line %d with no open block", token.value, line_number
            )
            return

        open_block = self.drafts[self.current]
        if self.strict_blocks and open_block.value != token.value:
            raise UnbalancedBlockError(
                f"Line {line_number}: END:{token.value} closes BEGIN:{open_block.value} "
                f"from line {open_block.line_number}",
                line_number=line_number,
                line=line,
            )
        self.current = open_block.parent_id

    def finish(self) -> None:
        if self.current is None:
            return

        unclosed = []
        node_id: Optional[int] = self.current
        while node_id is not None:
            unclosed.append(self.drafts[node_id])
            node_id = self.drafts[node_id].parent_id
        names = ", ".join(f"{d.value} (line {d.line_number})" for d in unclosed)

        if self.strict_blocks:
            innermost = unclosed[0]
            raise UnbalancedBlockError(
                f"Blocks still open at end of input: {names}",
                line_number=innermost.line_number,
            )
        logger.warning("Blocks still open at end of input: %s", names)

    def freeze(self) -> tuple[tuple[VCalNode, ...], tuple[int, ...]]:
        nodes: list[VCalNode] = []
        for node_id, draft in enumerate(self.drafts):
            common: dict[str, Any] = {
                "node_id": node_id,
                "name": draft.name,
                "parameters": draft.parameters,
                "value": draft.value,
                "values": tuple(draft.value.split(",")),
                "parent_id": draft.parent_id,
                "line_number": draft.line_number,
            }
            if draft.children is not None:
                nodes.append(VCalBegin(children=tuple(draft.children), **common))
            else:
                nodes.append(VCalProperty(**common))
        return tuple(nodes), tuple(self.root)


class VCalParser:
    """Parser for VCAL text into VCalDocument objects.

    A parser instance holds only configuration and may be shared between
    threads; every call to parse() builds an independent document.
    """

    def __init__(
        self,
        config: Optional[VCalConfig] = None,
        timezone_resolver: Optional[TimezoneResolver] = None,
    ) -> None:
        """Initialize VCAL parser.

        Args:
            config: Parser configuration (defaults to VCalConfig())
            timezone_resolver: Callable mapping a TZID to tzinfo or None;
                defaults to the zoneinfo-backed lookup
        """
        self.config = config or VCalConfig()
        self._datetime_parser = VCalDateTimeParser(
            resolver=timezone_resolver,
            fallback_zone=get_fallback_timezone(self.config.fallback_timezone),
        )

    def parse(self, content: Union[str, bytes]) -> VCalDocument:
        """Parse VCAL content into a document.

        Args:
            content: Raw VCAL text; bytes are decoded as UTF-8

        Returns:
            Fully built, immutable VCalDocument

        Raises:
            TypeError: If content is None
            VCalContentTooLargeError: If content exceeds max_content_bytes
            MalformedLineError: If a property line cannot be tokenized
            UnbalancedBlockError: If strict_blocks is set and BEGIN/END do not pair
            DateTimeParseError: If a root-level DTSTART or DTEND is not a valid date-time
        """
        text = self._decode(content)
        lines = unfold_lines(text)
        logger.debug("Parsing VCAL content: %d logical lines", len(lines))

        builder = _TreeBuilder(strict_blocks=self.config.strict_blocks)
        for line_number, line in enumerate(lines, start=1):
            if not line:
                continue
            builder.add(tokenize_line(line, line_number), line_number, line)
        builder.finish()

        nodes, root = builder.freeze()
        document = VCalDocument(nodes=nodes, root=root, **self._derive_fields(nodes, root))
        logger.debug(
            "Parsed %d nodes (%d at root): dtstart=%r tzid=%r duration=%r rrule=%r all_day=%s",
            len(nodes),
            len(root),
            document.dtstart,
            document.tzid,
            document.duration,
            document.rrule,
            document.all_day,
        )
        return document

    def _decode(self, content: Union[str, bytes]) -> str:
        if content is None:
            raise TypeError("VCAL content cannot be None")

        limit = self.config.max_content_bytes
        if isinstance(content, bytes):
            size = len(content)
        else:
            size = len(content.encode("utf-8"))
        if size > limit:
            logger.error("VCAL content too large: %d bytes exceeds %d limit", size, limit)
            raise VCalContentTooLargeError(
                f"VCAL content too large: {size} bytes exceeds {limit} limit"
            )

        if isinstance(content, bytes):
            content = content.decode("utf-8", errors="replace")
        return content.lstrip("\ufeff")

    def _derive_fields(
        self, nodes: tuple[VCalNode, ...], root: tuple[int, ...]
    ) -> dict[str, Any]:
        """Scan root-level properties for the document's summary fields.

        Nested blocks are not scanned, so the DTSTART/RRULE lines inside a
        VTIMEZONE never leak into the event's fields. A later DURATION or
        DTEND overwrites an earlier one.
        """
        derived: dict[str, Any] = {
            "dtstart": None,
            "tzid": None,
            "duration": None,
            "rrule": None,
            "all_day": False,
            "start": None,
        }

        for node_id in root:
            prop = nodes[node_id]
            if prop.name == "DTSTART":
                parsed = self._parse_datetime(prop, derived)
                derived["start"] = parsed.instant
                derived["dtstart"] = prop.value
                if parsed.date_only:
                    derived["all_day"] = True
            elif prop.name == "DTEND":
                parsed = self._parse_datetime(prop, derived)
                if derived["start"] is None:
                    derived["duration"] = ZERO_DURATION
                else:
                    derived["duration"] = format_duration(derived["start"], parsed.instant)
            elif prop.name == "DURATION":
                derived["duration"] = prop.value
            elif prop.name == "RRULE":
                derived["rrule"] = prop.value

        return derived

    def _parse_datetime(self, prop: VCalProperty, derived: dict[str, Any]) -> ParsedDateTime:
        # A TZID stays in effect for later DTSTART/DTEND lines that omit one
        tzid = prop.get_parameter("TZID")
        if tzid is not None:
            derived["tzid"] = tzid

        try:
            return self._datetime_parser.parse(prop.value, derived["tzid"])
        except ValueError as e:
            logger.warning(
                "Unable to parse %s=%r on line %d", prop.name, prop.value, prop.line_number
            )
            raise DateTimeParseError(
                f"Line {prop.line_number}: unable to parse {prop.name}={prop.value!r}",
                line_number=prop.line_number,
                property_name=prop.name,
            ) from e


def parse_vcal(
    content: Union[str, bytes],
    config: Optional[VCalConfig] = None,
    timezone_resolver: Optional[TimezoneResolver] = None,
) -> VCalDocument:
    """Parse VCAL content with a one-off parser (convenience function)."""
    return VCalParser(config, timezone_resolver).parse(content)
