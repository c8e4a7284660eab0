"""Line unfolding and property-line tokenizing for VCAL text - vcal_lite.

A logical line has the shape NAME[;PARAM=VALUE]*:VALUE. Parameter values may
be double-quoted, in which case ';' and ':' inside the quotes are literal.
A backslash makes the following character literal while scanning; the raw
text, backslash included, is kept in the result.
"""

from dataclasses import dataclass

from vcal_lite.exceptions import MalformedLineError
from vcal_lite.parser.vcal_models import VCalParameter

FOLD_SEQUENCE = "\r\n "


def unfold_lines(text: str) -> list[str]:
    """Collapse folded lines, normalize line endings and split.

    Folding is removed before CRLF is normalized, so a continuation line
    rejoins its predecessor without the leading space. Remaining CRLF and lone
    CR both become LF.

    Args:
        text: Raw VCAL text

    Returns:
        Logical lines in document order (may include empty strings)

    Examples:
        >>> unfold_lines("SUMMARY:Hello\\r\\n World\\r\\nEND:VEVENT")
        ['SUMMARY:HelloWorld', 'END:VEVENT']
        >>> unfold_lines("A:1\\rB:2\\nC:3")
        ['A:1', 'B:2', 'C:3']
    """
    text = text.replace(FOLD_SEQUENCE, "")
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text.split("\n")


@dataclass(frozen=True)
class TokenizedLine:
    """Pieces of one property line before it is placed in the tree."""

    name: str
    parameters: tuple[VCalParameter, ...]
    value: str

    @property
    def values(self) -> tuple[str, ...]:
        return tuple(self.value.split(","))


def _find_unescaped(line: str, start: int, stops: str) -> int:
    """Index of the first unescaped character of stops at or after start, or -1."""
    i = start
    end = len(line)
    while i < end:
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in stops:
            return i
        i += 1
    return -1


def tokenize_line(line: str, line_number: int = 0) -> TokenizedLine:
    """Split a logical line into name, parameters and raw value.

    Args:
        line: One logical line (already unfolded)
        line_number: 1-based position, reported in errors

    Returns:
        TokenizedLine with parameters in declaration order

    Raises:
        MalformedLineError: If the name is not followed by ';' or ':', a
            parameter is unterminated, or the ':' before the value is missing
    """

    def malformed(reason: str) -> MalformedLineError:
        return MalformedLineError(
            f"Line {line_number}: {reason}: {line!r}", line_number=line_number, line=line
        )

    pos = _find_unescaped(line, 0, ";:")
    if pos == -1:
        raise malformed("no ':' or ';' after property name")
    name = line[:pos]

    params: list[VCalParameter] = []
    while line[pos] == ";":
        name_start = pos + 1
        eq = _find_unescaped(line, name_start, "=;:")
        if eq == -1 or line[eq] != "=":
            raise malformed("parameter without '='")
        param_name = line[name_start:eq]

        value_start = eq + 1
        if value_start < len(line) and line[value_start] == '"':
            close = _find_unescaped(line, value_start + 1, '"')
            if close == -1:
                raise malformed("unterminated quoted parameter value")
            param_value = line[value_start + 1 : close]
            pos = close + 1
            if pos >= len(line):
                raise malformed("missing ':' before property value")
            if line[pos] not in ";:":
                raise malformed("unexpected text after quoted parameter value")
        else:
            pos = _find_unescaped(line, value_start, ";:")
            if pos == -1:
                raise malformed("unterminated parameter value")
            param_value = line[value_start:pos]

        params.append(VCalParameter(name=param_name, value=param_value))

    # line[pos] is the ':' that ends the parameter list
    return TokenizedLine(name=name, parameters=tuple(params), value=line[pos + 1 :])
