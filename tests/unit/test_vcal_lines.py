"""Unit tests for vcal_lite.parser.vcal_lines (unfolding and tokenizing)."""

import pytest

from vcal_lite.exceptions import MalformedLineError
from vcal_lite.parser.vcal_lines import TokenizedLine, tokenize_line, unfold_lines
from vcal_lite.parser.vcal_models import VCalParameter

pytestmark = pytest.mark.unit


class TestUnfoldLines:
    """Tests for unfold_lines()."""

    def test_folded_line_rejoins_predecessor(self):
        """CRLF followed by one space is removed entirely, space included."""
        assert unfold_lines("SUMMARY:Hello\r\n World") == ["SUMMARY:HelloWorld"]

    def test_fold_removes_only_the_first_space(self):
        """Additional leading spaces on a continuation are content."""
        assert unfold_lines("SUMMARY:Hello\r\n  World") == ["SUMMARY:Hello World"]

    def test_mixed_line_endings_split_like_lf(self):
        """CRLF, lone CR and LF all produce the same logical lines."""
        mixed = unfold_lines("A:1\r\nB:2\rC:3\nD:4")
        plain = unfold_lines("A:1\nB:2\nC:3\nD:4")

        assert mixed == plain
        assert mixed == ["A:1", "B:2", "C:3", "D:4"]

    def test_fold_followed_by_bare_cr(self):
        """A folded line next to a bare CR still yields the right line count."""
        lines = unfold_lines("SUMMARY:Hel\r\n lo\rLOCATION:Here\r\n")
        assert lines == ["SUMMARY:Hello", "LOCATION:Here", ""]
        assert len(lines) == len(unfold_lines("SUMMARY:Hello\nLOCATION:Here\n"))

    def test_lf_space_is_not_a_fold(self):
        """Only CRLF-space folds; LF-space leaves a separate line."""
        assert unfold_lines("SUMMARY:Hello\n World") == ["SUMMARY:Hello", " World"]

    def test_tab_continuation_is_not_a_fold(self):
        """Tab continuations are not collapsed."""
        assert unfold_lines("A:1\r\n\tB") == ["A:1", "\tB"]

    def test_empty_input(self):
        assert unfold_lines("") == [""]


class TestTokenizeLine:
    """Tests for tokenize_line()."""

    def test_simple_property(self):
        token = tokenize_line("SUMMARY:Team sync")

        assert token == TokenizedLine(name="SUMMARY", parameters=(), value="Team sync")

    def test_parameters_with_quoted_value(self):
        """Quoted values keep ';' and ':' literally and drop the quotes."""
        token = tokenize_line('X;A=1;B="two;three":val')

        assert token.name == "X"
        assert token.parameters == (
            VCalParameter(name="A", value="1"),
            VCalParameter(name="B", value="two;three"),
        )
        assert token.value == "val"

    def test_quoted_value_containing_colon(self):
        token = tokenize_line('DURATION;X-TEST=joe;X-Test="http://joe;":PT3600S')

        assert [(p.name, p.value) for p in token.parameters] == [
            ("X-TEST", "joe"),
            ("X-Test", "http://joe;"),
        ]
        assert token.value == "PT3600S"

    def test_duplicate_parameter_names_are_kept_in_order(self):
        token = tokenize_line("X;TYPE=a;TYPE=b:v")

        assert [p.value for p in token.parameters] == ["a", "b"]

    def test_empty_parameter_value(self):
        token = tokenize_line("X;A=:v")

        assert token.parameters == (VCalParameter(name="A", value=""),)
        assert token.value == "v"

    def test_value_keeps_later_colons(self):
        token = tokenize_line("DESCRIPTION:Call at 10:30")

        assert token.value == "Call at 10:30"

    def test_empty_value(self):
        token = tokenize_line("RRULE:")

        assert token.value == ""
        assert token.values == ("",)

    def test_values_split_on_commas(self):
        token = tokenize_line("EXDATE:20230101T090000,20230108T090000")

        assert token.values == ("20230101T090000", "20230108T090000")

    def test_escaped_separator_in_parameter_value(self):
        """A backslash keeps the next character from ending the value."""
        token = tokenize_line(r"X;A=a\;b:v")

        assert token.parameters == (VCalParameter(name="A", value=r"a\;b"),)
        assert token.value == "v"

    def test_escaped_quote_inside_quoted_value(self):
        token = tokenize_line(r'X;A="say \"hi\"":v')

        assert token.parameters[0].value == r"say \"hi\""
        assert token.value == "v"


class TestTokenizeLineErrors:
    """Malformed lines raise MalformedLineError instead of running off the end."""

    def test_no_delimiter(self):
        with pytest.raises(MalformedLineError) as exc_info:
            tokenize_line("FOO", 7)

        assert exc_info.value.line_number == 7
        assert exc_info.value.line == "FOO"
        assert "Line 7" in str(exc_info.value)

    def test_unterminated_unquoted_parameter(self):
        with pytest.raises(MalformedLineError, match="unterminated parameter value"):
            tokenize_line("X;A=1")

    def test_unterminated_quoted_parameter(self):
        with pytest.raises(MalformedLineError, match="unterminated quoted"):
            tokenize_line('X;A="never closed:val')

    def test_quoted_parameter_at_end_of_line(self):
        with pytest.raises(MalformedLineError, match="missing ':'"):
            tokenize_line('X;A="closed"')

    def test_text_after_quoted_parameter(self):
        with pytest.raises(MalformedLineError, match="unexpected text"):
            tokenize_line('X;A="q"junk:val')

    def test_parameter_without_equals(self):
        with pytest.raises(MalformedLineError, match="without '='"):
            tokenize_line("X;NOEQUALS:val")

    def test_trailing_semicolon(self):
        with pytest.raises(MalformedLineError):
            tokenize_line("X;")

    def test_trailing_backslash(self):
        with pytest.raises(MalformedLineError):
            tokenize_line("X\\")
