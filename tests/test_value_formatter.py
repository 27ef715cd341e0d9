"""Tests for value template compilation and rendering."""

import logging

import pytest

from lexi18n.runtime.expression_formatters import FORMATTERS
from lexi18n.runtime.key_parser import parse_key, parse_value


def _render(value: str, parameters: tuple[str, ...] = (), locale: str = "en") -> str:
    return parse_value(value).format(parameters, locale)


class TestLiteralValues:
    """Values without placeholders."""

    def test_plain_text(self) -> None:
        assert _render("hello world") == "hello world"

    def test_escaped_brace(self) -> None:
        assert _render("\\{0} is {0}", ("x",)) == "{0} is x"

    def test_double_brace(self) -> None:
        assert _render("{{0} is {0}", ("x",)) == "{0} is x"

    def test_fragments_surround_placeholders(self) -> None:
        template = parse_value("a {0} b {1} c").formatter
        assert template.literal_fragments == ("a ", " b ", " c")
        assert len(template.placeholder_formatters) == 2


class TestPlaceholders:
    """Positional and literal placeholders."""

    def test_positions(self) -> None:
        assert _render("{1} before {0}", ("a", "b")) == "b before a"

    def test_missing_position_renders_empty(self) -> None:
        assert _render("[{2}]", ("a",)) == "[]"

    def test_non_positional_start_renders_empty(self) -> None:
        assert _render("[{number}]", ("1",)) == "[]"
        assert _render("[{}]", ("1",)) == "[]"

    def test_literal_placeholder(self) -> None:
        assert _render("{'caf\\'e'}") == "caf'e"

    def test_literal_through_pipeline(self) -> None:
        assert _render("{'1234' | number}") == "1,234"


class TestPipelines:
    """Formatter pipelines and default formatters."""

    @pytest.mark.parametrize(
        ("locale", "expected"),
        [("en-GB", "1 meter is 0.001 kilometers"), ("fr-FR", "1 meter is 0,001 kilometers")],
    )
    def test_number_uses_locale(self, locale: str, expected: str) -> None:
        assert _render("1 meter is {0 | number} kilometers", ("0.001",), locale) == expected

    def test_unknown_formatter_is_skipped(self) -> None:
        assert _render("{0 | shout | number}", ("1234.5678",)) == "1,234.568"

    def test_pipeline_applies_left_to_right(self) -> None:
        """The second formatter sees the output of the first."""
        assert _render("{0 | number | as is}", ("1000",)) == "1,000"

    def test_default_formatter_applies_without_pipeline(self) -> None:
        key = parse_key("I have {number} apples")
        match = key.match("I have 1234 apples")
        rendered = parse_value("Ich habe {0} Äpfel").format(
            match.parameters, "de", match.default_formatters
        )
        assert rendered == "Ich habe 1.234 Äpfel"

    def test_explicit_pipeline_overrides_default(self) -> None:
        rendered = parse_value("{0 | as is}").format(("1234",), "en", (FORMATTERS["number"],))
        assert rendered == "1234"

    def test_failed_formatter_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        """A value the formatter cannot read is kept and the failure logged."""
        with caplog.at_level(logging.WARNING, logger="lexi18n.runtime.value_formatter"):
            assert _render("[{0 | long date}]", ("soon",)) == "[soon]"
        assert "Formatter 'long date' failed" in caplog.text

    def test_regex_child_is_reported(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="lexi18n.runtime.value_formatter"):
            assert _render("{0 | /x/}", ("a",)) == "a"
        assert "Invalid expression '/x/'" in caplog.text

    def test_long_date_in_english(self) -> None:
        assert _render("{0 | long date}", ("0",), "en-US") == "January 1, 1970"
