"""Tests for key normalization (AST serialization).

Normalization collapses insignificant whitespace inside captures, joins
multi-word names with single spaces, closes unterminated tokens, and is
idempotent.
"""

import pytest
from hypothesis import event, example, given
from hypothesis import strategies as st

from lexi18n.enums import Grammar
from lexi18n.syntax import serialize, serialize_capture, tokenize

_SYNTAX_ALPHABET = st.sampled_from(list("ab 1{}|/'\"`\\\t\n"))


class TestSerialize:
    """Normalized forms of representative keys."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("hello { number }", "hello {number}"),
            ("hello {  future  date | unix  timestamp    }", "hello {future date|unix timestamp}"),
            ("{ 'a' | /b/ }", "{'a'|/b/}"),
            ("{ a /x/ }", "{a /x/}"),
            ("plain text", "plain text"),
            ("a {{ b", "a {{ b"),
            ("{}", "{}"),
            ("{ }", "{}"),
            ("{ {x{ `a`}", "{ {x{ `a`}"),
        ],
    )
    def test_normalized_form(self, source: str, expected: str) -> None:
        """Captures are rewritten; literal text is kept verbatim."""
        assert serialize(tokenize(source)) == expected

    def test_unterminated_tokens_are_closed(self) -> None:
        """Open strings, regexes and captures get their closing delimiters."""
        assert serialize(tokenize("x {'abc")) == "x {'abc'}"
        assert serialize(tokenize("{/ab")) == "{/ab/}"
        assert serialize(tokenize("{number")) == "{number}"

    def test_value_escapes_are_kept(self) -> None:
        """Escaped braces in values stay escaped in the normalized form."""
        assert serialize(tokenize("\\{0} { 0 }", Grammar.VALUE)) == "\\{0} {0}"

    def test_serialize_single_capture(self) -> None:
        """serialize_capture normalizes one capture token."""
        capture = tokenize("{  past   day   unix timestamp }").tokens[0]
        assert serialize_capture(capture) == "{past day unix timestamp}"


class TestSerializeProperties:
    """Idempotence over arbitrary input."""

    @given(
        source=st.text(alphabet=_SYNTAX_ALPHABET, max_size=40),
        grammar=st.sampled_from(list(Grammar)),
    )
    @example(source="{ {x{ `a`}", grammar=Grammar.KEY)
    @example(source="{ {x{ `a`}", grammar=Grammar.VALUE)
    def test_normalization_is_a_fixed_point(self, source: str, grammar: Grammar) -> None:
        """Normalizing a normalized key changes nothing."""
        once = serialize(tokenize(source, grammar))
        twice = serialize(tokenize(once, grammar))
        event(f"changed={once != source}")
        assert twice == once

    @given(words=st.lists(st.sampled_from(["number", "string", "unix", "date"]), min_size=1, max_size=4))
    def test_whitespace_inside_capture_is_insignificant(self, words: list[str]) -> None:
        """Padding a capture with extra whitespace does not change its form."""
        tight = "{" + " ".join(words) + "}"
        loose = "{  " + "   \t ".join(words) + "\n }"
        assert serialize(tokenize(loose)) == serialize(tokenize(tight)) == tight
