"""Enumerations for lexi18n type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class TokenKind(StrEnum):
    """Kind of a token produced by the key/value tokenizer.

    The kind doubles as the tokenizer state that produced the token.
    """

    LITERAL = "literal"
    """Plain text outside of braces: hello world"""

    CAPTURE = "capture"
    """A braced placeholder: { number | string }"""

    CAPTURE_EXPR = "capture-expr"
    """One word of an expression name inside a capture: number"""

    CAPTURE_EXPR_SEP = "capture-expr-sep"
    """Expression separator inside a capture: |"""

    REGEX = "regex"
    """Slash-delimited pattern inside a capture: /^[0-9]+$/"""

    SINGLE_QUOTED_STRING = "single-quoted-string"
    """Single-quoted literal inside a capture: 'text'"""

    DOUBLE_QUOTED_STRING = "double-quoted-string"
    """Double-quoted literal inside a capture: "text\""""

    BACKTICK_STRING = "backtick-string"
    """Backtick-quoted literal inside a capture: `text`"""

    ESCAPE = "escape"
    """Backslash escape; transient, never emitted as a token."""


class Grammar(StrEnum):
    """Which flavour of the mini-language is being tokenized.

    Keys and values share the same capture syntax. Only values honour a
    backslash escape in plain text.
    """

    KEY = "key"
    """Translation map key: literal text and capture expressions"""

    VALUE = "value"
    """Translation map value: literal text and positional placeholders"""


class SpecialExpression(StrEnum):
    """Capture expressions that are not looked up by name."""

    ANY = "any"
    """Empty capture {}: matches everything"""

    REGEX = "regex"
    """Capture holding a /pattern/"""

    STRING = "string"
    """Capture holding a quoted literal that must match exactly"""


class RelativeTime(StrEnum):
    """Relative-time prefix of a time capture expression."""

    PAST = "past"
    PRESENT = "present"
    FUTURE = "future"


class TimeUnit(StrEnum):
    """Time granularity used by capture expressions and formatters.

    Declared from the finest to the coarsest unit.
    """

    MILLISECOND = "millisecond"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


__all__ = [
    "Grammar",
    "RelativeTime",
    "SpecialExpression",
    "TimeUnit",
    "TokenKind",
]
