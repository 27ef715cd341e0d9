"""Parsing entry points for translation keys and values.

parse_key() and parse_value() tokenize, analyse and compile a string once
and cache the result, since the same keys are parsed for every lookup
against a translation map.

Python 3.13+.
"""

from __future__ import annotations

import functools
from collections.abc import Sequence
from dataclasses import dataclass

from lexi18n.constants import MAX_PARSE_CACHE_SIZE
from lexi18n.enums import Grammar
from lexi18n.locale_utils import LocaleTag
from lexi18n.syntax.ast import AST
from lexi18n.syntax.serializer import serialize
from lexi18n.syntax.tokenizer import tokenize

from .expression_formatters import ExpressionFormatter
from .matcher import Matcher, MatchResult, compile_matcher, is_constant_template
from .priority import Priority, calculate_priority
from .value_formatter import TemplateFormatter, compile_formatter

__all__ = ["ParseResult", "ValueParseResult", "clear_parse_cache", "parse_key", "parse_value"]


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Parsed translation key.

    Attributes:
        key: Original key
        ast: Token tree of the key
        priority: (capture_count, specificity_sum)
        priority_as_number: Integer projection of priority; higher wins
        normalized_key: Canonical spelling of the key
        matcher: Compiled matcher
        is_constant: False when matching depends on the current time
    """

    key: str
    ast: AST
    priority: Priority
    priority_as_number: int
    normalized_key: str
    matcher: Matcher
    is_constant: bool = True

    @property
    def is_template(self) -> bool:
        return self.priority.capture_count > 0

    def match(self, text: str) -> MatchResult:
        """Match a text, returning captured parameters on success."""
        return self.matcher(text)

    def matches(self, text: str) -> bool:
        """Whether a text matches this key."""
        return self.matcher(text).is_match


@dataclass(frozen=True, slots=True)
class ValueParseResult:
    """Parsed translation value.

    Attributes:
        value: Original value
        ast: Token tree of the value
        normalized_value: Canonical spelling of the value
        formatter: Compiled template
    """

    value: str
    ast: AST
    normalized_value: str
    formatter: TemplateFormatter

    def format(
        self,
        parameters: Sequence[str],
        locale: str | LocaleTag,
        default_formatters: Sequence[ExpressionFormatter] = (),
    ) -> str:
        """Shortcut for formatter.format()."""
        return self.formatter.format(parameters, locale, default_formatters)


@functools.lru_cache(maxsize=MAX_PARSE_CACHE_SIZE)
def parse_key(key: str) -> ParseResult:
    """Parse a translation key.

    Example:
        >>> result = parse_key("hello { number }")
        >>> result.priority, result.normalized_key
        (Priority(capture_count=1, specificity_sum=400), 'hello {number}')
        >>> result.matches("hello 42")
        True
    """
    ast = tokenize(key, Grammar.KEY)
    priority, as_number = calculate_priority(ast)
    return ParseResult(
        key=key,
        ast=ast,
        priority=priority,
        priority_as_number=as_number,
        normalized_key=serialize(ast),
        matcher=compile_matcher(ast),
        is_constant=is_constant_template(ast),
    )


@functools.lru_cache(maxsize=MAX_PARSE_CACHE_SIZE)
def parse_value(value: str) -> ValueParseResult:
    """Parse a translation value into a renderable template.

    Example:
        >>> parse_value("1 meter is {0 | number} kilometers").format(["0.001"], "fr-FR")
        '1 meter is 0,001 kilometers'
    """
    ast = tokenize(value, Grammar.VALUE)
    return ValueParseResult(
        value=value,
        ast=ast,
        normalized_value=serialize(ast),
        formatter=compile_formatter(ast),
    )


def clear_parse_cache() -> None:
    """Drop cached key and value parse results."""
    parse_key.cache_clear()
    parse_value.cache_clear()
