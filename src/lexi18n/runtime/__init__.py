"""Matching and rendering runtime.

Capture expression registry, priority calculator, template matcher, value
formatter and the Babel-backed LocaleContext they format with.

Python 3.13+.
"""

from .capture_expressions import CaptureExpressionInfo, lookup, special
from .expression_formatters import FORMATTERS, ExpressionFormatter, get_formatter
from .key_parser import ParseResult, ValueParseResult, clear_parse_cache, parse_key, parse_value
from .locale_context import LocaleContext
from .matcher import MatchResult, compile_matcher
from .priority import Priority, calculate_priority
from .value_formatter import TemplateFormatter, compile_formatter

__all__ = [
    "FORMATTERS",
    "CaptureExpressionInfo",
    "ExpressionFormatter",
    "LocaleContext",
    "MatchResult",
    "ParseResult",
    "Priority",
    "TemplateFormatter",
    "ValueParseResult",
    "calculate_priority",
    "clear_parse_cache",
    "compile_formatter",
    "compile_matcher",
    "get_formatter",
    "lookup",
    "parse_key",
    "parse_value",
    "special",
]
