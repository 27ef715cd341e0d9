"""Capture expression registry.

A capture such as ``{ number }`` or ``{ past day unix timestamp }`` names an
expression that validates the captured text. Each expression has a priority
score (lower means less restrictive), a predicate factory, and the default
formatter applied when the value placeholder has no explicit pipeline.

Named expressions:
    number                 400   decimal number
    string                 300   text wrapped in matching quotes
    unix timestamp         550   numeric seconds since the epoch
    iso 8601               550   ISO 8601 date-time
    date                   500   either of the above
    unix millis            550   numeric milliseconds since the epoch

Every time expression also exists with a relative prefix (past +50,
present +100, future +50), optionally narrowed by an interval unit
(millisecond +33, second +30, minute +29, hour +28, day +27, week +26,
month +25, year +24), e.g. ``past day unix timestamp`` scores 627.

Special expressions are chosen by capture syntax instead of by name:
    any      100      empty capture {}
    regex    200      /pattern/, searched anywhere in the text
    string   2^20     quoted literal, exact match of the unquoted text

The registry is built once at import time and is read-only.

Python 3.13+.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from types import MappingProxyType

from lexi18n.constants import (
    MS_PER_SECOND,
    PRIORITY_ANY,
    PRIORITY_EXACT_STRING,
    PRIORITY_NUMBER,
    PRIORITY_REGEX,
    PRIORITY_STRING,
)
from lexi18n.enums import RelativeTime, SpecialExpression, TimeUnit

from .expression_formatters import AS_IS, FORMATTERS, ExpressionFormatter
from .value_parsing import (
    epoch_millis,
    is_numeric,
    now_millis,
    parse_iso8601,
    truncate_to_unit,
)

__all__ = [
    "NAMED_EXPRESSIONS",
    "SPECIAL_EXPRESSIONS",
    "CaptureExpressionInfo",
    "MatchPredicate",
    "lookup",
    "special",
]

logger = logging.getLogger(__name__)

type MatchPredicate = Callable[[str], bool]
"""Validates one captured substring."""

type PredicateFactory = Callable[[str], MatchPredicate]
"""Builds a predicate; the argument is the regex pattern or literal, else ''."""


@dataclass(frozen=True, slots=True)
class CaptureExpressionInfo:
    """Registered capture expression.

    Attributes:
        name: Expression name ("number", "past day unix timestamp", "regex")
        priority_value: Specificity score of a capture using this expression
        is_constant: False when matching depends on the current time
        match_predicate_factory: Builds the predicate for one capture
        default_formatter: Formatter for placeholders without a pipeline
    """

    name: str
    priority_value: int
    is_constant: bool
    match_predicate_factory: PredicateFactory
    default_formatter: ExpressionFormatter

    def predicate(self, argument: str = "") -> MatchPredicate:
        """Build this expression's predicate for one capture."""
        return self.match_predicate_factory(argument)


def _always(_text: str) -> bool:
    return True


def _never(_text: str) -> bool:
    return False


def _is_quoted(text: str) -> bool:
    return len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'`"


def _is_iso8601(text: str) -> bool:
    return parse_iso8601(text) is not None


def _is_date(text: str) -> bool:
    return is_numeric(text) or _is_iso8601(text)


def _constant(predicate: MatchPredicate) -> PredicateFactory:
    return lambda _argument: predicate


def _regex_factory(pattern: str) -> MatchPredicate:
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        logger.warning("Invalid regular expression /%s/ in capture, it never matches: %s", pattern, e)
        return _never
    return lambda text: compiled.search(text) is not None


def _exact_factory(literal: str) -> MatchPredicate:
    return lambda text: text == literal


# ============================================================================
# TIME EXPRESSIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class _TimeBase:
    priority: int
    predicate: MatchPredicate
    numeric_unit_ms: int
    default_formatter: str


_TIME_BASES: dict[str, _TimeBase] = {
    "unix timestamp": _TimeBase(550, is_numeric, MS_PER_SECOND, "datetime"),
    "iso 8601": _TimeBase(550, _is_iso8601, MS_PER_SECOND, "datetime"),
    "date": _TimeBase(500, _is_date, MS_PER_SECOND, "datetime"),
    "unix millis": _TimeBase(550, is_numeric, 1, "timestamp"),
}

_RELATIVE_BONUS: dict[RelativeTime, int] = {
    RelativeTime.PAST: 50,
    RelativeTime.PRESENT: 100,
    RelativeTime.FUTURE: 50,
}

_INTERVAL_BONUS: dict[TimeUnit, int] = {
    TimeUnit.MILLISECOND: 33,
    TimeUnit.SECOND: 30,
    TimeUnit.MINUTE: 29,
    TimeUnit.HOUR: 28,
    TimeUnit.DAY: 27,
    TimeUnit.WEEK: 26,
    TimeUnit.MONTH: 25,
    TimeUnit.YEAR: 24,
}

_COMPARATORS: dict[RelativeTime, Callable[[int, int], bool]] = {
    RelativeTime.PAST: lambda value, now: value < now,
    RelativeTime.PRESENT: lambda value, now: value == now,
    RelativeTime.FUTURE: lambda value, now: value > now,
}


def _relative_factory(base: _TimeBase, relation: RelativeTime, unit: TimeUnit) -> PredicateFactory:
    compare = _COMPARATORS[relation]

    def predicate(text: str) -> bool:
        if not base.predicate(text):
            return False
        millis = epoch_millis(text, numeric_unit_ms=base.numeric_unit_ms)
        if millis is None:
            return False
        try:
            value = truncate_to_unit(millis, unit)
        except (OverflowError, ValueError, OSError):
            return False
        return compare(value, truncate_to_unit(now_millis(), unit))

    return _constant(predicate)


def _build_time_expressions() -> dict[str, CaptureExpressionInfo]:
    expressions: dict[str, CaptureExpressionInfo] = {}
    for base_name, base in _TIME_BASES.items():
        formatter = FORMATTERS[base.default_formatter]
        expressions[base_name] = CaptureExpressionInfo(
            base_name, base.priority, True, _constant(base.predicate), formatter
        )
        for relation, relation_bonus in _RELATIVE_BONUS.items():
            name = f"{relation.value} {base_name}"
            expressions[name] = CaptureExpressionInfo(
                name,
                base.priority + relation_bonus,
                False,
                _relative_factory(base, relation, TimeUnit.MILLISECOND),
                formatter,
            )
            for unit, unit_bonus in _INTERVAL_BONUS.items():
                name = f"{relation.value} {unit.value} {base_name}"
                expressions[name] = CaptureExpressionInfo(
                    name,
                    base.priority + relation_bonus + unit_bonus,
                    False,
                    _relative_factory(base, relation, unit),
                    formatter,
                )
    return expressions


def _build_named_expressions() -> dict[str, CaptureExpressionInfo]:
    return {
        "number": CaptureExpressionInfo(
            "number", PRIORITY_NUMBER, True, _constant(is_numeric), FORMATTERS["number"]
        ),
        "string": CaptureExpressionInfo(
            "string", PRIORITY_STRING, True, _constant(_is_quoted), AS_IS
        ),
        **_build_time_expressions(),
    }


NAMED_EXPRESSIONS: MappingProxyType[str, CaptureExpressionInfo] = MappingProxyType(
    _build_named_expressions()
)
"""Expressions referenced by name inside a capture."""

SPECIAL_EXPRESSIONS: MappingProxyType[SpecialExpression, CaptureExpressionInfo] = (
    MappingProxyType({
        SpecialExpression.ANY: CaptureExpressionInfo(
            "any", PRIORITY_ANY, True, _constant(_always), AS_IS
        ),
        SpecialExpression.REGEX: CaptureExpressionInfo(
            "regex", PRIORITY_REGEX, True, _regex_factory, AS_IS
        ),
        SpecialExpression.STRING: CaptureExpressionInfo(
            "string", PRIORITY_EXACT_STRING, True, _exact_factory, AS_IS
        ),
    })
)
"""Expressions selected by capture syntax: empty, /regex/ or quoted literal."""


def lookup(name: str) -> CaptureExpressionInfo | None:
    """Find a named capture expression.

    Args:
        name: Space-joined expression words, e.g. "future iso 8601"

    Returns:
        Registered expression, or None for unknown names

    Example:
        >>> lookup("past day unix timestamp").priority_value
        627
        >>> lookup("numbers") is None
        True
    """
    return NAMED_EXPRESSIONS.get(name)


def special(kind: SpecialExpression) -> CaptureExpressionInfo:
    """Return the special expression for a capture syntax kind."""
    return SPECIAL_EXPRESSIONS[kind]
