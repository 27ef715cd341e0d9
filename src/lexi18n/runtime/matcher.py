"""Template matcher: compiles a key AST into a text matcher.

Keys without captures compare by string equality. Otherwise the key becomes
one anchored regular expression with an ``(.*)`` group per capture and the
literal text escaped. A structural match is then validated capture by
capture: each captured substring must satisfy at least one of its
capture's alternatives, tried left to right. The first alternative that
accepts the text supplies the parameter's default formatter.

Python 3.13+.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from lexi18n.enums import SpecialExpression, TokenKind
from lexi18n.syntax.ast import AST, Token
from lexi18n.syntax.segments import capture_segments

from .capture_expressions import CaptureExpressionInfo, lookup, special
from .expression_formatters import ExpressionFormatter

__all__ = ["MatchResult", "Matcher", "compile_matcher", "is_constant_template"]


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Outcome of matching a text against a key.

    Attributes:
        is_match: Whether the text matched structurally and semantically
        parameters: Captured substrings, in capture order
        default_formatters: Formatter of the alternative that accepted
            each parameter
    """

    is_match: bool
    parameters: tuple[str, ...] = ()
    default_formatters: tuple[ExpressionFormatter, ...] = ()

    def __bool__(self) -> bool:
        return self.is_match


NO_MATCH = MatchResult(False)
EMPTY_MATCH = MatchResult(True)

type Matcher = Callable[[str], MatchResult]


class _Alternative:
    """One alternative of a capture with a lazily built predicate."""

    __slots__ = ("_argument", "_predicate", "info")

    def __init__(self, info: CaptureExpressionInfo | None, argument: str = "") -> None:
        self.info = info
        self._argument = argument
        self._predicate: Callable[[str], bool] | None = None

    def matches(self, text: str) -> bool:
        if self.info is None:
            return False
        if self._predicate is None:
            self._predicate = self.info.predicate(self._argument)
        return self._predicate(text)


def _capture_alternatives(capture: Token) -> tuple[_Alternative, ...]:
    segments = capture_segments(capture)
    if not segments:
        return (_Alternative(special(SpecialExpression.ANY)),)

    alternatives = []
    for segment in segments:
        if segment.kind is TokenKind.REGEX:
            alternatives.append(_Alternative(special(SpecialExpression.REGEX), segment.text))
        elif segment.is_string:
            alternatives.append(_Alternative(special(SpecialExpression.STRING), segment.text))
        else:
            alternatives.append(_Alternative(lookup(segment.text)))
    return tuple(alternatives)


def _exact_matcher(expected: str) -> Matcher:
    def match(text: str) -> MatchResult:
        return EMPTY_MATCH if text == expected else NO_MATCH

    return match


class _TemplateMatcher:
    """Regex-based matcher for keys with at least one capture."""

    __slots__ = ("_alternatives", "_pattern")

    def __init__(self, tokens: Sequence[Token]) -> None:
        self._pattern = re.compile("".join(
            "(.*)" if token.kind is TokenKind.CAPTURE else re.escape(token.text)
            for token in tokens
        ))
        self._alternatives = tuple(
            _capture_alternatives(token) for token in tokens if token.kind is TokenKind.CAPTURE
        )

    def __call__(self, text: str) -> MatchResult:
        if not isinstance(text, str):
            return NO_MATCH
        found = self._pattern.fullmatch(text)
        if found is None:
            return NO_MATCH

        parameters = found.groups()
        formatters = []
        for parameter, alternatives in zip(parameters, self._alternatives, strict=True):
            accepted = next((alt for alt in alternatives if alt.matches(parameter)), None)
            if accepted is None or accepted.info is None:
                return NO_MATCH
            formatters.append(accepted.info.default_formatter)
        return MatchResult(True, parameters, tuple(formatters))


def compile_matcher(ast: AST) -> Matcher:
    """Compile a key AST into a matcher.

    Args:
        ast: Tokenized key

    Returns:
        Callable returning a MatchResult for a text

    Example:
        >>> from lexi18n.syntax.tokenizer import tokenize
        >>> match = compile_matcher(tokenize("I sort { number } balls in { number } buckets"))
        >>> match("I sort 130 balls in 5 buckets").parameters
        ('130', '5')
    """
    if not ast.has_captures:
        return _exact_matcher("".join(token.text for token in ast.tokens))
    return _TemplateMatcher(ast.tokens)


def is_constant_template(ast: AST) -> bool:
    """Whether matching the key gives the same answer regardless of the clock.

    Relative-time expressions ("present day date") depend on the current
    time, so query results involving them must not be cached.
    """
    return all(
        alternative.info is None or alternative.info.is_constant
        for token in ast.captures
        for alternative in _capture_alternatives(token)
    )
