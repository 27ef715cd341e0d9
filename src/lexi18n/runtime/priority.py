"""Specificity priority of template keys.

A key's priority is the pair (capture_count, specificity_sum):

- capture_count: number of captures; fewer captures rank higher
- specificity_sum: sum over captures of the lowest score among the
  capture's alternatives (any one alternative matching is enough, so the
  least restrictive one bounds the capture)

priority_as_number folds the pair into one integer for sorting:
``MAX_PRIORITY - (capture_count << 20) + specificity_sum``. Literal keys get
MAX_PRIORITY. Ties keep declaration order, since sorting is stable.

Python 3.13+.
"""

from __future__ import annotations

from typing import NamedTuple

from lexi18n.constants import CAPTURE_COUNT_SHIFT, MAX_PRIORITY, PRIORITY_UNKNOWN
from lexi18n.enums import SpecialExpression, TokenKind
from lexi18n.syntax.ast import AST, Token
from lexi18n.syntax.segments import capture_segments

from .capture_expressions import lookup, special

__all__ = ["Priority", "calculate_priority", "capture_priority", "priority_as_number"]


class Priority(NamedTuple):
    """Lexicographically comparable priority pair."""

    capture_count: int
    specificity_sum: int


def capture_priority(capture: Token) -> int:
    """Score of a single capture token.

    Example:
        >>> from lexi18n.syntax.tokenizer import tokenize
        >>> capture_priority(tokenize("{ number | string }").tokens[0])
        300
    """
    segments = capture_segments(capture)
    if not segments:
        return special(SpecialExpression.ANY).priority_value

    scores = []
    for segment in segments:
        if segment.kind is TokenKind.REGEX:
            scores.append(special(SpecialExpression.REGEX).priority_value)
        elif segment.is_string:
            scores.append(special(SpecialExpression.STRING).priority_value)
        else:
            info = lookup(segment.text)
            scores.append(info.priority_value if info is not None else PRIORITY_UNKNOWN)
    return min(scores)


def priority_as_number(priority: Priority) -> int:
    """Fold a priority pair into a single sortable integer."""
    return MAX_PRIORITY - (priority.capture_count << CAPTURE_COUNT_SHIFT) + priority.specificity_sum


def calculate_priority(ast: AST) -> tuple[Priority, int]:
    """Compute the priority pair and its integer projection.

    Args:
        ast: Tokenized key

    Returns:
        Tuple of (Priority, priority_as_number)

    Example:
        >>> from lexi18n.syntax.tokenizer import tokenize
        >>> calculate_priority(tokenize("hello { number }"))[0]
        Priority(capture_count=1, specificity_sum=400)
    """
    captures = ast.captures
    priority = Priority(len(captures), sum(capture_priority(capture) for capture in captures))
    return priority, priority_as_number(priority)
