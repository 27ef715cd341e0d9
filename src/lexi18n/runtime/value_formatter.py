"""Value formatter: renders a value template with captured parameters.

A value placeholder starts with a positional reference (``{0}``) or a quoted
literal (``{'text'}``), optionally followed by a ``|`` pipeline of named
formatters (``{0 | relative time}``). Unknown formatter names are skipped.
A placeholder without any formatter applies the default formatter that
the key matcher chose for that parameter.

A placeholder that references a missing parameter, or that starts with
something other than a position or literal, renders as an empty string.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from lexi18n.diagnostics.errors import FormattingError
from lexi18n.enums import TokenKind
from lexi18n.locale_utils import LocaleTag
from lexi18n.syntax.ast import AST, STRING_KINDS, Token
from lexi18n.syntax.segments import capture_segments

from .expression_formatters import ExpressionFormatter, get_formatter
from .locale_context import LocaleContext
from .value_parsing import is_integer

__all__ = ["Placeholder", "TemplateFormatter", "compile_formatter"]

logger = logging.getLogger(__name__)

_ACCEPTED_CHILD_KINDS = STRING_KINDS | {TokenKind.CAPTURE_EXPR, TokenKind.CAPTURE_EXPR_SEP}


@dataclass(frozen=True, slots=True)
class Placeholder:
    """Compiled value placeholder.

    Attributes:
        position: Index into the captured parameters, or None
        literal: Literal text to emit when position is None
        pipeline: Formatters applied left to right
    """

    position: int | None = None
    literal: str = ""
    pipeline: tuple[ExpressionFormatter, ...] = ()

    def render(
        self,
        parameters: Sequence[str],
        ctx: LocaleContext,
        default_formatters: Sequence[ExpressionFormatter],
    ) -> str:
        if self.position is None:
            result = self.literal
        elif 0 <= self.position < len(parameters):
            result = parameters[self.position]
        else:
            return ""

        if self.pipeline:
            for formatter in self.pipeline:
                result = _apply(formatter, result, ctx)
        elif self.position is not None and self.position < len(default_formatters):
            result = _apply(default_formatters[self.position], result, ctx)
        return result


EMPTY_PLACEHOLDER = Placeholder()


def _apply(formatter: ExpressionFormatter, text: str, ctx: LocaleContext) -> str:
    try:
        return formatter.format(text, ctx)
    except FormattingError as e:
        logger.warning("Formatter '%s' failed: %s", formatter.name, e)
        return e.fallback_value


@dataclass(frozen=True, slots=True)
class TemplateFormatter:
    """Compiled value template.

    Invariant: len(literal_fragments) == len(placeholder_formatters) + 1.

    Attributes:
        literal_fragments: Literal text around placeholders
        placeholder_formatters: One compiled placeholder per capture
    """

    literal_fragments: tuple[str, ...]
    placeholder_formatters: tuple[Placeholder, ...] = ()

    def format(
        self,
        parameters: Sequence[str],
        locale: str | LocaleTag,
        default_formatters: Sequence[ExpressionFormatter] = (),
    ) -> str:
        """Render the template.

        Args:
            parameters: Captured key parameters
            locale: Locale for number/date formatting
            default_formatters: Per-parameter default formatters from matching

        Returns:
            Rendered text. Formatting failures fall back to the raw parameter.
        """
        if not self.placeholder_formatters:
            return self.literal_fragments[0]

        ctx = LocaleContext.create(str(locale))
        parts = [self.literal_fragments[0]]
        for placeholder, fragment in zip(
            self.placeholder_formatters, self.literal_fragments[1:], strict=True
        ):
            parts.append(placeholder.render(parameters, ctx, default_formatters))
            parts.append(fragment)
        return "".join(parts)


def _compile_placeholder(capture: Token) -> Placeholder:
    for child in capture.child_tokens:
        if child.kind not in _ACCEPTED_CHILD_KINDS:
            logger.error("Invalid expression '%s' in value placeholder, ignoring", child.text)

    segments = [
        segment for segment in capture_segments(capture) if segment.kind is not TokenKind.REGEX
    ]
    if not segments:
        return EMPTY_PLACEHOLDER

    first, *rest = segments
    pipeline = tuple(
        formatter
        for formatter in (get_formatter(segment.text) for segment in rest if segment.is_expression)
        if formatter is not None
    )
    if first.is_string:
        return Placeholder(literal=first.text, pipeline=pipeline)
    if is_integer(first.text):
        return Placeholder(position=int(first.text), pipeline=pipeline)
    return EMPTY_PLACEHOLDER


def compile_formatter(ast: AST) -> TemplateFormatter:
    """Compile a value AST into a TemplateFormatter.

    Args:
        ast: Value tokenized with Grammar.VALUE

    Returns:
        TemplateFormatter whose literal fragments surround its placeholders

    Example:
        >>> from lexi18n.enums import Grammar
        >>> from lexi18n.syntax.tokenizer import tokenize
        >>> template = compile_formatter(tokenize("{0} and {'more'}", Grammar.VALUE))
        >>> template.literal_fragments
        ('', ' and ', '')
    """
    if not ast.has_captures:
        return TemplateFormatter(("".join(token.text for token in ast.tokens),))

    fragments: list[str] = []
    placeholders: list[Placeholder] = []
    pending = ""
    for token in ast.tokens:
        if token.kind is TokenKind.CAPTURE:
            fragments.append(pending)
            placeholders.append(_compile_placeholder(token))
            pending = ""
        else:
            pending += token.text
    fragments.append(pending)
    return TemplateFormatter(tuple(fragments), tuple(placeholders))
