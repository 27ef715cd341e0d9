"""Split a capture token into its ``|``-separated alternatives.

``{ future date | 'now' | /^\\d+$/ }`` has three alternatives: the named
expression "future date", the literal "now" and the regex ``^\\d+$``.

Words of a name are joined with single spaces. A ``|`` with nothing before
it yields an empty name, which no registry entry matches.

Python 3.13+.
"""

from dataclasses import dataclass

from lexi18n.enums import TokenKind

from .ast import STRING_KINDS, Token

__all__ = ["CaptureSegment", "capture_segments"]


@dataclass(frozen=True, slots=True)
class CaptureSegment:
    """One alternative of a capture.

    Attributes:
        kind: CAPTURE_EXPR for a named expression, REGEX, or a string kind
        text: Expression name, regex pattern, or unquoted literal
    """

    kind: TokenKind
    text: str

    @property
    def is_expression(self) -> bool:
        return self.kind is TokenKind.CAPTURE_EXPR

    @property
    def is_string(self) -> bool:
        return self.kind in STRING_KINDS


def capture_segments(capture: Token) -> tuple[CaptureSegment, ...]:
    """Alternatives of a capture token, left to right.

    Example:
        >>> from lexi18n.syntax.tokenizer import tokenize
        >>> capture = tokenize("{ future  date | 'now' }").tokens[0]
        >>> [(s.kind.value, s.text) for s in capture_segments(capture)]
        [('capture-expr', 'future date'), ('single-quoted-string', 'now')]
    """
    segments: list[CaptureSegment] = []
    words: list[str] = []
    emitted_since_separator = False

    for token in capture.child_tokens:
        if token.kind is TokenKind.CAPTURE_EXPR:
            words.append(token.text)
        elif token.kind is TokenKind.CAPTURE_EXPR_SEP:
            if words or not emitted_since_separator:
                segments.append(CaptureSegment(TokenKind.CAPTURE_EXPR, " ".join(words)))
            words = []
            emitted_since_separator = False
        elif token.kind is TokenKind.REGEX:
            segments.append(CaptureSegment(TokenKind.REGEX, token.inner_text))
            emitted_since_separator = True
        elif token.kind in STRING_KINDS:
            segments.append(CaptureSegment(token.kind, token.literal_value))
            emitted_since_separator = True

    if words:
        segments.append(CaptureSegment(TokenKind.CAPTURE_EXPR, " ".join(words)))
    return tuple(segments)
