"""Token tree for the key/value mini-language.

A source string is split into top-level LITERAL and CAPTURE tokens. Only
CAPTURE tokens have children, holding the parsed contents of ``{...}``.
Tokens are immutable and carry no parent references.

Python 3.13+.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from lexi18n.enums import Grammar, TokenKind

__all__ = ["AST", "QUOTE_DELIMITERS", "STRING_KINDS", "Token"]

_STRING_ESCAPE = re.compile(r"\\(.)", re.DOTALL)

STRING_KINDS: frozenset[TokenKind] = frozenset({
    TokenKind.SINGLE_QUOTED_STRING,
    TokenKind.DOUBLE_QUOTED_STRING,
    TokenKind.BACKTICK_STRING,
})

QUOTE_DELIMITERS: dict[TokenKind, str] = {
    TokenKind.SINGLE_QUOTED_STRING: "'",
    TokenKind.DOUBLE_QUOTED_STRING: '"',
    TokenKind.BACKTICK_STRING: "`",
    TokenKind.REGEX: "/",
}


@dataclass(frozen=True, slots=True)
class Token:
    """A token of a key or value.

    Attributes:
        start: Offset of the first character in the source
        end: Offset one past the last character in the source
        kind: Token kind
        text: Token text. Literal text has escapes resolved; regex and
            quoted strings keep their delimiters.
        child_tokens: Parsed contents, only for CAPTURE tokens
        closed: False when the source ended before the closing delimiter
    """

    start: int
    end: int
    kind: TokenKind
    text: str
    child_tokens: tuple[Token, ...] = ()
    closed: bool = True

    @property
    def inner_text(self) -> str:
        """Text between the delimiters of a regex or quoted-string token."""
        if self.kind not in QUOTE_DELIMITERS:
            return self.text
        end = len(self.text) - 1 if self.closed else len(self.text)
        return self.text[1:end]

    @property
    def literal_value(self) -> str:
        """Inner text of a quoted string with backslash escapes resolved."""
        return _STRING_ESCAPE.sub(r"\1", self.inner_text)


@dataclass(frozen=True, slots=True)
class AST:
    """Tokenized key or value.

    Attributes:
        source: The tokenized string
        tokens: Top-level LITERAL and CAPTURE tokens in source order
        grammar: Grammar used to tokenize the source
    """

    source: str
    tokens: tuple[Token, ...]
    grammar: Grammar = Grammar.KEY

    @property
    def captures(self) -> tuple[Token, ...]:
        """CAPTURE tokens, left to right."""
        return tuple(token for token in self.tokens if token.kind is TokenKind.CAPTURE)

    @property
    def has_captures(self) -> bool:
        return any(token.kind is TokenKind.CAPTURE for token in self.tokens)
