"""Single-pass state-machine tokenizer for keys and values.

States mirror token kinds. Plain text is LITERAL; ``{`` opens a CAPTURE
(``{{`` is a literal brace). Inside a capture:

- whitespace is skipped
- ``|`` emits a CAPTURE_EXPR_SEP
- ``/``, ``'``, ``"`` and backtick open a regex or quoted string
- ``\\`` escapes the next character
- ``}`` closes the capture
- anything else starts a CAPTURE_EXPR word

A word ends at whitespace, ``|``, ``\\`` or ``}``, and that character is then
handled by the capture. Regex and string tokens run to their closing
delimiter; a backslash inside them protects the next character.

Malformed input never raises. Tokens still open at end of input are closed
there and flagged with ``closed=False``.

Python 3.13+.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto

from lexi18n.enums import Grammar, TokenKind

from .ast import AST, Token

__all__ = ["tokenize"]


class _Move(Enum):
    """Transitions that leave the current state instead of entering one."""

    POP = auto()
    """Close the current token including this character."""

    POP_REPROCESS = auto()
    """Close the current token before this character, then handle it again."""


type _Next = TokenKind | _Move

_CAPTURE_TRANSITIONS: dict[str, _Next] = {
    "}": _Move.POP,
    "/": TokenKind.REGEX,
    "'": TokenKind.SINGLE_QUOTED_STRING,
    '"': TokenKind.DOUBLE_QUOTED_STRING,
    "`": TokenKind.BACKTICK_STRING,
    "\\": TokenKind.ESCAPE,
    "\t": TokenKind.CAPTURE,
    " ": TokenKind.CAPTURE,
    "\n": TokenKind.CAPTURE,
    "|": TokenKind.CAPTURE_EXPR_SEP,
}

_TRANSITIONS: dict[TokenKind, dict[str, _Next]] = {
    TokenKind.CAPTURE: _CAPTURE_TRANSITIONS,
    TokenKind.CAPTURE_EXPR: dict.fromkeys("\\\t |\n}", _Move.POP_REPROCESS),
    TokenKind.CAPTURE_EXPR_SEP: {},
    TokenKind.REGEX: {"/": _Move.POP, "\\": TokenKind.ESCAPE},
    TokenKind.SINGLE_QUOTED_STRING: {"'": _Move.POP, "\\": TokenKind.ESCAPE},
    TokenKind.DOUBLE_QUOTED_STRING: {'"': _Move.POP, "\\": TokenKind.ESCAPE},
    TokenKind.BACKTICK_STRING: {"`": _Move.POP, "\\": TokenKind.ESCAPE},
    TokenKind.ESCAPE: {},
}

_DEFAULT_NEXT: dict[TokenKind, _Next] = {
    TokenKind.CAPTURE: TokenKind.CAPTURE_EXPR,
    TokenKind.CAPTURE_EXPR: TokenKind.CAPTURE_EXPR,
    TokenKind.CAPTURE_EXPR_SEP: _Move.POP_REPROCESS,
    TokenKind.REGEX: TokenKind.REGEX,
    TokenKind.SINGLE_QUOTED_STRING: TokenKind.SINGLE_QUOTED_STRING,
    TokenKind.DOUBLE_QUOTED_STRING: TokenKind.DOUBLE_QUOTED_STRING,
    TokenKind.BACKTICK_STRING: TokenKind.BACKTICK_STRING,
    TokenKind.ESCAPE: _Move.POP,
}

_VALUE_LITERAL_ESCAPE = re.compile(r"\{\{|\\(.)", re.DOTALL)


def _literal_text(raw: str, grammar: Grammar) -> str:
    if grammar is Grammar.VALUE:
        return _VALUE_LITERAL_ESCAPE.sub(
            lambda m: "{" if m.group(1) is None else m.group(1), raw
        )
    return raw.replace("{{", "{")


@dataclass(slots=True)
class _PendingToken:
    """Token under construction; lives only on the tokenizer stack."""

    kind: TokenKind
    start: int
    child_tokens: list[Token] = field(default_factory=list)

    def finalize(self, source: str, end: int, grammar: Grammar, *, closed: bool) -> Token:
        raw = source[self.start:end]
        text = _literal_text(raw, grammar) if self.kind is TokenKind.LITERAL else raw
        return Token(self.start, end, self.kind, text, tuple(self.child_tokens), closed)


class _Tokenizer:
    """Explicit-stack tokenizer. The stack bottom is a LITERAL or CAPTURE."""

    __slots__ = ("_grammar", "_source", "_stack", "_tokens")

    def __init__(self, source: str, grammar: Grammar) -> None:
        self._source = source
        self._grammar = grammar
        self._tokens: list[Token] = []
        self._stack: list[_PendingToken] = [_PendingToken(TokenKind.LITERAL, 0)]

    def run(self) -> AST:
        source = self._source
        length = len(source)
        index = 0
        while index < length:
            char = source[index]
            state = self._stack[-1].kind

            if state is TokenKind.LITERAL:
                index = self._literal_step(index, char)
                continue

            next_state = _TRANSITIONS[state].get(char, _DEFAULT_NEXT[state])
            if next_state is state:
                index += 1
            elif next_state is _Move.POP:
                self._pop(index + 1)
                index += 1
            elif next_state is _Move.POP_REPROCESS:
                self._pop(index)
            else:
                self._stack.append(_PendingToken(next_state, index))
                index += 1

        self._finish(length)
        return AST(source, tuple(self._tokens), self._grammar)

    def _literal_step(self, index: int, char: str) -> int:
        if char == "\\" and self._grammar is Grammar.VALUE:
            return index + 2
        if char != "{":
            return index + 1
        if self._source.startswith("{", index + 1):
            return index + 2

        literal = self._stack.pop()
        if index > literal.start:
            self._tokens.append(
                literal.finalize(self._source, index, self._grammar, closed=True)
            )
        self._stack.append(_PendingToken(TokenKind.CAPTURE, index))
        return index + 1

    def _pop(self, end: int, *, closed: bool = True) -> None:
        node = self._stack.pop()
        if node.kind is TokenKind.ESCAPE:
            # Escaped character is consumed; escapes never become tokens
            return
        token = node.finalize(self._source, end, self._grammar, closed=closed)
        if self._stack:
            self._stack[-1].child_tokens.append(token)
        else:
            self._tokens.append(token)
            self._stack.append(_PendingToken(TokenKind.LITERAL, end))

    def _finish(self, end: int) -> None:
        while self._stack:
            node = self._stack[-1]
            if node.kind is TokenKind.ESCAPE:
                # Dangling backslash is not part of any enclosing token
                self._stack.pop()
                end = node.start
            elif node.kind is TokenKind.LITERAL:
                self._stack.pop()
                if end > node.start:
                    self._tokens.append(
                        node.finalize(self._source, end, self._grammar, closed=True)
                    )
            else:
                self._pop(end, closed=False)


def tokenize(source: str, grammar: Grammar = Grammar.KEY) -> AST:
    """Tokenize a key or value into an AST.

    Runs in a single pass with no backtracking. Never raises.

    Args:
        source: Key or value text
        grammar: Grammar.KEY (default) or Grammar.VALUE. Values additionally
            accept backslash escapes in literal text.

    Returns:
        AST of top-level literal and capture tokens

    Example:
        >>> ast = tokenize("I see { number | string } worlds")
        >>> [token.kind.value for token in ast.tokens]
        ['literal', 'capture', 'literal']
        >>> [(t.start, t.end, t.text) for t in ast.tokens[1].child_tokens]
        [(8, 14, 'number'), (15, 16, '|'), (17, 23, 'string')]
    """
    return _Tokenizer(source, grammar).run()
