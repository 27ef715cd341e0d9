"""Serialize an AST back to normalized source text.

Normalization keeps literal text exactly as written (including ``{{`` and
value escapes) and rewrites every capture from its tokens: insignificant
whitespace disappears, multi-word expression names are joined with single
spaces, and unterminated strings, regexes and captures are closed.

The normalized form is a fixed point: tokenizing and serializing it again
yields the same text.

Python 3.13+.
"""

from lexi18n.enums import TokenKind

from .ast import AST, QUOTE_DELIMITERS, Token

__all__ = ["serialize", "serialize_capture"]


def _serialize_child(token: Token) -> str:
    if token.kind is TokenKind.CAPTURE_EXPR_SEP:
        return "|"
    if token.kind in QUOTE_DELIMITERS and not token.closed:
        return token.text + QUOTE_DELIMITERS[token.kind]
    return token.text


def serialize_capture(token: Token) -> str:
    """Normalized text of a single capture token.

    Example:
        >>> from lexi18n.syntax.tokenizer import tokenize
        >>> serialize_capture(tokenize("{  future  date | unix  timestamp }").tokens[0])
        '{future date|unix timestamp}'
    """
    parts: list[str] = []
    previous: Token | None = None
    for child in token.child_tokens:
        if (
            previous is not None
            and previous.kind is TokenKind.CAPTURE_EXPR
            and child.kind is not TokenKind.CAPTURE_EXPR_SEP
        ):
            # A word runs on into a following regex or string without a space
            parts.append(" ")
        parts.append(_serialize_child(child))
        previous = child
    body = "".join(parts)
    # "{{" would reread as an escaped brace
    opening = "{ " if body.startswith("{") else "{"
    return opening + body + "}"


def serialize(ast: AST) -> str:
    """Serialize an AST to its normalized source form.

    Args:
        ast: Tokenized key or value

    Returns:
        Normalized text

    Example:
        >>> from lexi18n.syntax.tokenizer import tokenize
        >>> serialize(tokenize("hello {  future  date | unix  timestamp    }"))
        'hello {future date|unix timestamp}'
    """
    parts: list[str] = []
    for token in ast.tokens:
        if token.kind is TokenKind.CAPTURE:
            parts.append(serialize_capture(token))
        else:
            parts.append(ast.source[token.start:token.end])
    return "".join(parts)
