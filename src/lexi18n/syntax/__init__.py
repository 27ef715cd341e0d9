"""Key/value mini-language tokenizer, token tree and normalization.

Separate from runtime so tooling (linters for translation files) can
inspect keys without pulling in Babel.

Python 3.13+.
"""

from .ast import AST, STRING_KINDS, Token
from .segments import CaptureSegment, capture_segments
from .serializer import serialize, serialize_capture
from .tokenizer import tokenize

__all__ = [
    "AST",
    "STRING_KINDS",
    "CaptureSegment",
    "Token",
    "capture_segments",
    "serialize",
    "serialize_capture",
    "tokenize",
]
