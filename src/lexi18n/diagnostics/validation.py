"""Structured validation issues for locale definition normalization.

Normalizers never raise on malformed input. They return a best-effort result
together with ValidationIssue entries describing what was dropped or repaired.
Each issue carries a property path into the raw input:

- ``.name`` for identifier-like keys
- ``.["some key"]`` (JSON-quoted) for any other key
- ``.[3]`` for list indices

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

__all__ = [
    "ValidationIssue",
    "log_issues",
    "merge_path",
    "property_path",
]

_SIMPLE_PROPERTY = re.compile(r"[a-z][a-z\d]*", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """A single normalization error or warning.

    Attributes:
        path: Property path of the offending entry ('' for the whole input)
        message: Human-readable description
    """

    path: str
    message: str

    def with_prefix(self, prefix: str) -> ValidationIssue:
        """Return the same issue nested under a parent property path."""
        return ValidationIssue(merge_path(prefix, self.path), self.message)

    def format(self, location: str = "") -> str:
        """Format issue as ``location::path, message``."""
        return f"{location}::{self.path}, {self.message}"


def property_path(name: str) -> str:
    """Build the property path segment for a mapping key.

    Example:
        >>> property_path("en")
        '.en'
        >>> property_path("en-GB")
        '.["en-GB"]'
    """
    if _SIMPLE_PROPERTY.fullmatch(name):
        return f".{name}"
    return f".[{json.dumps(name, ensure_ascii=False)}]"


def merge_path(prefix: str, path: str) -> str:
    """Append a child property path to a parent one.

    Example:
        >>> merge_path(".en", ".extends")
        '.en.extends'
        >>> merge_path(".extends", ".[0]")
        '.extends[0]'
    """
    if path == "." or path.startswith(".["):
        return prefix + path[1:]
    return prefix + path


def log_issues(
    logger: logging.Logger,
    location: str,
    errors: Iterable[ValidationIssue] = (),
    warnings: Iterable[ValidationIssue] = (),
) -> None:
    """Report normalization issues found in a document at ``location``."""
    for error in errors:
        logger.error("Error on %s::%s, %s", location, error.path, error.message)
    for warning in warnings:
        logger.warning("Warning on %s::%s, %s", location, warning.path, warning.message)
