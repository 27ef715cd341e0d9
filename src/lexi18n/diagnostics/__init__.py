"""Error types and structured validation issues.

Python 3.13+.
"""

from .errors import FormattingError, I18nError, ImportFailedError, LocaleError
from .validation import ValidationIssue, log_issues, merge_path, property_path

__all__ = [
    "FormattingError",
    "I18nError",
    "ImportFailedError",
    "LocaleError",
    "ValidationIssue",
    "log_issues",
    "merge_path",
    "property_path",
]
