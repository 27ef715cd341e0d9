"""lexi18n exception hierarchy.

Exceptions are reserved for strict entry points and for internal signalling
between formatters and the value renderer. Normalization, matching and store
lookups are total: they report problems as structured ValidationIssue lists
and log them instead of raising.

Python 3.13+. Zero external dependencies.
"""

__all__ = [
    "FormattingError",
    "I18nError",
    "ImportFailedError",
    "LocaleError",
]


class I18nError(Exception):
    """Base exception for all lexi18n errors."""


class LocaleError(I18nError, ValueError):
    """Locale tag is not a well-formed BCP-47 language tag.

    Raised only by strict parsers such as parse_locale_tag().
    Lenient callers use try_parse_locale_tag() and receive None instead.
    """


class FormattingError(I18nError):
    """Raised when locale-aware formatting of a captured value fails.

    The error carries a fallback_value that the value renderer substitutes
    into the output, so a bad parameter never aborts rendering:
    - Error is logged with the formatter name and input
    - Output still contains usable content (the raw parameter)

    Attributes:
        fallback_value: String to use in output when formatting fails
    """

    def __init__(self, message: str, fallback_value: str) -> None:
        """Initialize FormattingError.

        Args:
            message: Error message string
            fallback_value: Value to use in output when formatting fails
        """
        super().__init__(message)
        self.fallback_value = fallback_value


class ImportFailedError(I18nError):
    """Translation or locale-map document could not be imported.

    Importers raise this for missing files, unreadable content or invalid
    JSON. The translation store catches failures per import, logs them and
    excludes the import from the merge.

    Attributes:
        url: Resolved location of the failed import
    """

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url
