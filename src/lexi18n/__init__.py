"""lexi18n - pattern-keyed translation catalogs with locale-aware rendering.

Translation keys may be templates with typed captures ("I sort {number}
balls"). A looked-up text is matched against the most specific template,
and the captured values are rendered into the translation with Babel
number, date and relative-time formatting.

Public API:
    TranslationStore - Locale catalog with fallback chains and memoized lookups
    load_store - Assemble a store from locale maps and translation links
    parse_key - Parse a translation key (priority, matcher, normal form)
    parse_value - Parse a translation value into a renderable template
    query_from_translations - Find the translation for a text in a map
    tokenize - Tokenize a key or value

Exceptions:
    I18nError - Base exception class
    LocaleError - Malformed locale tag (strict parsers only)
    FormattingError - Value formatting failure (carries a fallback)
    ImportFailedError - Translation document could not be imported

Submodules:
    lexi18n.syntax - Tokenizer, tokens and normalization
    lexi18n.runtime - Capture expressions, priorities, matching, formatting
    lexi18n.localization - Normalizer, merger, importers, store and query
    lexi18n.diagnostics - Error types and validation issues
"""

# Essential Public API - Minimal exports for clean namespace
from .diagnostics import FormattingError, I18nError, ImportFailedError, LocaleError
from .localization import (
    PathImporter,
    TranslationLink,
    TranslationStore,
    builder,
    load_store,
    query_from_translations,
)
from .locale_utils import LocaleTag, parse_locale_tag, try_parse_locale_tag
from .runtime import parse_key, parse_value
from .syntax import tokenize

# Version information - Auto-populated from package metadata
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("lexi18n")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "FormattingError",
    "I18nError",
    "ImportFailedError",
    "LocaleError",
    "LocaleTag",
    "PathImporter",
    "TranslationLink",
    "TranslationStore",
    "__version__",
    "builder",
    "load_store",
    "parse_key",
    "parse_locale_tag",
    "parse_value",
    "query_from_translations",
    "tokenize",
    "try_parse_locale_tag",
]
