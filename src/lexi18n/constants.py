"""Shared constants for lexi18n.

This module provides centralized configuration constants used across
syntax, runtime and localization packages. Placing constants here avoids
circular imports and provides a single source of truth.

Constants are grouped by domain:
- Priority scores: specificity of capture expressions
- Time: unit lengths used by relative-time matching and formatting
- Cache limits: memory bounds for caching subsystems
- Locale: fallback locale for formatting

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Priority scores
    "PRIORITY_ANY",
    "PRIORITY_REGEX",
    "PRIORITY_STRING",
    "PRIORITY_NUMBER",
    "PRIORITY_EXACT_STRING",
    "PRIORITY_UNKNOWN",
    "CAPTURE_COUNT_SHIFT",
    "MAX_PRIORITY",
    # Time
    "MS_PER_SECOND",
    "MS_PER_MINUTE",
    "MS_PER_HOUR",
    "MS_PER_DAY",
    "MS_PER_WEEK",
    "MS_PER_MONTH",
    "MS_PER_YEAR",
    # Cache limits
    "MAX_LOCALE_CACHE_SIZE",
    "MAX_PARSE_CACHE_SIZE",
    "MAX_MEMOIZED_LOCALES",
    "MAX_MEMOIZED_IMPORTS",
    # Locale
    "FALLBACK_LOCALE",
]

# ============================================================================
# PRIORITY SCORES
# ============================================================================
#
# A template key's priority is the pair (capture_count, specificity_sum).
# Each capture contributes the lowest score among its "|" alternatives.

# Empty capture {} matches anything.
PRIORITY_ANY: int = 100

# Capture holding a /regex/.
PRIORITY_REGEX: int = 200

# Named "string" expression (quote-delimited text).
PRIORITY_STRING: int = 300

# Named "number" expression.
PRIORITY_NUMBER: int = 400

# Capture holding a quoted literal: exact text match.
PRIORITY_EXACT_STRING: int = 1 << 20

# Unregistered expression names never match.
PRIORITY_UNKNOWN: int = 0

# Bits reserved for the specificity sum in the scalar priority.
CAPTURE_COUNT_SHIFT: int = 20

# Scalar priority of a literal key (no captures).
MAX_PRIORITY: int = 2**64 - 1

# ============================================================================
# TIME
# ============================================================================

MS_PER_SECOND: int = 1000
MS_PER_MINUTE: int = 60 * MS_PER_SECOND
MS_PER_HOUR: int = 60 * MS_PER_MINUTE
MS_PER_DAY: int = 24 * MS_PER_HOUR
MS_PER_WEEK: int = 7 * MS_PER_DAY
MS_PER_YEAR: int = 365 * MS_PER_DAY
# Average month used for relative-time unit selection.
MS_PER_MONTH: float = MS_PER_YEAR / 12

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum number of LocaleContext instances kept in the class-level LRU cache.
MAX_LOCALE_CACHE_SIZE: int = 128

# Maximum number of parsed keys/values kept by the key parser.
MAX_PARSE_CACHE_SIZE: int = 4096

# Default number of resolved locales a TranslationStore memoizes.
MAX_MEMOIZED_LOCALES: int = 256

# Default number of imported translation files a TranslationStore memoizes.
MAX_MEMOIZED_IMPORTS: int = 512

# ============================================================================
# LOCALE
# ============================================================================

# Babel locale used when a requested formatting locale is unknown.
FALLBACK_LOCALE: str = "en_US"
