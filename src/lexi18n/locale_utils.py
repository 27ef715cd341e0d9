"""Locale utilities: BCP-47 tag parsing, canonicalization and Babel access.

Centralizes locale handling used throughout the codebase:
- Translation maps are keyed by canonical BCP-47 base names ("en-GB")
- Store lookups walk a fallback chain derived from the requested tag
- Formatting uses Babel locales addressed by POSIX identifiers ("en_GB")

Canonicalization follows CLDR alias data shipped with Babel, so deprecated
subtags are replaced ("en-UK" becomes "en-GB", "iw" becomes "he").

Python 3.13+.
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lexi18n.diagnostics.errors import LocaleError

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "LocaleTag",
    "clear_locale_cache",
    "fallback_candidates",
    "get_babel_locale",
    "normalize_locale",
    "parse_locale_tag",
    "try_parse_locale_tag",
]

# Unicode BCP-47 language tag, hyphen separated only.
# Groups: language, script, region, variants, extensions.
_LOCALE_TAG = re.compile(
    r"""
    (?P<language>[a-z]{2,3}|[a-z]{5,8})
    (?:-(?P<script>[a-z]{4}))?
    (?:-(?P<region>[a-z]{2}|\d{3}))?
    (?P<variants>(?:-(?:[a-z\d]{5,8}|\d[a-z\d]{3}))*)
    (?P<extensions>(?:-[a-wyz\d](?:-[a-z\d]{2,8})+)*(?:-x(?:-[a-z\d]{1,8})+)?)
    """,
    re.IGNORECASE | re.VERBOSE,
)

_ALIAS_SEPARATOR = re.compile(r"[-_]")


@dataclass(frozen=True, slots=True)
class LocaleTag:
    """Parsed, canonical BCP-47 language tag.

    Construct via parse_locale_tag() or try_parse_locale_tag(); both apply
    case normalization and CLDR alias replacement.

    Attributes:
        language: Lowercase language subtag ("en")
        script: Titlecase script subtag ("Latn") or None
        region: Uppercase region subtag ("GB") or None
        variants: Lowercase variant subtags
        extensions: Lowercase extension and private-use subtags, unparsed

    Example:
        >>> tag = parse_locale_tag("en-uk")
        >>> tag.base_name
        'en-GB'
    """

    language: str
    script: str | None = None
    region: str | None = None
    variants: tuple[str, ...] = ()
    extensions: str = ""

    @property
    def base_name(self) -> str:
        """Tag without extensions: language[-Script][-REGION][-variants]."""
        parts = [self.language]
        if self.script:
            parts.append(self.script)
        if self.region:
            parts.append(self.region)
        parts.extend(self.variants)
        return "-".join(parts)

    @property
    def babel_identifier(self) -> str:
        """POSIX-style identifier accepted by babel.Locale.parse()."""
        parts = [self.language]
        if self.script:
            parts.append(self.script)
        if self.region:
            parts.append(self.region)
        return "_".join(parts)

    def __str__(self) -> str:
        if self.extensions:
            return f"{self.base_name}-{self.extensions}"
        return self.base_name


@functools.cache
def _alias_tables() -> tuple[dict[str, str], dict[str, tuple[str, ...]], dict[str, str]]:
    # Lazy import: Babel loads CLDR global data on first access
    from babel.core import get_global  # noqa: PLC0415

    return (
        dict(get_global("language_aliases")),
        {key: tuple(value) for key, value in get_global("territory_aliases").items()},
        dict(get_global("script_aliases")),
    )


def _canonicalize(
    language: str, script: str | None, region: str | None
) -> tuple[str, str | None, str | None]:
    language_aliases, territory_aliases, script_aliases = _alias_tables()

    alias = language_aliases.get(language)
    if alias:
        # Some aliases expand to language_Script or language_REGION
        alias_parts = _ALIAS_SEPARATOR.split(alias)
        language = alias_parts[0].lower()
        for part in alias_parts[1:]:
            if len(part) == 4 and part.isalpha() and script is None:
                script = part.title()
            elif region is None and (len(part) == 2 or part.isdigit()):
                region = part.upper()

    if script is not None:
        script = script_aliases.get(script, script)
    if region is not None:
        replacements = territory_aliases.get(region)
        if replacements:
            region = replacements[0]
    return language, script, region


def try_parse_locale_tag(tag: str) -> LocaleTag | None:
    """Parse and canonicalize a BCP-47 tag, returning None when malformed.

    Args:
        tag: Language tag using "-" separators (e.g., "en-GB", "zh-Hant-TW")

    Returns:
        Canonical LocaleTag, or None for tags that are not well formed
        (empty strings, POSIX "en_US" forms, encodings such as "en.UTF-8").

    Example:
        >>> try_parse_locale_tag("EN-uk").base_name
        'en-GB'
        >>> try_parse_locale_tag("en_US") is None
        True
    """
    if not isinstance(tag, str):
        return None
    match = _LOCALE_TAG.fullmatch(tag)
    if match is None:
        return None

    script = match["script"].title() if match["script"] else None
    region = match["region"].upper() if match["region"] else None
    language, script, region = _canonicalize(match["language"].lower(), script, region)

    variants_text = match["variants"].lower()
    variants = tuple(variants_text.split("-")[1:]) if variants_text else ()
    if len(set(variants)) != len(variants):
        return None

    extensions = match["extensions"].lower().removeprefix("-")
    return LocaleTag(language, script, region, variants, extensions)


def parse_locale_tag(tag: str) -> LocaleTag:
    """Parse and canonicalize a BCP-47 tag.

    Args:
        tag: Language tag using "-" separators

    Returns:
        Canonical LocaleTag

    Raises:
        LocaleError: If tag is not a well-formed language tag
    """
    parsed = try_parse_locale_tag(tag)
    if parsed is None:
        msg = f"Invalid locale tag: {tag!r}"
        raise LocaleError(msg)
    return parsed


def fallback_candidates(tag: LocaleTag) -> tuple[str, ...]:
    """Locale keys consulted for a requested tag, most specific first.

    The chain is base name, then language-region, then language, with
    duplicates removed.

    Example:
        >>> fallback_candidates(parse_locale_tag("zh-Hant-TW"))
        ('zh-Hant-TW', 'zh-TW', 'zh')
        >>> fallback_candidates(parse_locale_tag("en"))
        ('en',)
    """
    candidates = [tag.base_name]
    if tag.region is not None:
        candidates.append(f"{tag.language}-{tag.region}")
    candidates.append(tag.language)
    return tuple(dict.fromkeys(candidates))


def normalize_locale(locale_code: str) -> str:
    """Convert a locale code to the POSIX form used for Babel lookups.

    Well-formed BCP-47 tags are canonicalized first, so "en-UK" and "en-GB"
    map to the same identifier. Anything else only has hyphens replaced.

    Args:
        locale_code: BCP-47 locale code (e.g., "en-US", "pt-BR")

    Returns:
        POSIX-formatted locale code (e.g., "en_US", "pt_BR")

    Example:
        >>> normalize_locale("en-UK")
        'en_GB'
        >>> normalize_locale("de_DE")
        'de_DE'
    """
    tag = try_parse_locale_tag(locale_code)
    if tag is not None:
        return tag.babel_identifier
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Thread-safe via lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def clear_locale_cache() -> None:
    """Clear cached Babel locales and alias tables."""
    get_babel_locale.cache_clear()
    _alias_tables.cache_clear()
