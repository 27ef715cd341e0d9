"""Definition merger: combines definition sources into one definition map.

DefinitionMerger is an immutable builder. Each add_* call returns a new
builder with one more source; build() normalizes and merges all sources,
in insertion order, and memoizes the result.

Relative "extends" entries are resolved against the location of the source
that declared them, so definitions loaded from different documents can be
merged safely. Entries that are themselves locale tags ("en") are kept as
canonical base names; the store resolves those against its own definitions
instead of fetching a file.

Python 3.13+.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal
from urllib.parse import urljoin

from lexi18n.diagnostics.validation import log_issues
from lexi18n.locale_utils import LocaleTag, try_parse_locale_tag

from .normalizer import normalize_definition, normalize_definition_map
from .types import LocaleCode, NormalizedDefinition, NormalizedDefinitionMap

__all__ = ["DefinitionMerger", "builder", "resolve_extends"]

logger = logging.getLogger(__name__)

type _SourceKind = Literal["map", "definition", "translations"]


@dataclass(frozen=True, slots=True)
class _Source:
    kind: _SourceKind
    data: object
    location: str
    locale: LocaleCode = ""


def resolve_extends(entry: str, location: str) -> str:
    """Resolve one "extends" entry declared in the document at ``location``.

    Example:
        >>> resolve_extends("./translations.en.json", "https://example.com")
        'https://example.com/translations.en.json'
        >>> resolve_extends("en-uk", "https://example.com")
        'en-GB'
    """
    tag = try_parse_locale_tag(entry)
    if tag is not None:
        return tag.base_name
    return urljoin(location, entry)


def _canonical_locale(locale: str | LocaleTag) -> LocaleCode | None:
    if isinstance(locale, LocaleTag):
        return locale.base_name
    tag = try_parse_locale_tag(locale)
    return tag.base_name if tag is not None else None


def _merge_into(
    target: dict[LocaleCode, NormalizedDefinition],
    locale: LocaleCode,
    definition: NormalizedDefinition,
    location: str,
    *,
    resolve: bool = True,
) -> None:
    extends = (
        tuple(resolve_extends(entry, location) for entry in definition.extends)
        if resolve
        else definition.extends
    )
    previous = target.get(locale)
    if previous is None:
        target[locale] = NormalizedDefinition(tuple(dict.fromkeys(extends)), definition.translations)
        return
    target[locale] = NormalizedDefinition(
        tuple(dict.fromkeys((*previous.extends, *extends))),
        {**previous.translations, **definition.translations},
    )


class DefinitionMerger:
    """Immutable builder of a merged definition map.

    Example:
        >>> merged = (
        ...     builder
        ...     .add_map({"en": "./en.json"}, "https://example.com/i18n/")
        ...     .add_translations("https://example.com/i18n/en-extra.json", "en")
        ...     .build()
        ... )
        >>> merged["en"].extends
        ('https://example.com/i18n/en.json', 'https://example.com/i18n/en-extra.json')
    """

    __slots__ = ("_built", "_sources")

    def __init__(self, sources: tuple[_Source, ...] = ()) -> None:
        self._sources = sources
        self._built: NormalizedDefinitionMap | None = None

    def _with(self, source: _Source) -> DefinitionMerger:
        return DefinitionMerger((*self._sources, source))

    def add_map(self, definition_map: object, location: str) -> DefinitionMerger:
        """Add a whole definition map (as found in a locale map file)."""
        return self._with(_Source("map", definition_map, location))

    def add_definition_on_language(
        self, definition: object, locale: str | LocaleTag, location: str
    ) -> DefinitionMerger:
        """Add one definition for a single locale."""
        canonical = _canonical_locale(locale)
        if canonical is None:
            logger.error('invalid locale "%s", it will be ignored', locale)
            return self
        return self._with(_Source("definition", definition, location, canonical))

    def add_translations(self, location: str, locale: str | LocaleTag) -> DefinitionMerger:
        """Add a translation file, already resolved to ``location``, to a locale."""
        canonical = _canonical_locale(locale)
        if canonical is None:
            logger.error('invalid locale "%s", it will be ignored', locale)
            return self
        return self._with(_Source("translations", location, location, canonical))

    def build(self) -> NormalizedDefinitionMap:
        """Normalize and merge all sources. Normalization issues are logged."""
        if self._built is not None:
            return self._built

        merged: dict[LocaleCode, NormalizedDefinition] = {}
        for source in self._sources:
            match source.kind:
                case "map":
                    outcome = normalize_definition_map(source.data)
                    log_issues(logger, source.location, outcome.errors, outcome.warnings)
                    for locale, definition in outcome.definitions.items():
                        _merge_into(merged, locale, definition, source.location)
                case "definition":
                    single = normalize_definition(source.data)
                    log_issues(logger, source.location, single.errors)
                    _merge_into(merged, source.locale, single.definition, source.location)
                case "translations":
                    _merge_into(
                        merged,
                        source.locale,
                        NormalizedDefinition(extends=(source.location,)),
                        source.location,
                        resolve=False,
                    )

        self._built = MappingProxyType(merged)
        logger.debug("Merged %d sources into %d locales", len(self._sources), len(merged))
        return self._built

    def __repr__(self) -> str:
        return f"DefinitionMerger(sources={len(self._sources)})"


builder = DefinitionMerger()
"""Empty merger every merge chain starts from."""
