"""Translation store: resolves a locale to its merged translations.

A TranslationStore owns one normalized definition catalog (usually one per
page or document) plus memoized resolutions. Resolving a locale:

1. Build fallback candidates, most specific first ("en-GB" -> en-GB, en)
2. Resolve each candidate, most general first, so specific ones override
3. A candidate's definition merges its "extends" entries in order, then its
   own translations on top. Entries that are locale tags recurse into the
   catalog; anything else is imported through the injected importer.

Imports for one definition run concurrently. A failing import is logged
and left out; its siblings still apply. Cyclic "extends" chains are cut
where they loop back, and results cut that way are not memoized.

Concurrent requests for the same locale, or for the same import, share one
in-flight task. Loading a new catalog invalidates every memoized result;
work started before the reload finishes but never writes into the new memo.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from lexi18n.constants import MAX_MEMOIZED_IMPORTS, MAX_MEMOIZED_LOCALES
from lexi18n.diagnostics.validation import log_issues
from lexi18n.locale_utils import LocaleTag, fallback_candidates, try_parse_locale_tag

from .importing import NullImporter, TranslationImporter
from .merger import resolve_extends
from .normalizer import NormalizationResult, normalize_definition_map, normalize_translations
from .query import EMPTY_TRANSLATIONS, TranslationMap, query_from_translations
from .types import LocaleCode, NormalizedDefinition, NormalizedDefinitionMap, Translations

__all__ = ["StoreConfig", "StoreData", "TranslationStore"]

logger = logging.getLogger(__name__)

_NO_TRANSLATIONS: Translations = MappingProxyType({})

type _Resolution[T] = tuple[T, bool]
"""Resolved value and whether it is complete (safe to memoize)."""


@dataclass(frozen=True, slots=True)
class StoreConfig:
    """Immutable memoization limits for a TranslationStore.

    Attributes:
        max_memoized_locales: Resolved locales kept, least recently used
            evicted first (default: 256)
        max_memoized_imports: Imported translation files kept
            (default: 512)

    Example:
        >>> store = TranslationStore(config=StoreConfig(max_memoized_locales=8))
        >>> store.config.max_memoized_locales
        8
    """

    max_memoized_locales: int = MAX_MEMOIZED_LOCALES
    max_memoized_imports: int = MAX_MEMOIZED_IMPORTS

    def __post_init__(self) -> None:
        """Validate limits at construction time.

        Raises:
            ValueError: If a limit is not positive
        """
        if self.max_memoized_locales <= 0:
            msg = "max_memoized_locales must be positive"
            raise ValueError(msg)
        if self.max_memoized_imports <= 0:
            msg = "max_memoized_imports must be positive"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class StoreData:
    """Catalog owned by a store.

    Attributes:
        location: Location of the document the catalog came from; passed
            to the importer as the base of every import
        languages: Normalized definitions keyed by canonical base name
    """

    location: str = ""
    languages: NormalizedDefinitionMap = field(default_factory=lambda: MappingProxyType({}))


class TranslationStore:
    """Owns a definition catalog and resolves locales against it.

    Example:
        >>> store = TranslationStore()
        >>> _ = store.load_translations({
        ...     "en": {"translations": {"hello": "hello"}},
        ...     "en-GB": {"extends": "en", "translations": {"color": "colour"}},
        ... })
        >>> dict(asyncio.run(store.translations_from_language("en-GB")))
        {'hello': 'hello', 'color': 'colour'}
    """

    __slots__ = (
        "_config",
        "_data",
        "_definitions",
        "_generation",
        "_importer",
        "_imports",
        "_locales",
        "_pending_imports",
        "_pending_locales",
    )

    def __init__(
        self,
        importer: TranslationImporter | None = None,
        *,
        config: StoreConfig | None = None,
    ) -> None:
        """Initialize an empty store.

        Args:
            importer: Fetches translation files listed in "extends";
                defaults to NullImporter
            config: Memoization limits; defaults to StoreConfig()
        """
        self._importer: TranslationImporter = importer if importer is not None else NullImporter()
        self._config = config if config is not None else StoreConfig()
        self._data = StoreData()
        self._generation = 0
        self._locales: OrderedDict[LocaleCode, TranslationMap] = OrderedDict()
        self._pending_locales: dict[LocaleCode, asyncio.Future[TranslationMap]] = {}
        self._definitions: dict[LocaleCode, Translations] = {}
        self._imports: OrderedDict[str, Translations] = OrderedDict()
        self._pending_imports: dict[str, asyncio.Future[Translations]] = {}

    @property
    def data(self) -> StoreData:
        """Current catalog."""
        return self._data

    @property
    def config(self) -> StoreConfig:
        return self._config

    @property
    def importer(self) -> TranslationImporter:
        return self._importer

    def load_translations(
        self, languages: Mapping[str, object], *, location: str = ""
    ) -> NormalizationResult:
        """Normalize and replace the catalog, invalidating memoized results.

        Relative import paths in "extends" are resolved against location.

        Args:
            languages: Raw or normalized definition map
            location: Location of the document the definitions came from

        Returns:
            The normalization outcome; its issues are also logged
        """
        outcome = normalize_definition_map(languages)
        log_issues(logger, location, outcome.errors, outcome.warnings)
        resolved = {
            locale: NormalizedDefinition(
                tuple(dict.fromkeys(resolve_extends(entry, location) for entry in definition.extends)),
                definition.translations,
            )
            for locale, definition in outcome.definitions.items()
        }
        self.load_definitions(resolved, location=location)
        return outcome

    def load_definitions(
        self, definitions: NormalizedDefinitionMap, *, location: str = ""
    ) -> None:
        """Replace the catalog with already merged definitions.

        Args:
            definitions: Output of DefinitionMerger.build(); import paths
                must already be resolved
            location: Location of the declaring document
        """
        self._data = StoreData(location, MappingProxyType(dict(definitions)))
        self._invalidate()
        logger.debug("Loaded %d locales from %s", len(definitions), location or "<inline>")

    def _invalidate(self) -> None:
        self._generation += 1
        self._locales.clear()
        self._pending_locales.clear()
        self._definitions.clear()
        self._imports.clear()
        self._pending_imports.clear()

    async def translations_from_language(self, locale: str | LocaleTag) -> TranslationMap:
        """Resolve the merged translations for a locale.

        Args:
            locale: BCP-47 tag or parsed LocaleTag

        Returns:
            Merged translations; empty for malformed tags or unknown locales
        """
        tag = locale if isinstance(locale, LocaleTag) else try_parse_locale_tag(locale)
        if tag is None:
            logger.warning('invalid locale "%s", no translations available', locale)
            return EMPTY_TRANSLATIONS
        return await self._once(
            tag.base_name,
            self._locales,
            self._pending_locales,
            self._config.max_memoized_locales,
            lambda: self._resolve_locale(tag),
        )

    async def translate(self, key: str, locale: str | LocaleTag) -> str:
        """Render the translation of ``key`` for a locale, or ``key`` if none."""
        translations = await self.translations_from_language(locale)
        return query_from_translations(key, translations).translate(locale)

    async def _once[T](
        self,
        key: str,
        memo: OrderedDict[str, T],
        pending: dict[str, asyncio.Future[T]],
        limit: int,
        produce: Callable[[], Awaitable[_Resolution[T]]],
    ) -> T:
        if key in memo:
            memo.move_to_end(key)
            logger.debug("Memo hit for %s", key)
            return memo[key]

        future = pending.get(key)
        if future is None:
            logger.debug("Memo miss for %s", key)
            future = asyncio.ensure_future(
                self._settle(key, memo, pending, limit, produce, self._generation)
            )
            pending[key] = future
        # Shielded: one cancelled caller must not cancel the shared work
        return await asyncio.shield(future)

    async def _settle[T](
        self,
        key: str,
        memo: OrderedDict[str, T],
        pending: dict[str, asyncio.Future[T]],
        limit: int,
        produce: Callable[[], Awaitable[_Resolution[T]]],
        generation: int,
    ) -> T:
        try:
            value, complete = await produce()
        finally:
            if generation == self._generation:
                pending.pop(key, None)
        if complete and generation == self._generation:
            memo[key] = value
            while len(memo) > limit:
                memo.popitem(last=False)
        return value

    async def _resolve_locale(self, tag: LocaleTag) -> _Resolution[TranslationMap]:
        candidates = fallback_candidates(tag)[::-1]
        resolutions = await asyncio.gather(
            *(self._resolve_definition(candidate, frozenset()) for candidate in candidates)
        )
        merged: dict[str, str] = {}
        complete = True
        for translations, done in resolutions:
            merged.update(translations)
            complete = complete and done
        return TranslationMap(merged), complete

    async def _resolve_definition(
        self, locale: LocaleCode, chain: frozenset[LocaleCode]
    ) -> _Resolution[Translations]:
        cached = self._definitions.get(locale)
        if cached is not None:
            return cached, True

        definition = self._data.languages.get(locale)
        if definition is None:
            return _NO_TRANSLATIONS, True
        if not definition.extends:
            return definition.translations, True

        generation = self._generation
        chain = chain | {locale}
        outcomes = await asyncio.gather(
            *(self._resolve_extend(entry, chain) for entry in definition.extends),
            return_exceptions=True,
        )

        merged: dict[str, str] = {}
        complete = True
        for entry, outcome in zip(definition.extends, outcomes, strict=True):
            if isinstance(outcome, Exception):
                logger.error("Error importing %s for locale %s: %s", entry, locale, outcome)
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            translations, done = outcome
            merged.update(translations)
            complete = complete and done
        merged.update(definition.translations)

        result = MappingProxyType(merged)
        if complete and generation == self._generation:
            self._definitions[locale] = result
        return result, complete

    async def _resolve_extend(
        self, entry: str, chain: frozenset[LocaleCode]
    ) -> _Resolution[Translations]:
        tag = try_parse_locale_tag(entry)
        if tag is None:
            translations = await self._once(
                entry,
                self._imports,
                self._pending_imports,
                self._config.max_memoized_imports,
                lambda: self._import(entry),
            )
            return translations, True

        if tag.base_name in chain:
            logger.debug("Cyclic extends through locale %s, skipping", tag.base_name)
            return _NO_TRANSLATIONS, False
        return await self._resolve_definition(tag.base_name, chain)

    async def _import(self, url: str) -> _Resolution[Translations]:
        raw = await self._importer.import_translations(url, self._data.location)
        outcome = normalize_translations(raw)
        log_issues(logger, url, outcome.errors)
        return outcome.translations, True

    def __repr__(self) -> str:
        return (
            f"TranslationStore(location={self._data.location!r}, "
            f"locales={len(self._data.languages)}, importer={self._importer!r})"
        )
