"""Store assembly from locale-map documents and translation links.

A page (or any document) declares its translations in two ways: locale map
files, each a definition map, and translation links, each a single
translation file for one locale. load_store() fetches all locale maps
concurrently, merges them with the links in declaration order and returns a
loaded TranslationStore.

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import urljoin

from lexi18n.locale_utils import try_parse_locale_tag

from .importing import NullImporter, TranslationImporter
from .merger import DefinitionMerger, builder
from .store import StoreConfig, TranslationStore

__all__ = ["TranslationLink", "load_store"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TranslationLink:
    """A translation file declared for one locale.

    Attributes:
        href: Location of the translation file, relative to the document
        lang: Locale tag of the translations
    """

    href: str | None
    lang: str | None


async def _merge_locale_maps(
    merger: DefinitionMerger,
    location: str,
    hrefs: list[str],
    importer: TranslationImporter,
) -> DefinitionMerger:
    urls = [urljoin(location, href) for href in hrefs]
    outcomes = await asyncio.gather(
        *(importer.import_definition_map(url, location) for url in urls),
        return_exceptions=True,
    )
    for url, outcome in zip(urls, outcomes, strict=True):
        if isinstance(outcome, Exception):
            logger.error("error loading locale map %s: %s", url, outcome)
            continue
        if isinstance(outcome, BaseException):
            raise outcome
        merger = merger.add_map(outcome, url)
    return merger


def _merge_links(
    merger: DefinitionMerger, location: str, links: Iterable[TranslationLink]
) -> DefinitionMerger:
    for link in links:
        if not link.href:
            logger.error("translation link requires a href attribute, it will be ignored")
            continue
        if not link.lang:
            logger.error("translation link %s requires a lang attribute, it will be ignored", link.href)
            continue
        tag = try_parse_locale_tag(link.lang)
        if tag is None:
            logger.error('invalid locale "%s", it will be ignored', link.lang)
            continue
        merger = merger.add_translations(urljoin(location, link.href), tag)
    return merger


async def load_store(
    location: str,
    *,
    locale_maps: Iterable[str | None] = (),
    translation_links: Iterable[TranslationLink] = (),
    importer: TranslationImporter | None = None,
    config: StoreConfig | None = None,
) -> TranslationStore:
    """Build a TranslationStore for the document at ``location``.

    Args:
        location: Location of the declaring document; relative hrefs are
            resolved against it
        locale_maps: Locale map hrefs, merged in order
        translation_links: Translation files, merged after the locale maps
        importer: Fetches locale maps and translation files; defaults to
            NullImporter
        config: Memoization limits for the store

    Returns:
        Loaded store. Failed locale maps and invalid links are logged and
        skipped.

    Example:
        >>> store = asyncio.run(load_store(
        ...     "",
        ...     locale_maps=["i18n/locales.json"],
        ...     importer=PathImporter("site"),
        ... ))
        >>> asyncio.run(store.translate("hello", "pt"))
        'olá'
    """
    importer = importer if importer is not None else NullImporter()

    hrefs: list[str] = []
    for href in locale_maps:
        if not href:
            logger.error("locale map requires a href attribute, it will be ignored")
            continue
        hrefs.append(href)

    merger = await _merge_locale_maps(builder, location, hrefs, importer)
    merger = _merge_links(merger, location, translation_links)

    store = TranslationStore(importer, config=config)
    store.load_definitions(merger.build(), location=location)
    return store
