"""Query engine: finds the translation for a key in a translation map.

Literal keys (no captures) are looked up by exact text. When none matches,
template keys are tried in descending priority; ties keep their insertion
order. The first template whose matcher accepts the text wins.

TranslationMap owns the lazily built index and a per-key result cache, so
both live exactly as long as the map does. Results involving keys whose
matching depends on the current time are not cached, and neither are misses.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from lexi18n.locale_utils import LocaleTag
from lexi18n.runtime.key_parser import ParseResult, parse_key, parse_value
from lexi18n.runtime.matcher import MatchResult

from .types import Translations

__all__ = ["EMPTY_TRANSLATIONS", "QueryResult", "TranslationMap", "query_from_translations"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QueryResult:
    """Outcome of looking up a key.

    Attributes:
        target_key: Text that was looked up
        translations: Map the lookup ran against
        found: Whether any key matched
        value_template: Matched value template ('' when not found)
        match: Parameters and default formatters captured by a template key;
            None for literal hits and misses
    """

    target_key: str
    translations: Translations
    found: bool
    value_template: str = ""
    match: MatchResult | None = None

    def translate(self, locale: str | LocaleTag) -> str:
        """Render the translation for a locale.

        Returns:
            The rendered value, the raw value for literal keys, or the target
            key itself when nothing was found
        """
        if not self.found:
            return self.target_key
        if self.match is None:
            return self.value_template
        return parse_value(self.value_template).format(
            self.match.parameters, locale, self.match.default_formatters
        )


@dataclass(frozen=True, slots=True)
class _QueryIndex:
    literals: Mapping[str, str]
    templates: tuple[tuple[ParseResult, str], ...]


class TranslationMap(Mapping[str, str]):
    """Immutable translation map with a lazily built query index.

    Example:
        >>> translations = TranslationMap({"hello {number}": "olá {0}"})
        >>> translations.query("hello 3").translate("pt-PT")
        'olá 3'
    """

    __slots__ = ("_data", "_index", "_results")

    def __init__(self, translations: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(translations or {})
        self._index: _QueryIndex | None = None
        self._results: dict[str, QueryResult] = {}

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"TranslationMap({self._data!r})"

    def _build_index(self) -> _QueryIndex:
        literals: dict[str, str] = {}
        templates: list[tuple[ParseResult, str]] = []
        for key, value in self._data.items():
            parsed = parse_key(key)
            if parsed.is_template:
                templates.append((parsed, value))
            else:
                # "{{" in a literal key stands for one brace
                literals["".join(token.text for token in parsed.ast.tokens)] = value
        # Stable sort: equal priorities keep insertion order
        templates.sort(key=lambda item: item[0].priority_as_number, reverse=True)
        logger.debug("Indexed %d literal and %d template keys", len(literals), len(templates))
        return _QueryIndex(literals, tuple(templates))

    def query(self, key: str) -> QueryResult:
        """Find the translation for ``key``."""
        cached = self._results.get(key)
        if cached is not None:
            return cached

        if self._index is None:
            self._index = self._build_index()
        index = self._index

        literal = index.literals.get(key)
        if literal is not None:
            result = QueryResult(key, self, True, literal)
            self._results[key] = result
            return result

        cacheable = True
        for parsed, value in index.templates:
            cacheable = cacheable and parsed.is_constant
            match = parsed.match(key)
            if match.is_match:
                result = QueryResult(key, self, True, value, match)
                if cacheable:
                    self._results[key] = result
                return result

        return QueryResult(key, self, False)


EMPTY_TRANSLATIONS = TranslationMap()


def query_from_translations(key: str, translations: Translations) -> QueryResult:
    """Find the translation for ``key`` in any translation mapping.

    TranslationMap instances reuse their index and cache; plain mappings are
    indexed for this one query.

    Example:
        >>> result = query_from_translations("missing", {"hello": "olá"})
        >>> result.found, result.translate("pt")
        (False, 'missing')
    """
    if not isinstance(translations, TranslationMap):
        translations = TranslationMap(translations)
    return translations.query(key)
