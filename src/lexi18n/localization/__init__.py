"""Locale catalogs: normalization, merging, importing and lookup.

Python 3.13+.
"""

from .importing import NullImporter, PathImporter, TranslationImporter
from .loading import TranslationLink, load_store
from .merger import DefinitionMerger, builder, resolve_extends
from .normalizer import (
    DefinitionResult,
    NormalizationResult,
    TranslationsResult,
    normalize_definition,
    normalize_definition_map,
    normalize_translations,
)
from .query import EMPTY_TRANSLATIONS, QueryResult, TranslationMap, query_from_translations
from .store import StoreConfig, StoreData, TranslationStore
from .types import (
    ImportPath,
    LocaleCode,
    NormalizedDefinition,
    NormalizedDefinitionMap,
    RawDefinitionMap,
    Translations,
)

__all__ = [
    "EMPTY_TRANSLATIONS",
    "DefinitionMerger",
    "DefinitionResult",
    "ImportPath",
    "LocaleCode",
    "NormalizationResult",
    "NormalizedDefinition",
    "NormalizedDefinitionMap",
    "NullImporter",
    "PathImporter",
    "QueryResult",
    "RawDefinitionMap",
    "StoreConfig",
    "StoreData",
    "TranslationImporter",
    "TranslationLink",
    "TranslationMap",
    "TranslationStore",
    "Translations",
    "TranslationsResult",
    "builder",
    "load_store",
    "normalize_definition",
    "normalize_definition_map",
    "normalize_translations",
    "query_from_translations",
    "resolve_extends",
]
