"""Type aliases and value types for the localization domain.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

__all__ = [
    "EMPTY_DEFINITION",
    "ImportPath",
    "LocaleCode",
    "NormalizedDefinition",
    "NormalizedDefinitionMap",
    "RawDefinitionMap",
    "Translations",
]

type LocaleCode = str
"""Canonical BCP-47 base name (e.g., 'en', 'en-GB', 'zh-Hant-TW')."""

type ImportPath = str
"""Translation file location or locale tag listed under "extends"."""

type Translations = Mapping[str, str]
"""Translation map: key (literal or template) to value template."""

type RawDefinitionMap = Mapping[str, object]
"""Locale definition map as decoded from JSON, not yet validated."""


@dataclass(frozen=True, slots=True)
class NormalizedDefinition:
    """Validated per-locale definition.

    Attributes:
        extends: Import paths or locale tags merged underneath translations,
            in order
        translations: Translations of this locale; override imported ones
    """

    extends: tuple[ImportPath, ...] = ()
    translations: Translations = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if not isinstance(self.translations, MappingProxyType):
            object.__setattr__(self, "translations", MappingProxyType(dict(self.translations)))


EMPTY_DEFINITION = NormalizedDefinition()

type NormalizedDefinitionMap = Mapping[LocaleCode, NormalizedDefinition]
"""Normalized definitions keyed by canonical locale base name."""
