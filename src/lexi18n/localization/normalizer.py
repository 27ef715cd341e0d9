"""Validation and repair of loosely typed locale definition data.

Definition files are JSON maps from locale tag to a definition. A definition
is one of:

- a string: a single import path
- a list of strings: several import paths
- an object with optional "extends" (string or list) and "translations"
  (object of string values) keys

Normalization is total. Invalid parts are dropped and reported as
ValidationIssue entries; the rest is kept. Locale tags are canonicalized:
a non-canonical tag ("en-UK") is moved to its canonical key ("en-GB") with
a warning, unless the canonical key is also present, in which case the
non-canonical entry is dropped with an error.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from lexi18n.diagnostics.validation import ValidationIssue, property_path
from lexi18n.locale_utils import try_parse_locale_tag

from .types import EMPTY_DEFINITION, LocaleCode, NormalizedDefinition

__all__ = [
    "DefinitionResult",
    "NormalizationResult",
    "TranslationsResult",
    "normalize_definition",
    "normalize_definition_map",
    "normalize_translations",
    "validate_import_path",
]

_EMPTY_IMPORT_PATH = "cannot import empty path"


@dataclass(frozen=True, slots=True)
class TranslationsResult:
    """Result of normalize_translations()."""

    translations: Mapping[str, str]
    errors: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True, slots=True)
class DefinitionResult:
    """Result of normalize_definition()."""

    definition: NormalizedDefinition
    errors: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass(frozen=True, slots=True)
class NormalizationResult:
    """Result of normalize_definition_map().

    Attributes:
        definitions: Definitions keyed by canonical locale base name
        warnings: Repaired entries
        errors: Dropped entries
    """

    definitions: Mapping[LocaleCode, NormalizedDefinition] = field(
        default_factory=lambda: MappingProxyType({})
    )
    warnings: tuple[ValidationIssue, ...] = ()
    errors: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        """True when nothing had to be dropped."""
        return not self.errors


def _type_name(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int | float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, Sequence):
        return "array"
    return type(value).__name__


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)


def validate_import_path(path: object) -> str | None:
    """Return why an import path is invalid, or None if it is usable."""
    if not isinstance(path, str):
        return f"expected string instead of {_type_name(path)}"
    if path == "":
        return _EMPTY_IMPORT_PATH
    return None


def _normalize_extends_list(
    paths: Sequence[object],
) -> tuple[tuple[str, ...], list[ValidationIssue]]:
    result: list[str] = []
    errors: list[ValidationIssue] = []
    for index, path in enumerate(paths):
        problem = validate_import_path(path)
        if problem is not None:
            errors.append(ValidationIssue(f".[{index}]", f"{problem}, ignoring extends"))
            continue
        result.append(path)  # type: ignore[arg-type]
    return tuple(result), errors


def _normalize_extends_value(value: object) -> tuple[tuple[str, ...], list[ValidationIssue]]:
    if value == "":
        return (), [ValidationIssue("", f"{_EMPTY_IMPORT_PATH}, ignoring extends")]
    if isinstance(value, str):
        return (value,), []
    if _is_sequence(value):
        return _normalize_extends_list(value)  # type: ignore[arg-type]
    message = f"expected string or string array (string[]) instead of {_type_name(value)}"
    return (), [ValidationIssue("", message)]


def normalize_translations(translations: object) -> TranslationsResult:
    """Keep only string-valued entries of a translation map.

    Example:
        >>> outcome = normalize_translations({"hello": "olá", "count": 3})
        >>> dict(outcome.translations), outcome.errors[0].path
        ({'hello': 'olá'}, '.count')
    """
    if not isinstance(translations, Mapping):
        message = f"expected a plain object instead of {_type_name(translations)}"
        return TranslationsResult(MappingProxyType({}), (ValidationIssue("", message),))

    valid: dict[str, str] = {}
    errors: list[ValidationIssue] = []
    for key, value in translations.items():
        if not isinstance(key, str):
            errors.append(
                ValidationIssue(property_path(str(key)), f"expected string key instead of {_type_name(key)}")
            )
            continue
        if not isinstance(value, str):
            errors.append(
                ValidationIssue(property_path(key), f"expected string instead of {_type_name(value)}")
            )
            continue
        valid[key] = value
    return TranslationsResult(MappingProxyType(valid), tuple(errors))


def normalize_definition(data: object) -> DefinitionResult:
    """Normalize a single locale definition.

    Args:
        data: String, list of strings, or object with "extends" and/or
            "translations"

    Returns:
        DefinitionResult; malformed input yields an empty definition

    Example:
        >>> normalize_definition(["./en.json", 3]).definition.extends
        ('./en.json',)
    """
    if isinstance(data, NormalizedDefinition):
        return DefinitionResult(data)
    if data == "":
        return DefinitionResult(
            EMPTY_DEFINITION, (ValidationIssue("", f"{_EMPTY_IMPORT_PATH}, ignoring extends"),)
        )
    if isinstance(data, str):
        return DefinitionResult(NormalizedDefinition(extends=(data,)))
    if _is_sequence(data):
        extends, errors = _normalize_extends_list(data)  # type: ignore[arg-type]
        return DefinitionResult(NormalizedDefinition(extends=extends), tuple(errors))
    if not isinstance(data, Mapping):
        return DefinitionResult(EMPTY_DEFINITION, (ValidationIssue("", "invalid type"),))

    has_extends = "extends" in data
    has_translations = "translations" in data
    if not (has_extends or has_translations):
        message = 'invalid object, the object must have "extends" or "translations" keys'
        return DefinitionResult(EMPTY_DEFINITION, (ValidationIssue("", message),))

    errors: list[ValidationIssue] = []
    extends: tuple[str, ...] = ()
    translations: Mapping[str, str] = MappingProxyType({})
    if has_extends:
        extends, extends_errors = _normalize_extends_value(data["extends"])
        errors.extend(issue.with_prefix(".extends") for issue in extends_errors)
    if has_translations:
        outcome = normalize_translations(data["translations"])
        translations = outcome.translations
        errors.extend(issue.with_prefix(".translations") for issue in outcome.errors)
    return DefinitionResult(NormalizedDefinition(extends, translations), tuple(errors))


def normalize_definition_map(data: object) -> NormalizationResult:
    """Normalize a locale definition map.

    Args:
        data: Mapping of locale tag to definition

    Returns:
        NormalizationResult keyed by canonical base names, with warnings for
        repaired locale tags and errors for dropped entries

    Example:
        >>> outcome = normalize_definition_map({"en-UK": "./en-gb.json"})
        >>> list(outcome.definitions), outcome.warnings[0].message
        (['en-GB'], 'invalid locale "en-UK", fixed to locale "en-GB"')
    """
    if not isinstance(data, Mapping):
        message = f"expected a plain object instead of {_type_name(data)}"
        return NormalizationResult(errors=(ValidationIssue("", message),))

    result: dict[LocaleCode, NormalizedDefinition] = {}
    warnings: list[ValidationIssue] = []
    errors: list[ValidationIssue] = []

    for locale_string, definition in data.items():
        path = property_path(str(locale_string))
        tag = try_parse_locale_tag(locale_string)
        if tag is None:
            errors.append(ValidationIssue(path, f'invalid locale "{locale_string}", it will be ignored'))
            continue

        base_name = tag.base_name
        if base_name != locale_string:
            if base_name in data:
                message = (
                    f'invalid locale "{locale_string}", it also conflicts with correct locale '
                    f'"{base_name}", it will be ignored'
                )
                errors.append(ValidationIssue(path, message))
                continue
            warnings.append(
                ValidationIssue(path, f'invalid locale "{locale_string}", fixed to locale "{base_name}"')
            )

        outcome = normalize_definition(definition)
        errors.extend(issue.with_prefix(path) for issue in outcome.errors)
        result[base_name] = outcome.definition

    return NormalizationResult(MappingProxyType(result), tuple(warnings), tuple(errors))

