"""Importers: fetch translation files and locale maps for the store.

The store never performs I/O itself. It delegates to a TranslationImporter,
which fetches an already resolved import path and returns normalized data.
The declaring document's location is passed along as ``base``.

Components:
    TranslationImporter - Protocol implemented by importers (structural typing)
    NullImporter - Default importer; logs and returns nothing
    PathImporter - JSON files under a root directory, with traversal checks

Python 3.13+.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Protocol
from urllib.parse import unquote, urlparse

from lexi18n.diagnostics.errors import ImportFailedError
from lexi18n.diagnostics.validation import log_issues

from .normalizer import normalize_definition_map, normalize_translations
from .types import NormalizedDefinitionMap, Translations

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "TranslationImporter",
    # Concrete importers
    "NullImporter",
    "PathImporter",
]

logger = logging.getLogger(__name__)

_EMPTY: MappingProxyType[str, str] = MappingProxyType({})


class TranslationImporter(Protocol):
    """Protocol for fetching translation data.

    Both methods are coroutines so that network-backed importers can run
    concurrently; the store fans out one call per file and merges results
    in declaration order.

    Example:
        >>> class MemoryImporter:
        ...     def __init__(self, files):
        ...         self.files = files
        ...     async def import_translations(self, url, base):
        ...         return self.files[url]
        ...     async def import_definition_map(self, url, base):
        ...         return {}
    """

    async def import_translations(self, url: str, base: str) -> Translations:
        """Fetch a translation file.

        Args:
            url: Import path, already resolved against the declaring document
            base: Location of the document that declared the import

        Returns:
            Translation map (key to value template)

        Raises:
            ImportFailedError: If the file cannot be fetched or decoded
        """
        ...

    async def import_definition_map(self, url: str, base: str) -> NormalizedDefinitionMap:
        """Fetch and normalize a locale map file.

        Args:
            url: Import path, already resolved against the declaring document
            base: Location of the document that declared the import

        Returns:
            Normalized definition map

        Raises:
            ImportFailedError: If the file cannot be fetched or decoded
        """
        ...


class NullImporter:
    """Importer used when none is configured. Every import yields nothing."""

    __slots__ = ()

    async def import_translations(self, url: str, base: str) -> Translations:
        logger.error("import_translations not implemented, ignoring %s", url)
        return _EMPTY

    async def import_definition_map(self, url: str, base: str) -> NormalizedDefinitionMap:
        logger.error("import_definition_map not implemented, ignoring %s", url)
        return MappingProxyType({})

    def __repr__(self) -> str:
        return "NullImporter()"


@dataclass(frozen=True, slots=True)
class PathImporter:
    """Filesystem importer for JSON documents.

    Import paths arrive resolved; "file:" URLs and plain paths are
    accepted. Relative paths are taken relative to root_dir.

    Security:
        Every resolved path must stay inside root_dir. Paths escaping it
        (through ".." segments, absolute paths or symlinks) are rejected
        with ImportFailedError.

    Example:
        >>> importer = PathImporter("locales")
        >>> translations = await importer.import_translations("en.json", "")
        # Loads from: locales/en.json

    Attributes:
        root_dir: Directory containing all importable documents
    """

    root_dir: str
    _resolved_root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_resolved_root", Path(self.root_dir).resolve())

    def resolve_path(self, url: str) -> Path:
        """Resolve an import path to a file inside root_dir.

        Raises:
            ImportFailedError: If url is empty, not a file location, or
                resolves outside root_dir
        """
        if not url:
            msg = "cannot import empty path"
            raise ImportFailedError(msg, url)

        location = url
        parsed = urlparse(location)
        if parsed.scheme == "file":
            location = unquote(parsed.path)
        elif parsed.scheme and len(parsed.scheme) > 1:
            # Single-letter schemes are Windows drive letters
            msg = f"Unsupported scheme '{parsed.scheme}' in import path: '{location}'"
            raise ImportFailedError(msg, location)

        path = Path(location)
        if not path.is_absolute():
            path = self._resolved_root / path
        resolved = path.resolve()
        if not resolved.is_relative_to(self._resolved_root):
            msg = f"Import path escapes root directory: '{location}'"
            raise ImportFailedError(msg, location)
        return resolved

    async def _read_json(self, url: str) -> tuple[Path, object]:
        path = self.resolve_path(url)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
            return path, json.loads(text)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            msg = f"Failed to import '{path}': {e}"
            raise ImportFailedError(msg, str(path)) from e

    async def import_translations(self, url: str, base: str) -> Translations:
        path, data = await self._read_json(url)
        outcome = normalize_translations(data)
        log_issues(logger, str(path), outcome.errors)
        logger.debug("Imported %d translations from %s", len(outcome.translations), path)
        return outcome.translations

    async def import_definition_map(self, url: str, base: str) -> NormalizedDefinitionMap:
        path, data = await self._read_json(url)
        outcome = normalize_definition_map(data)
        log_issues(logger, str(path), outcome.errors, outcome.warnings)
        return outcome.definitions
