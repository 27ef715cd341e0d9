"""Tests for the filesystem and null importers."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import pytest

from lexi18n.diagnostics.errors import ImportFailedError
from lexi18n.localization.importing import NullImporter, PathImporter


@pytest.fixture
def locales(tmp_path: Path) -> Path:
    """Root directory with one translation file and one locale map."""
    root = tmp_path / "site"
    (root / "i18n").mkdir(parents=True)
    (root / "i18n" / "en.json").write_text(
        json.dumps({"hello": "hello", "count": 3}), encoding="utf-8"
    )
    (root / "i18n" / "locales.json").write_text(
        json.dumps({"en-uk": "./gb.json", "pt": ["./pt.json"]}), encoding="utf-8"
    )
    (tmp_path / "secret.json").write_text("{}", encoding="utf-8")
    return root


class TestPathImporter:
    def test_import_translations(self, locales: Path) -> None:
        importer = PathImporter(str(locales))
        translations = asyncio.run(importer.import_translations("i18n/en.json", ""))
        assert dict(translations) == {"hello": "hello"}

    def test_invalid_values_are_logged(
        self, locales: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        importer = PathImporter(str(locales))
        with caplog.at_level(logging.ERROR, logger="lexi18n.localization.importing"):
            asyncio.run(importer.import_translations("i18n/en.json", ""))
        assert "::.count, expected string instead of number" in caplog.text

    def test_file_url(self, locales: Path) -> None:
        importer = PathImporter(str(locales))
        url = (locales / "i18n" / "en.json").as_uri()
        assert "hello" in asyncio.run(importer.import_translations(url, ""))

    def test_import_definition_map(self, locales: Path) -> None:
        importer = PathImporter(str(locales))
        definitions = asyncio.run(importer.import_definition_map("i18n/locales.json", ""))
        assert list(definitions) == ["en-GB", "pt"]
        assert definitions["en-GB"].extends == ("./gb.json",)

    @pytest.mark.parametrize("url", ["../secret.json", "i18n/../../secret.json"])
    def test_traversal_is_rejected(self, locales: Path, url: str) -> None:
        importer = PathImporter(str(locales))
        with pytest.raises(ImportFailedError, match="escapes root directory"):
            asyncio.run(importer.import_translations(url, ""))

    def test_absolute_path_outside_root(self, locales: Path) -> None:
        importer = PathImporter(str(locales))
        outside = str(locales.parent / "secret.json")
        with pytest.raises(ImportFailedError, match="escapes root directory"):
            importer.resolve_path(outside)

    def test_missing_file(self, locales: Path) -> None:
        importer = PathImporter(str(locales))
        with pytest.raises(ImportFailedError) as exc_info:
            asyncio.run(importer.import_translations("i18n/fr.json", ""))
        assert exc_info.value.url.endswith("fr.json")

    def test_invalid_json(self, locales: Path) -> None:
        (locales / "broken.json").write_text("{not json", encoding="utf-8")
        importer = PathImporter(str(locales))
        with pytest.raises(ImportFailedError, match="Failed to import"):
            asyncio.run(importer.import_translations("broken.json", ""))

    def test_remote_scheme_is_rejected(self, locales: Path) -> None:
        importer = PathImporter(str(locales))
        with pytest.raises(ImportFailedError, match="Unsupported scheme 'https'"):
            importer.resolve_path("https://example.com/en.json")

    def test_empty_path(self, locales: Path) -> None:
        with pytest.raises(ImportFailedError, match="cannot import empty path"):
            PathImporter(str(locales)).resolve_path("")

    def test_resolve_path_stays_inside_root(self, locales: Path) -> None:
        importer = PathImporter(str(locales))
        assert importer.resolve_path("i18n/en.json") == (locales / "i18n" / "en.json").resolve()


class TestNullImporter:
    def test_everything_is_empty(self, caplog: pytest.LogCaptureFixture) -> None:
        importer = NullImporter()
        with caplog.at_level(logging.ERROR, logger="lexi18n.localization.importing"):
            assert dict(asyncio.run(importer.import_translations("en.json", ""))) == {}
            assert dict(asyncio.run(importer.import_definition_map("locales.json", ""))) == {}
        assert "import_translations not implemented, ignoring en.json" in caplog.text
        assert "import_definition_map not implemented, ignoring locales.json" in caplog.text
