"""Tests for the immutable definition merger."""

import logging

import pytest

from lexi18n.localization.merger import DefinitionMerger, builder, resolve_extends

_BASE = "https://example.com/i18n/locales.json"


class TestResolveExtends:
    def test_relative_path(self) -> None:
        assert resolve_extends("./en.json", _BASE) == "https://example.com/i18n/en.json"
        assert resolve_extends("../en.json", _BASE) == "https://example.com/en.json"

    def test_absolute_url_is_kept(self) -> None:
        assert resolve_extends("https://cdn.test/en.json", _BASE) == "https://cdn.test/en.json"

    def test_locale_tag_is_canonicalized(self) -> None:
        assert resolve_extends("en-uk", _BASE) == "en-GB"
        assert resolve_extends("pt", _BASE) == "pt"

    def test_empty_location(self) -> None:
        assert resolve_extends("./en.json", "") == "./en.json"


class TestDefinitionMerger:
    def test_empty_builder(self) -> None:
        assert dict(builder.build()) == {}

    def test_add_map_resolves_paths(self) -> None:
        merged = builder.add_map({"en": "./en.json", "pt-BR": ["pt", "br.json"]}, _BASE).build()
        assert merged["en"].extends == ("https://example.com/i18n/en.json",)
        assert merged["pt-BR"].extends == ("pt", "https://example.com/i18n/br.json")

    def test_extends_are_unioned_without_duplicates(self) -> None:
        merged = (
            builder
            .add_map({"en": ["./a.json", "./b.json"]}, _BASE)
            .add_map({"en": ["./b.json", "./c.json"]}, _BASE)
            .build()
        )
        assert [url.rsplit("/", 1)[1] for url in merged["en"].extends] == ["a.json", "b.json", "c.json"]

    def test_adding_the_same_map_twice_is_idempotent(self) -> None:
        definitions = {"en": ["./a.json", "en-GB"], "pt": {"extends": "./pt.json", "translations": {"a": "b"}}}
        once = builder.add_map(definitions, _BASE).build()
        twice = builder.add_map(definitions, _BASE).add_map(definitions, _BASE).build()
        assert twice["en"].extends == once["en"].extends == ("https://example.com/i18n/a.json", "en-GB")
        assert twice["pt"].extends == once["pt"].extends
        assert dict(twice["pt"].translations) == {"a": "b"}

    def test_paths_resolve_against_their_own_source(self) -> None:
        merged = (
            builder
            .add_map({"en": "./en.json"}, "https://one.test/")
            .add_map({"en": "./en.json"}, "https://two.test/")
            .build()
        )
        assert merged["en"].extends == ("https://one.test/en.json", "https://two.test/en.json")

    def test_later_translations_win(self) -> None:
        merged = (
            builder
            .add_definition_on_language({"translations": {"a": "1", "b": "1"}}, "en", _BASE)
            .add_definition_on_language({"translations": {"a": "2"}}, "en", _BASE)
            .build()
        )
        assert dict(merged["en"].translations) == {"a": "2", "b": "1"}

    def test_add_translations_uses_location_as_is(self) -> None:
        merged = builder.add_translations("https://cdn.test/gb.json", "en-UK").build()
        assert merged["en-GB"].extends == ("https://cdn.test/gb.json",)

    def test_builders_are_immutable(self) -> None:
        first = builder.add_map({"en": "./en.json"}, _BASE)
        second = first.add_translations("https://cdn.test/fr.json", "fr")
        assert "fr" not in first.build()
        assert set(second.build()) == {"en", "fr"}
        assert dict(builder.build()) == {}

    def test_build_is_memoized(self) -> None:
        merger = builder.add_map({"en": "./en.json"}, _BASE)
        assert merger.build() is merger.build()

    def test_result_is_read_only(self) -> None:
        merged = builder.add_map({"en": "./en.json"}, _BASE).build()
        with pytest.raises(TypeError):
            merged["fr"] = merged["en"]  # type: ignore[index]

    def test_invalid_locale_is_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="lexi18n.localization.merger"):
            merger = builder.add_definition_on_language("./x.json", "en_US", _BASE)
        assert merger is builder
        assert 'invalid locale "en_US", it will be ignored' in caplog.text

    def test_normalization_issues_are_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="lexi18n.localization.merger"):
            merged = builder.add_map({"en": 5, "en-uk": "./gb.json"}, _BASE).build()
        assert merged["en"].extends == ()
        assert merged["en-GB"].extends == ("https://example.com/i18n/gb.json",)
        assert f"Error on {_BASE}::.en, invalid type" in caplog.text
        assert 'fixed to locale "en-GB"' in caplog.text

    def test_repr(self) -> None:
        assert repr(builder.add_map({}, _BASE)) == "DefinitionMerger(sources=1)"

    def test_new_merger_is_empty(self) -> None:
        assert dict(DefinitionMerger().build()) == {}
