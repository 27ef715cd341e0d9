"""Tests for locale tag parsing, canonicalization and fallback chains."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lexi18n.diagnostics.errors import LocaleError
from lexi18n.locale_utils import (
    LocaleTag,
    fallback_candidates,
    get_babel_locale,
    normalize_locale,
    parse_locale_tag,
    try_parse_locale_tag,
)


class TestParseLocaleTag:
    """Parsing and canonical case."""

    @pytest.mark.parametrize(
        ("tag", "base_name"),
        [
            ("en", "en"),
            ("EN-us", "en-US"),
            ("zh-hant-tw", "zh-Hant-TW"),
            ("es-419", "es-419"),
            ("de-DE-1996", "de-DE-1996"),
        ],
    )
    def test_case_is_normalized(self, tag: str, base_name: str) -> None:
        assert parse_locale_tag(tag).base_name == base_name

    def test_deprecated_region_is_replaced(self) -> None:
        assert parse_locale_tag("en-UK").base_name == "en-GB"

    def test_deprecated_language_is_replaced(self) -> None:
        assert parse_locale_tag("iw").base_name == "he"

    def test_extensions_are_kept_apart(self) -> None:
        tag = parse_locale_tag("de-DE-u-co-phonebk")
        assert tag.base_name == "de-DE"
        assert tag.extensions == "u-co-phonebk"
        assert str(tag) == "de-DE-u-co-phonebk"

    @pytest.mark.parametrize(
        "tag", ["", "en_US", "en.UTF-8", "e", "en-US-", "de-1996-1996", "en-"]
    )
    def test_malformed_tags(self, tag: str) -> None:
        assert try_parse_locale_tag(tag) is None
        with pytest.raises(LocaleError):
            parse_locale_tag(tag)

    def test_non_string(self) -> None:
        assert try_parse_locale_tag(None) is None  # type: ignore[arg-type]

    def test_babel_identifier(self) -> None:
        assert parse_locale_tag("zh-Hant-TW").babel_identifier == "zh_Hant_TW"

    @given(
        language=st.sampled_from(["en", "fr", "de", "pt", "zh"]),
        region=st.sampled_from(["us", "GB", "Br", "tw", "ca"]),
    )
    def test_parsing_is_idempotent(self, language: str, region: str) -> None:
        """The canonical base name parses to itself."""
        canonical = parse_locale_tag(f"{language}-{region}").base_name
        assert parse_locale_tag(canonical).base_name == canonical


class TestFallbackCandidates:
    def test_region(self) -> None:
        assert fallback_candidates(parse_locale_tag("en-US")) == ("en-US", "en")

    def test_script_and_region(self) -> None:
        assert fallback_candidates(parse_locale_tag("zh-Hant-TW")) == ("zh-Hant-TW", "zh-TW", "zh")

    def test_language_only(self) -> None:
        assert fallback_candidates(LocaleTag("fr")) == ("fr",)


class TestNormalizeLocale:
    @pytest.mark.parametrize(
        ("code", "expected"),
        [("en-US", "en_US"), ("en-UK", "en_GB"), ("de_DE", "de_DE"), ("pt-br", "pt_BR")],
    )
    def test_posix_form(self, code: str, expected: str) -> None:
        assert normalize_locale(code) == expected

    def test_babel_locale_is_cached(self) -> None:
        assert get_babel_locale("en-GB") is get_babel_locale("en-GB")
        assert get_babel_locale("en-GB").territory == "GB"
