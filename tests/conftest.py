"""Pytest configuration for the lexi18n test suite.

Single Source of Truth for Hypothesis max_examples:
- dev: Local development with 500 examples (thorough property testing)
- ci: GitHub Actions with 50 examples (fast CI feedback)
- verbose: Debug mode with progress output (100 examples)

Profile auto-detection:
- CI=true environment variable -> "ci" profile (GitHub Actions sets this)
- HYPOTHESIS_PROFILE env var -> explicit override
- Otherwise -> "dev" profile (local development)

Override manually: HYPOTHESIS_PROFILE=verbose pytest tests/
"""

import os
from collections.abc import Iterator, Mapping

import pytest
from hypothesis import Phase, Verbosity, settings

from lexi18n.diagnostics.errors import ImportFailedError
from lexi18n.runtime.key_parser import clear_parse_cache
from lexi18n.runtime.locale_context import LocaleContext

# =============================================================================
# HYPOTHESIS PROFILES - SINGLE SOURCE OF TRUTH
# =============================================================================

# Development profile: thorough local testing (500 examples, silent)
settings.register_profile(
    "dev",
    max_examples=500,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
)

# CI profile: fast feedback for GitHub Actions (50 examples)
settings.register_profile(
    "ci",
    max_examples=50,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=True,
    print_blob=True,
)

# Verbose profile: debug mode with progress visibility (100 examples)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    derandomize=False,
    verbosity=Verbosity.verbose,
)


def _detect_profile() -> str:
    """Detect appropriate Hypothesis profile based on execution context.

    Priority:
    1. HYPOTHESIS_PROFILE env var (explicit override)
    2. CI=true env var (GitHub Actions auto-detection)
    3. Default to "dev" (local development)
    """
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit
    if os.environ.get("CI") == "true":
        return "ci"
    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def _fresh_caches() -> Iterator[None]:
    """Start every test with empty parse and locale caches."""
    clear_parse_cache()
    LocaleContext.clear_cache()
    yield


class FakeImporter:
    """In-memory importer recording every call.

    Unknown URLs raise ImportFailedError, like a missing file would.
    """

    def __init__(
        self,
        files: Mapping[str, Mapping[str, object]] | None = None,
        maps: Mapping[str, Mapping[str, object]] | None = None,
    ) -> None:
        self.files = dict(files or {})
        self.maps = dict(maps or {})
        self.calls: list[tuple[str, str]] = []
        self.map_calls: list[tuple[str, str]] = []

    async def import_translations(self, url: str, base: str) -> Mapping[str, object]:
        self.calls.append((url, base))
        if url not in self.files:
            msg = f"no such file: {url}"
            raise ImportFailedError(msg, url)
        return self.files[url]

    async def import_definition_map(self, url: str, base: str) -> Mapping[str, object]:
        self.map_calls.append((url, base))
        if url not in self.maps:
            msg = f"no such file: {url}"
            raise ImportFailedError(msg, url)
        return self.maps[url]


@pytest.fixture
def fake_importer() -> type[FakeImporter]:
    """The FakeImporter class, for building importers with test data."""
    return FakeImporter
