"""Pytest configuration and shared fixtures for the icuflow test suite.

Hypothesis profiles:
- dev: local development, 200 examples
- ci: CI runs, 50 examples, derandomized
- verbose: debugging, 100 examples with progress output

Profile selection: HYPOTHESIS_PROFILE overrides; CI=true selects "ci";
otherwise "dev".

Tests marked @pytest.mark.fuzz are skipped unless selected with -m fuzz.
"""

import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from icuflow.diagnostics import SourceLocation
from icuflow.extraction import PatternExtractor
from icuflow.runtime import I18n

# =============================================================================
# HYPOTHESIS PROFILES
# =============================================================================

_PHASES = [Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink]

settings.register_profile("dev", max_examples=200, phases=_PHASES, derandomize=False)
settings.register_profile(
    "ci", max_examples=50, phases=_PHASES, derandomize=True, print_blob=True
)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=_PHASES,
    derandomize=False,
    verbosity=Verbosity.verbose,
)


def _detect_profile() -> str:
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit
    if os.environ.get("CI") == "true":
        return "ci"
    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# FUZZ MARKER
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register the 'fuzz' marker for intensive property tests."""
    config.addinivalue_line(
        "markers",
        "fuzz: Intensive property tests for fuzzing (excluded from normal test runs)",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip fuzz-marked tests unless the run selects them with -m fuzz."""
    if "fuzz" in str(config.getoption("-m", default="")):
        return

    skip_fuzz = pytest.mark.skip(reason="Fuzzing test - run with: pytest -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)


# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture
def location() -> SourceLocation:
    """Location used for hand-built source messages."""
    return SourceLocation("app.py", 1)


@pytest.fixture
def extractor() -> PatternExtractor:
    return PatternExtractor()


@pytest.fixture
def i18n() -> I18n:
    """English runtime with a small Czech catalog."""
    return I18n(
        "en",
        {
            "en": {},
            "cs": {
                "Hello {name}": "Ahoj {name}",
                "{count, plural, one {# book} other {# books}}": (
                    "{count, plural, one {# kniha} few {# knihy} other {# knih}}"
                ),
            },
        },
    )


@pytest.fixture
def locale_dir(tmp_path: Path) -> Path:
    """Empty locale directory with en and cs subdirectories."""
    root = tmp_path / "locale"
    (root / "en").mkdir(parents=True)
    (root / "cs").mkdir()
    return root
