"""Shared test fixtures and data loading for global-datetime.

All test data lives in data/fixtures/ as JSON files.  This module loads
that data and exposes helper functions + pytest fixtures for the tests.

Reference instant: 2017-08-20T19:20:18.811Z, written in Chicago time.
Reference zone: Europe/Madrid (UTC+2 in August).
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"
SETTINGS_DIR = FIXTURES_DIR / "settings"


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path) as f:
        return json.load(f)


_reference = _load_json(FIXTURES_DIR / "reference.json")


# ---------------------------------------------------------------------------
# Reference constants derived from reference.json
# ---------------------------------------------------------------------------
REFERENCE_ZONE = _reference["reference_zone"]
CHICAGO_TEXT = _reference["chicago_text"]
CHICAGO_MILLIS = _reference["chicago_epoch_millis"]
MADRID_TEXT = _reference["madrid_text"]
MADRID_DATE = _reference["madrid_date"]
MADRID_HOUR = _reference["madrid_hour"]
ZONES: list[str] = _reference["zones"]

# Milliseconds in common spans, for clock arithmetic in tests
MINUTE_MS = 60_000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS


# ---------------------------------------------------------------------------
# Convenience helpers (importable by test modules)
# ---------------------------------------------------------------------------
def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


def settings_path(name: str) -> Path:
    """Path of data/fixtures/settings/{name}.json."""
    return SETTINGS_DIR / f"{name}.json"


def clock_at(millis: int):
    """FixedClock frozen at an epoch-millisecond instant."""
    from global_datetime.clock import FixedClock

    return FixedClock.at_epoch_millis(millis)


def make_instant(text: str = CHICAGO_TEXT, now_millis: int | None = None, **kwargs):
    """GlobalDateTime parsed from text, optionally with a fixed clock."""
    from global_datetime.instant import GlobalDateTime

    if now_millis is not None:
        kwargs["clock"] = clock_at(now_millis)
    return GlobalDateTime.parse(text, **kwargs)


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def chicago():
    """Reference instant parsed from Chicago text, default settings."""
    return make_instant()


@pytest.fixture
def chicago_nanos():
    """Reference instant parsed from Chicago text at nanosecond precision."""
    from global_datetime.settings import NANOS

    return make_instant(settings=NANOS)


@pytest.fixture
def reference_clock():
    """Clock frozen at the reference instant."""
    return clock_at(CHICAGO_MILLIS)
