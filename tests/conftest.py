"""Shared test fixtures for categorical-naive-bayes tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from categorical_nb.config import ENV_PREFIX
from categorical_nb.models import Dataset, Record
from categorical_nb.parsers import read_dataset

SETTINGS_VARS = ("SEED", "RATIO", "FOLDS", "DELIMITER", "LOG_LEVEL")


@pytest.fixture
def weather_path() -> Path:
    """Path to the 14-row play-tennis sample."""
    return Path(__file__).parent.parent / "examples" / "weather.csv"


@pytest.fixture
def weather(weather_path: Path) -> Dataset:
    """The play-tennis sample as a Dataset."""
    return read_dataset(weather_path)


@pytest.fixture
def two_record_dataset() -> Dataset:
    """Two records with disjoint attribute values and equal class priors."""
    return Dataset([
        Record(("sunny", "hot"), "no"),
        Record(("rainy", "cool"), "yes"),
    ])


@pytest.fixture
def numbered_dataset() -> Dataset:
    """Twelve distinct single-attribute records, handy for partition checks."""
    return Dataset(Record((f"v{i}",), "a" if i % 2 else "b") for i in range(12))


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove all settings variables for the test and restore them afterwards."""
    for name in SETTINGS_VARS:
        # setenv first so that teardown also removes values loaded from .env
        monkeypatch.setenv(ENV_PREFIX + name, "")
        monkeypatch.delenv(ENV_PREFIX + name)
    return monkeypatch
