"""Shared test fixtures for the EnviroGeo test suite."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import numpy as np
import pytest

from envirogeo.analysis import compute_insights, compute_stats, generate_time_series
from envirogeo.client import StoreClient
from envirogeo.config import Config
from envirogeo.geometry import AreaSelection, area_from_coordinates
from envirogeo.results import AnalysisResult
from envirogeo.store import MemoryStore, SQLiteStore


class StepClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def test_config() -> Config:
    """Return a fresh default Config instance for test isolation."""
    return Config()


@pytest.fixture
def remote_config() -> Config:
    """Config pointing at a (mocked) data functions endpoint."""
    return Config(
        functions_url="https://example.supabase.co/functions/v1",
        api_key="test-key",
    )


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator for reproducible synthetic series."""
    return np.random.default_rng(42)


@pytest.fixture
def lahore() -> AreaSelection:
    """Point selection at Lahore, inside the supported region."""
    return area_from_coordinates(31.5204, 74.3587)


@pytest.fixture
def memory_store() -> MemoryStore:
    """Memory store with a stepping clock."""
    return MemoryStore(clock=StepClock())


@pytest.fixture
def sqlite_store(tmp_path: Path) -> Iterator[SQLiteStore]:
    """SQLite store in a temporary directory with a stepping clock."""
    store = SQLiteStore(tmp_path / "store.db", clock=StepClock())
    yield store
    store.close()


@pytest.fixture
def client(memory_store: MemoryStore) -> StoreClient:
    """Store client wired to an in-process proxy over a memory store."""
    return StoreClient.for_store(memory_store)


@pytest.fixture
def sample_result(rng: np.random.Generator, lahore: AreaSelection) -> AnalysisResult:
    """A synthetic NDVI result over one year at Lahore."""
    series = generate_time_series("NDVI", date(2023, 1, 1), date(2023, 12, 31), rng=rng)
    stats = compute_stats(series)
    return AnalysisResult(
        parameter="NDVI",
        time_series=series,
        stats=stats,
        insights=compute_insights("NDVI", stats),
        start_date="2023-01-01",
        end_date="2023-12-31",
        geometry=lahore.geometry,
        geometry_type=lahore.geometry_type,
    )
