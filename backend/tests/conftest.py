"""
tests/conftest.py
──────────────────
Shared pytest fixtures for the backend test suite.

Fixtures
--------
t0
    UTC instant of the first generated candle.

make_candles
    Factory building exchange-style kline rows from a list of prices.

make_series
    Factory building a prepared price series from a list of prices.

app_client
    ``httpx.AsyncClient`` wired to the FastAPI app with the settings
    dependency overridden by ``test_settings``.

sync_client
    Synchronous ``TestClient`` using the same override.

Usage
-----
    def test_something(make_series):
        prices = make_series([100, 102, 104])
"""

from typing import AsyncGenerator, Callable, List, Sequence

import pandas as pd
import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from analytics.forecasting import prepare_series
from app.api.dependencies import get_app_settings
from app.main import app
from core.config import Settings

# 2023-11-14T22:00:00Z in epoch milliseconds.
T0_MS = 1_699_999_200_000
HOUR_MS = 3_600_000


# ── Candle / series factories ─────────────────────────────────────────────────


@pytest.fixture
def t0() -> pd.Timestamp:
    """UTC instant of the first generated candle."""
    return pd.Timestamp(T0_MS, unit="ms", tz="UTC")


@pytest.fixture
def make_candles() -> Callable[..., List[list]]:
    """
    Return a factory producing kline rows ``[ts, o, h, l, c, v, turnover]``.

    All fields are strings, as the exchange API returns them.  Candles are
    spaced ``step_hours`` apart starting at ``start_ms``.
    """

    def _make(
        prices: Sequence[float],
        step_hours: float = 1.0,
        start_ms: int = T0_MS,
    ) -> List[list]:
        rows = []
        for i, price in enumerate(prices):
            ts = int(start_ms + i * step_hours * HOUR_MS)
            rows.append([str(ts), str(price), str(price), str(price), str(price), "1.0", "1.0"])
        return rows

    return _make


@pytest.fixture
def make_series(make_candles) -> Callable[..., pd.Series]:
    """Return a factory producing a prepared price series."""

    def _make(
        prices: Sequence[float],
        step_hours: float = 1.0,
        start_ms: int = T0_MS,
    ) -> pd.Series:
        return prepare_series(make_candles(prices, step_hours, start_ms))

    return _make


# ── Settings override ─────────────────────────────────────────────────────────


@pytest.fixture
def test_settings() -> Settings:
    """Settings built from defaults only, ignoring any ``.env`` file."""
    return Settings(_env_file=None)


# ── Test clients ──────────────────────────────────────────────────────────────


@pytest.fixture
async def app_client(test_settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTPX client with the settings dependency overridden.

    Startup lifespan is skipped by ``ASGITransport``.
    """
    app.dependency_overrides[get_app_settings] = lambda: test_settings

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def sync_client(test_settings: Settings) -> TestClient:
    """
    Synchronous ``TestClient`` for simpler, non-async tests.

    Uses the same settings override as ``app_client``.
    """
    app.dependency_overrides[get_app_settings] = lambda: test_settings
    client = TestClient(app, raise_server_exceptions=True)
    yield client
    app.dependency_overrides.clear()
