"""
tests/test_forecast_api.py
───────────────────────────
HTTP-level tests for the forecast endpoint and health check:

  GET  /
  POST /api/v1/forecast/

Run with::

    pytest backend/tests/test_forecast_api.py -v
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

# ── URL constants ─────────────────────────────────────────────────────────────

_FORECAST_URL = "/api/v1/forecast/"

_HOUR_MS = 3_600_000


def _recent_klines(prices: list) -> tuple:
    """
    Hourly kline rows ending at the current hour, plus a target one hour
    after the last candle.
    """
    now = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)
    last_ms = int(now.timestamp() * 1000)
    start_ms = last_ms - (len(prices) - 1) * _HOUR_MS
    rows = [
        [str(start_ms + i * _HOUR_MS), str(p), str(p), str(p), str(p), "1", "1"]
        for i, p in enumerate(prices)
    ]
    target = now + timedelta(hours=1)
    return rows, target.isoformat()


def _payload(prices: list, **overrides) -> dict:
    candles, target = _recent_klines(prices)
    body = {
        "symbol": "btcusdt",
        "current_price": prices[-1] if prices else 100.0,
        "candles": candles,
        "target_instant": target,
    }
    body.update(overrides)
    return body


# ── GET / ─────────────────────────────────────────────────────────────────────


class TestHealth:
    async def test_200_ok(self, app_client) -> None:
        resp = await app_client.get("/")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


# ── POST /api/v1/forecast/ ────────────────────────────────────────────────────


class TestCreateForecast:
    """Successful forecasts."""

    async def test_200_reference_scenario(self, app_client) -> None:
        """100 → 106 hourly forecasts 108, bullish, confidence 30."""
        resp = await app_client.post(_FORECAST_URL, json=_payload([100, 102, 104, 106]))
        assert resp.status_code == 200
        body = resp.json()
        assert body["symbol"] == "BTCUSDT"
        assert body["predicted_price"] == pytest.approx(108.0)
        assert body["confidence"] == 30.0
        assert body["trend"] == "bullish"
        assert body["method"] == "regression"
        assert body["data_points_used"] == 4

    async def test_200_mapping_candles(self, app_client) -> None:
        """Dict candles are accepted alongside kline rows."""
        payload = _payload([100, 102, 104, 106])
        payload["candles"] = [{"timestamp": int(row[0]), "close": row[4]} for row in payload["candles"]]
        resp = await app_client.post(_FORECAST_URL, json=payload)
        assert resp.status_code == 200
        assert resp.json()["predicted_price"] == pytest.approx(108.0)

    async def test_200_newest_first_candles(self, app_client) -> None:
        """Exchange payloads in newest-first order are sorted by default."""
        payload = _payload([100, 102, 104, 106])
        payload["candles"] = payload["candles"][::-1]
        resp = await app_client.post(_FORECAST_URL, json=payload)
        assert resp.status_code == 200
        assert resp.json()["trend"] == "bullish"

    async def test_sorting_follows_settings(self, app_client, test_settings) -> None:
        """With SORT_CANDLES off the caller's order is trusted."""
        test_settings.SORT_CANDLES = False
        payload = _payload([100, 102, 104, 106])
        payload["candles"] = payload["candles"][::-1]
        resp = await app_client.post(_FORECAST_URL, json=payload)
        assert resp.status_code == 200
        assert resp.json()["trend"] == "bearish"


class TestCreateForecastErrors:
    """Rejected requests."""

    async def test_422_insufficient_data(self, app_client) -> None:
        resp = await app_client.post(_FORECAST_URL, json=_payload([100]))
        assert resp.status_code == 422
        assert resp.json()["detail"] == "insufficient data"

    async def test_422_past_target(self, app_client) -> None:
        payload = _payload([100, 101], target_instant="2020-01-01T00:00:00Z")
        resp = await app_client.post(_FORECAST_URL, json=payload)
        assert resp.status_code == 422

    @pytest.mark.parametrize("price", [0, -3.5])
    async def test_422_non_positive_current_price(self, app_client, price) -> None:
        resp = await app_client.post(_FORECAST_URL, json=_payload([100, 101], current_price=price))
        assert resp.status_code == 422

    async def test_422_blank_symbol(self, app_client) -> None:
        resp = await app_client.post(_FORECAST_URL, json=_payload([100, 101], symbol="   "))
        assert resp.status_code == 422


class TestCreateForecastSync:
    """Synchronous client checks, including the 500 path."""

    def test_200_sync(self, sync_client) -> None:
        resp = sync_client.post(_FORECAST_URL, json=_payload([100, 102, 104, 106]))
        assert resp.status_code == 200

    def test_500_on_unexpected_failure(self, sync_client) -> None:
        """Unexpected engine errors are hidden behind a generic 500."""
        with patch(
            "app.api.v1.endpoints.forecast.forecast",
            side_effect=RuntimeError("boom"),
        ):
            resp = sync_client.post(_FORECAST_URL, json=_payload([100, 102]))
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Forecast computation failed"
