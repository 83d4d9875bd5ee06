"""
analytics/forecasting/engine.py
────────────────────────────────
Forecast Orchestrator: the single entry point of the engine.

Pipeline
--------
    prepare_series → estimate_price → apply_plausibility_guard
                   ↘ classify_trend
                   ↘ score_confidence

Every call is self-contained: nothing is cached between calls and the
caller's candle records are never mutated, so concurrent calls need no
coordination.

Usage
-----
    from analytics.forecasting import forecast

    result = forecast("BTCUSDT", 64_250.0, klines, target_instant)
    print(result.predicted_price, result.trend, result.confidence)
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict

import pandas as pd

from analytics.forecasting.confidence import score_confidence
from analytics.forecasting.errors import InsufficientDataError, PredictionError
from analytics.forecasting.guard import apply_plausibility_guard
from analytics.forecasting.regression import EstimateMethod, estimate_price
from analytics.forecasting.series import normalise_instant, prepare_series
from analytics.forecasting.trend import Trend, classify_trend, moving_average

logger = logging.getLogger(__name__)

MOVING_AVERAGE_PERIOD = 20


@dataclass(frozen=True)
class ForecastResult:
    """
    Outcome of one forecast call.

    Attributes:
        symbol:           Identifier the caller asked about.
        current_price:    Latest price supplied by the caller.
        predicted_price:  Guarded prediction, always ``>= 0``.
        target_instant:   UTC instant the prediction is for.
        confidence:       Score in ``[30, 95]``.
        trend:            Recent direction label.
        method:           Path that produced ``predicted_price``.
        data_points_used: Valid price points after cleaning.
        change_percent:   ``predicted_price`` vs ``current_price`` in percent.
        moving_average:   Mean of the last 20 prices.
    """

    symbol: str
    current_price: float
    predicted_price: float
    target_instant: pd.Timestamp
    confidence: float
    trend: Trend
    method: EstimateMethod
    data_points_used: int
    change_percent: float
    moving_average: float

    def to_dict(self) -> Dict[str, Any]:
        """Plain-typed dict suitable for serialisation."""
        return {
            "symbol": self.symbol,
            "current_price": self.current_price,
            "predicted_price": self.predicted_price,
            "target_instant": self.target_instant.to_pydatetime(),
            "confidence": self.confidence,
            "trend": self.trend.value,
            "method": self.method.value,
            "data_points_used": self.data_points_used,
            "change_percent": self.change_percent,
            "moving_average": self.moving_average,
        }


def forecast(
    symbol: str,
    current_price: float,
    raw_candles: Any,
    target_instant: Any,
    sort_candles: bool = True,
) -> ForecastResult:
    """
    Produce a point forecast, trend label and confidence score.

    Args:
        symbol:         Identifier echoed back in the result.
        current_price:  Latest known price; must be finite and positive.
        raw_candles:    Historical candle records (see
                        :mod:`analytics.forecasting.series`).
        target_instant: Instant to predict for (``datetime``,
                        ``pd.Timestamp``, epoch ms or ISO-8601 string).
        sort_candles:   Sort candles by time when they arrive out of order.

    Returns:
        A fully populated :class:`ForecastResult`.

    Raises:
        PredictionError: If fewer than two valid price points are available,
                         or ``current_price`` / ``target_instant`` is invalid.
    """
    try:
        current_price = float(current_price)
    except (TypeError, ValueError) as exc:
        raise PredictionError(f"Invalid current price: {current_price!r}") from exc
    if not math.isfinite(current_price) or current_price <= 0:
        raise PredictionError(f"Current price must be positive, got {current_price!r}")

    target = normalise_instant(target_instant)

    try:
        prices = prepare_series(raw_candles, sort=sort_candles)
    except InsufficientDataError as exc:
        logger.error("Cannot forecast %s: %s", symbol, exc)
        raise PredictionError("insufficient data") from exc

    estimate = apply_plausibility_guard(estimate_price(prices, target), prices, target)
    trend = classify_trend(prices)
    confidence = score_confidence(prices)

    result = ForecastResult(
        symbol=symbol,
        current_price=current_price,
        predicted_price=estimate.value,
        target_instant=target,
        confidence=confidence,
        trend=trend,
        method=estimate.method,
        data_points_used=len(prices),
        change_percent=(estimate.value - current_price) / current_price * 100,
        moving_average=moving_average(prices, MOVING_AVERAGE_PERIOD),
    )

    logger.info(
        "Forecast %s @ %s: %.4f → %.4f (%+.2f%%, %s, trend=%s, confidence=%.0f, n=%d)",
        symbol,
        target.isoformat(),
        current_price,
        result.predicted_price,
        result.change_percent,
        result.method.value,
        trend.value,
        confidence,
        result.data_points_used,
    )
    return result
