"""
analytics/forecasting — Price forecasting engine.

Public API
----------
    from analytics.forecasting import forecast, ForecastResult, PredictionError
    from analytics.forecasting import prepare_series, estimate_price
    from analytics.forecasting import apply_plausibility_guard
    from analytics.forecasting import classify_trend, score_confidence
"""

from analytics.forecasting.confidence import score_confidence
from analytics.forecasting.engine import ForecastResult, forecast
from analytics.forecasting.errors import (
    DegenerateSeriesError,
    InsufficientDataError,
    PredictionError,
)
from analytics.forecasting.guard import apply_plausibility_guard
from analytics.forecasting.regression import Estimate, EstimateMethod, estimate_price
from analytics.forecasting.series import prepare_series
from analytics.forecasting.trend import Trend, classify_trend, moving_average

__all__ = [
    "forecast",
    "ForecastResult",
    "PredictionError",
    "InsufficientDataError",
    "DegenerateSeriesError",
    "prepare_series",
    "estimate_price",
    "Estimate",
    "EstimateMethod",
    "apply_plausibility_guard",
    "classify_trend",
    "Trend",
    "moving_average",
    "score_confidence",
]
