"""
analytics/forecasting/trend.py
───────────────────────────────
Trend Classifier and moving-average helper.
"""

import logging
from enum import Enum

import pandas as pd

logger = logging.getLogger(__name__)

TREND_WINDOW = 10
# Percent move between half-window means needed to call a direction.
TREND_THRESHOLD_PCT = 2.0


class Trend(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


def half_window_change_pct(prices: pd.Series, window: int = TREND_WINDOW) -> float:
    """
    Percent change from the first-half mean to the second-half mean.

    The last ``window`` points are split at ``k // 2``; the second half
    takes the odd point when ``k`` is odd.

    Args:
        prices: Price series with at least two points.
        window: Number of trailing points to consider.

    Returns:
        ``(second_avg - first_avg) / first_avg * 100``.
    """
    recent = prices.iloc[-window:]
    mid = len(recent) // 2
    first_avg = float(recent.iloc[:mid].mean())
    second_avg = float(recent.iloc[mid:].mean())
    return (second_avg - first_avg) / first_avg * 100


def classify_trend(prices: pd.Series) -> Trend:
    """
    Label the recent direction of ``prices``.

    Returns:
        ``BULLISH`` above +2 %, ``BEARISH`` below −2 %, otherwise
        ``NEUTRAL`` (including exactly ±2 % and series shorter than two).
    """
    if len(prices) < 2:
        return Trend.NEUTRAL

    change_pct = half_window_change_pct(prices)
    logger.debug("Trend analysis - change percent: %.2f%%", change_pct)

    if change_pct > TREND_THRESHOLD_PCT:
        return Trend.BULLISH
    if change_pct < -TREND_THRESHOLD_PCT:
        return Trend.BEARISH
    return Trend.NEUTRAL


def moving_average(prices: pd.Series, period: int) -> float:
    """Mean of the last ``period`` prices (all of them if fewer)."""
    if period < 1:
        raise ValueError(f"period must be >= 1, got {period}")
    return float(prices.iloc[-period:].mean())
