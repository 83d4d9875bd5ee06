"""
analytics/forecasting/confidence.py
────────────────────────────────────
Confidence Scorer.

Volatility (coefficient of variation, in percent) lowers confidence; the
penalty is capped so volatility alone never pushes the score under the
floor.  Sample size raises it by up to ``MAX_DATA_BONUS`` points,
saturating at ``DATA_BONUS_SATURATION`` observations.
"""

import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 30.0
MAX_CONFIDENCE = 95.0
MIN_POINTS_FOR_SCORING = 10
MAX_VOLATILITY_PENALTY = 70.0
MAX_DATA_BONUS = 20.0
DATA_BONUS_SATURATION = 200


def coefficient_of_variation_pct(prices: pd.Series) -> float:
    """Population standard deviation over mean, in percent."""
    values = prices.to_numpy(dtype=float)
    mean = float(np.mean(values))
    std = float(np.sqrt(np.mean((values - mean) ** 2)))
    return std / mean * 100


def score_confidence(prices: pd.Series) -> float:
    """
    Score how much a forecast built on ``prices`` can be trusted.

    Args:
        prices: Prepared price series.

    Returns:
        Confidence in ``[30, 95]``; exactly 30 with fewer than 10 points.
    """
    n = len(prices)
    if n < MIN_POINTS_FOR_SCORING:
        return MIN_CONFIDENCE

    volatility = coefficient_of_variation_pct(prices)
    confidence = 100.0 - min(volatility * 2, MAX_VOLATILITY_PENALTY)
    confidence += min(n / DATA_BONUS_SATURATION * MAX_DATA_BONUS, MAX_DATA_BONUS)

    final = max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, confidence))
    logger.debug("Volatility %.2f%% over %d points → confidence %.0f", volatility, n, final)
    return final
