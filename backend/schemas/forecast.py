"""
Pydantic schemas for forecast request / response.

The client supplies the candles and current price it already fetched;
the server never calls the exchange itself.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Union

from pydantic import BaseModel, Field, field_validator

# A candle is either a positional kline row
# ``[open_time_ms, open, high, low, close, volume, turnover]`` or a mapping
# with ``timestamp`` and ``close`` keys.
Candle = Union[List[Any], Dict[str, Any]]


class ForecastRequest(BaseModel):
    """
    Payload sent by the client to the forecast endpoint.

    Attributes:
        symbol:         Trading pair or ticker (e.g. ``BTCUSDT``).
        current_price:  Latest ticker price, strictly positive.
        candles:        Historical candles ordered oldest → newest.
                        Malformed rows are dropped, not rejected.
        target_instant: Instant to predict for; must lie in the future.
                        Naive datetimes are read as UTC.
    """

    symbol: str
    current_price: float = Field(..., gt=0, allow_inf_nan=False)
    candles: List[Candle] = Field(default_factory=list)
    target_instant: datetime

    @field_validator("symbol")
    @classmethod
    def normalise_symbol(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("symbol must not be empty")
        return v

    @field_validator("target_instant")
    @classmethod
    def must_be_future(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        if v <= datetime.now(timezone.utc):
            raise ValueError("target_instant must be in the future")
        return v


class ForecastResponse(BaseModel):
    """
    Forecast result returned by the forecast endpoint.

    Attributes:
        symbol:           Symbol the forecast was built for.
        current_price:    Price supplied in the request.
        predicted_price:  Point forecast, never negative.
        target_instant:   Instant the forecast is for (UTC).
        confidence:       Confidence score in ``[30, 95]``.
        trend:            ``bullish``, ``bearish`` or ``neutral``.
        method:           Estimation path that produced the price.
        data_points_used: Valid candles after cleaning.
        change_percent:   Predicted vs current price, in percent.
        moving_average:   Mean of the last 20 close prices.
    """

    symbol: str
    current_price: float
    predicted_price: float = Field(..., ge=0)
    target_instant: datetime
    confidence: float = Field(..., ge=30, le=95)
    trend: Literal["bullish", "bearish", "neutral"]
    method: Literal["regression", "mean_fallback", "trend_fallback"]
    data_points_used: int
    change_percent: float
    moving_average: float
