"""
app/api/v1/endpoints/forecast.py
──────────────────────────────────
Forecast endpoint.

Routes
------
POST /api/v1/forecast/   Point forecast, trend and confidence for a symbol.

Design note
-----------
The engine is pure, microsecond-scale CPU work.  The handler is a plain
``def`` so FastAPI runs it in its own worker thread pool; no dedicated
executor is needed.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from analytics.forecasting import PredictionError, forecast
from app.api.dependencies import get_app_settings
from core.config import Settings
from schemas.forecast import ForecastRequest, ForecastResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=ForecastResponse, summary="Linear-trend price forecast")
def create_forecast(
    request: ForecastRequest,
    settings: Settings = Depends(get_app_settings),
) -> ForecastResponse:
    """
    Forecast the price of ``request.symbol`` at ``request.target_instant``.

    Args:
        request: Symbol, current price, historical candles and target instant.

    Returns:
        Guarded point forecast with trend label and confidence score.

    Raises:
        HTTPException 422: Too few valid candles, or otherwise unusable input.
        HTTPException 500: Unexpected failure inside the engine.
    """
    try:
        result = forecast(
            request.symbol,
            request.current_price,
            request.candles,
            request.target_instant,
            sort_candles=settings.SORT_CANDLES,
        )
    except PredictionError as exc:
        logger.info("Forecast rejected for %s: %s", request.symbol, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("Forecast failed for %s", request.symbol)
        raise HTTPException(status_code=500, detail="Forecast computation failed") from exc

    return ForecastResponse(**result.to_dict())
