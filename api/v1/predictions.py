"""
Prediction API Routes

Read-mostly endpoints over the prediction service. Reading today's
prediction runs a live pass only when nothing is cached for the day;
forcing a refresh requires the API bearer token.

Routes:
    GET  /v1/predictions/today          - today's prediction (cached or live)
    GET  /v1/predictions/{date}         - cached prediction for a day
    POST /v1/predictions/refresh        - forced live pass (token auth)
    GET  /v1/history                    - history, most recent first
    GET  /v1/history/summary            - highest / lowest / average
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Security

from core.api_auth import verify_api_token
from core.logging import get_logger
from core.settings import settings
from schemas.api import HistoryResponse, HistorySummaryResponse, PredictionResponse
from schemas.common import ApiStatus
from services.prediction_service import PredictionService, get_prediction_service

router = APIRouter(tags=["predictions"])
log = get_logger("predictions_api")


@router.get("/predictions/today", response_model=PredictionResponse)
async def get_today_prediction(
    include_weather: bool = Query(settings.include_weather, description="Fetch forecasts on a live pass"),
    service: PredictionService = Depends(get_prediction_service),
) -> PredictionResponse:
    """Return today's prediction, running a live pass only on a cache miss."""
    prediction = await service.fetch_prediction(include_weather=include_weather)
    return PredictionResponse(
        status=ApiStatus.SUCCESS,
        message="Sample prediction" if prediction.is_sample_data else "Prediction ready",
        data=prediction,
    )


@router.post("/predictions/refresh", response_model=PredictionResponse)
async def refresh_prediction(
    _: str = Security(verify_api_token),
    date: Optional[date] = Query(None, description="Day to refresh (YYYY-MM-DD). Omit for today."),
    include_weather: bool = Query(settings.include_weather, description="Fetch forecasts"),
    service: PredictionService = Depends(get_prediction_service),
) -> PredictionResponse:
    """Force a live pass for a day, replacing whatever was cached."""
    log.info("refresh_requested", date=date.isoformat() if date else None)
    prediction = await service.fetch_prediction(
        for_date=date,
        force_refresh=True,
        include_weather=include_weather,
    )
    return PredictionResponse(
        status=ApiStatus.SUCCESS,
        message="Sample prediction" if prediction.is_sample_data else "Prediction refreshed",
        data=prediction,
    )


@router.get("/predictions/{day}", response_model=PredictionResponse)
async def get_prediction_for_day(
    day: date,
    service: PredictionService = Depends(get_prediction_service),
) -> PredictionResponse:
    """Return the cached prediction for a day without touching upstream APIs."""
    prediction = service.cached_prediction(day)
    if prediction is None:
        raise HTTPException(status_code=404, detail=f"No prediction cached for {day.isoformat()}")

    return PredictionResponse(
        status=ApiStatus.SUCCESS,
        message="Prediction found",
        data=prediction,
    )


@router.get("/history", response_model=HistoryResponse)
async def get_history(
    service: PredictionService = Depends(get_prediction_service),
) -> HistoryResponse:
    entries = service.history_entries()
    return HistoryResponse(
        status=ApiStatus.SUCCESS,
        message=f"{len(entries)} history entries",
        data=entries,
    )


@router.get("/history/summary", response_model=HistorySummaryResponse)
async def get_history_summary(
    service: PredictionService = Depends(get_prediction_service),
) -> HistorySummaryResponse:
    return HistorySummaryResponse(
        status=ApiStatus.SUCCESS,
        message="History summary",
        data=service.history_summary(),
    )
