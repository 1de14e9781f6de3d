"""API endpoint applying wearable readings to athlete metrics."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from gameday.dependencies import extract_locale, get_game_day_coach
from gameday.models.schemas import EvaluationResponse, MetricsImportRequest, MetricsImportResponse
from gameday.services.game_day import GameDayCoach
from gameday.services.health_metrics import MetricsProviderError, NoMetricsDataError, WearableReadingsProvider


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


@router.post("/import", response_model=MetricsImportResponse)
async def import_metrics(
    request: Request,
    payload: MetricsImportRequest,
    lang: str | None = None,
    coach: GameDayCoach = Depends(get_game_day_coach),
) -> MetricsImportResponse:
    """
    Convert raw wearable readings into a snapshot and apply it.

    When a game is supplied the athlete is re-evaluated with the updated
    metrics.

    Raises:
        HTTPException 422: When none of the readings produced a value
        HTTPException 502: When the provider could not deliver readings
    """
    provider = WearableReadingsProvider(**payload.readings.model_dump())
    game = payload.game.to_game() if payload.game else None

    try:
        result = await coach.import_metrics(
            provider,
            payload.metrics.to_metrics(),
            game,
            locale=extract_locale(request, lang),
        )
    except NoMetricsDataError as exc:
        logger.warning("Metrics import carried no data")
        raise HTTPException(status_code=422, detail=str(exc))
    except MetricsProviderError as exc:
        logger.error("Metrics provider failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))

    return MetricsImportResponse(
        metrics=result.metrics,
        updated_fields=list(result.updated_fields),
        evaluation=EvaluationResponse.from_evaluation(result.evaluation) if result.evaluation else None,
    )
