"""API endpoints for readiness scoring and pre-game coaching plans."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request

from gameday.dependencies import extract_locale, get_game_day_coach
from gameday.models.domain import ReadinessResult
from gameday.models.schemas import EvaluationRequest, EvaluationResponse
from gameday.services.game_day import GameDayCoach


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["coach"])


@router.get("/coach/mode")
async def get_coach_mode(
    request: Request,
    lang: str | None = None,
    coach: GameDayCoach = Depends(get_game_day_coach),
) -> dict[str, str | bool]:
    """Report whether the generative coach or the rule-based coach will answer."""
    locale = extract_locale(request, lang)
    return {
        "mode": coach.coach_service.mode_description(locale),
        "generative": coach.coach_service.is_generative_available(locale),
    }


@router.post("/readiness", response_model=ReadinessResult)
async def compute_readiness(
    payload: EvaluationRequest,
    coach: GameDayCoach = Depends(get_game_day_coach),
) -> ReadinessResult:
    """
    Compute the readiness score for the submitted game and metrics.

    Returns:
        ReadinessResult: score (0-100), label and up to three top factors
    """
    return coach.readiness_engine.compute(payload.game.to_game(), payload.metrics.to_metrics())


@router.post("/recommendations", response_model=EvaluationResponse)
async def get_recommendations(
    request: Request,
    payload: EvaluationRequest,
    lang: str | None = None,
    coach: GameDayCoach = Depends(get_game_day_coach),
) -> EvaluationResponse:
    """
    Evaluate readiness and build the pre-game coaching plan.

    Always returns a plan: when the generative coach is unavailable or fails,
    the rule-based plan is returned instead.
    """
    locale = extract_locale(request, lang)
    logger.info("Handling recommendation request | locale=%s", locale or "default")
    evaluation = await coach.evaluate(
        payload.game.to_game(),
        payload.metrics.to_metrics(),
        locale=locale,
    )
    return EvaluationResponse.from_evaluation(evaluation)
