"""Rule-based pre-game recommendations.

Used directly when no generative backend is available and always computed
first as the fallback for the generative coach.
"""
from __future__ import annotations

import logging
from datetime import datetime

from gameday.models.domain import (
    AthleteMetrics,
    AthleteType,
    Game,
    ReadinessResult,
    RecommendationResult,
)
from gameday.services.kickoff import minutes_until_kickoff


logger = logging.getLogger(__name__)

MAX_TIPS = 3
READY_SCORE = 70
LOW_READINESS_SCORE = 60

LOW_SLEEP_HOURS = 7.5
LOW_HYDRATION_OZ = 80.0
HIGH_STRESS = 7
HIGH_SORENESS = 7
IMMINENT_KICKOFF_MINUTES = 90

ACTIVATION_ACTION = "Start your activation warm-up now and lock in your first three game cues."
PRIME_ACTION = "Prime with short dynamic sprints and sip fluids while you rehearse your role."
STABILIZE_ACTION = "Stabilize with easy mobility, slow breathing and small sips of fluid."
CONTROLLED_PREP_ACTION = "Run a controlled 20-minute prep block, then top off carbs and fluids."
RECOVERY_FIRST_ACTION = "Put recovery first: hydrate, stretch lightly and stay off your feet."

SPORT_ACTIONS: dict[AthleteType, str] = {
    AthleteType.SOCCER: "Keep legs fresh: light touches on the ball and no extra running today.",
    AthleteType.BASKETBALL: "Shoot an easy form-shooting set and keep your jumping volume low.",
    AthleteType.FOOTBALL: "Walk through your assignments and save contact for game day.",
    AthleteType.BASEBALL: "Take a light throwing progression and a short timing session in the cage.",
    AthleteType.HOCKEY: "Do a short edge-work skate and keep your legs out of heavy sprints.",
    AthleteType.TENNIS: "Hit a relaxed rhythm session and rehearse your first-serve routine.",
    AthleteType.RUNNER: "Run an easy shakeout with four relaxed strides, then rest your legs.",
    AthleteType.COMBAT: "Shadow a few crisp rounds, check your weight and avoid hard sparring.",
}

SPORT_TIPS: dict[AthleteType, str] = {
    AthleteType.SOCCER: "Rehearse first-touch patterns for 5 minutes to sharpen your feel.",
    AthleteType.BASKETBALL: "Add 5 minutes of ankle and hip mobility before any court work.",
    AthleteType.FOOTBALL: "Review two key reads from film and visualize your first series.",
    AthleteType.BASEBALL: "Protect your arm: band work before throwing and no max-effort throws.",
    AthleteType.HOCKEY: "Prime your groin and hips with 5 minutes of lateral lunges.",
    AthleteType.TENNIS: "Loosen shoulders and wrists with light band rotations.",
    AthleteType.RUNNER: "Lay out your race kit and fueling plan now to save decisions later.",
    AthleteType.COMBAT: "Rehearse your opening exchange and keep hand wraps and gear ready.",
}

LOW_SLEEP_TIP = "Bank sleep: take a 20-minute nap or get to bed 60 minutes early."
LOW_HYDRATION_TIP = "Drink 16-24 oz of fluids with electrolytes over the next hour."
HIGH_STRESS_TIP = "Run 4 minutes of box breathing to bring your arousal down."
HIGH_SORENESS_TIP = "Spend 10 minutes on mobility and light tissue work for sore areas."
IMMINENT_KICKOFF_TIP = "Kickoff is close: keep movement light and stay warm."
LOW_READINESS_TIP = "Readiness is low: cut extra volume and protect energy for the game."
FUEL_NOW_TIP = "Fuel now with easy carbs and a little protein."


def next_action(
    minutes_to_kickoff: int,
    metrics: AthleteMetrics,
    readiness: ReadinessResult,
) -> str:
    """Pick the single next action from the kickoff-time priority ladder."""
    ready = readiness.score >= READY_SCORE
    if minutes_to_kickoff <= 15:
        return ACTIVATION_ACTION
    if minutes_to_kickoff <= 60:
        return PRIME_ACTION if ready else STABILIZE_ACTION
    if minutes_to_kickoff <= 180:
        return CONTROLLED_PREP_ACTION if ready else RECOVERY_FIRST_ACTION
    return SPORT_ACTIONS[metrics.athlete_type]


def coach_tips(
    minutes_to_kickoff: int,
    metrics: AthleteMetrics,
    readiness: ReadinessResult,
) -> list[str]:
    """
    Collect tips in fixed evaluation order and keep the first three.

    Order matters: earlier triggers win the limited slots.
    """
    tips: list[str] = []

    if metrics.sleep_hours < LOW_SLEEP_HOURS:
        tips.append(LOW_SLEEP_TIP)
    if metrics.hydration_oz < LOW_HYDRATION_OZ:
        tips.append(LOW_HYDRATION_TIP)
    if metrics.stress >= HIGH_STRESS:
        tips.append(HIGH_STRESS_TIP)
    if metrics.soreness >= HIGH_SORENESS:
        tips.append(HIGH_SORENESS_TIP)
    if minutes_to_kickoff <= IMMINENT_KICKOFF_MINUTES:
        tips.append(IMMINENT_KICKOFF_TIP)

    tips.append(SPORT_TIPS[metrics.athlete_type])

    if readiness.score < LOW_READINESS_SCORE:
        tips.append(LOW_READINESS_TIP)

    if len(tips) < MAX_TIPS:
        tips.append(FUEL_NOW_TIP)

    return tips[:MAX_TIPS]


def recommend(
    game: Game,
    metrics: AthleteMetrics,
    readiness: ReadinessResult,
    now: datetime | None = None,
) -> RecommendationResult:
    """Build the deterministic recommendation for the current state."""
    minutes = minutes_until_kickoff(game, now)
    return RecommendationResult(
        next_action=next_action(minutes, metrics, readiness),
        tips=tuple(coach_tips(minutes, metrics, readiness)),
    )


class RuleBasedRecommendationService:
    """Plan-generation service backed purely by :func:`recommend`."""

    async def recommendations(
        self,
        game: Game,
        metrics: AthleteMetrics,
        readiness: ReadinessResult,
        *,
        locale: str | None = None,
        now: datetime | None = None,
    ) -> RecommendationResult:
        result = recommend(game, metrics, readiness, now)
        logger.debug("Rule-based plan ready | next_action=%s tips=%d", result.next_action, len(result.tips))
        return result
