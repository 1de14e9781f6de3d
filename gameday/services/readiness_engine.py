"""Deterministic pre-game readiness scoring."""

from __future__ import annotations

import logging
import math
from datetime import datetime

from gameday.models.domain import AthleteMetrics, Game, ReadinessResult
from gameday.services.kickoff import hours_until_kickoff


logger = logging.getLogger(__name__)

# Factor name -> weight. Weights sum to 100; order is the tie-break order.
FACTOR_WEIGHTS: dict[str, float] = {
    "Sleep quality": 30.0,
    "Soreness": 20.0,
    "Stress": 20.0,
    "Hydration": 15.0,
    "Training intensity": 10.0,
    "Kickoff timing": 5.0,
}

SLEEP_TARGET_HOURS = 9.0
HYDRATION_TARGET_OZ = 100.0
TOP_FACTOR_COUNT = 3

LABEL_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (85, "Game Ready"),
    (70, "On Track"),
    (50, "Needs Tune-Up"),
)
LOWEST_LABEL = "Recover First"


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def normalize_scale(value: int | float) -> float:
    """Map a 1-10 rating onto [0, 1], clamping out-of-range input."""
    return (_clamp(float(value), 1.0, 10.0) - 1.0) / 9.0


def kickoff_urgency(hours_to_kickoff: float) -> float:
    """
    Step weighting of how close kickoff is.

    The 2-6 hour window scores highest. Past kickoff counts as zero hours.
    """
    hours = max(0.0, hours_to_kickoff)
    if hours < 2.0:
        return 0.8
    if hours < 6.0:
        return 1.0
    if hours < 24.0:
        return 0.6
    return 0.3


def normalized_factors(
    game: Game,
    metrics: AthleteMetrics,
    now: datetime | None = None,
) -> dict[str, float]:
    """Return each factor normalized to [0, 1], higher meaning more ready."""
    return {
        "Sleep quality": _clamp(metrics.sleep_hours / SLEEP_TARGET_HOURS, 0.0, 1.0),
        "Soreness": 1.0 - normalize_scale(metrics.soreness),
        "Stress": 1.0 - normalize_scale(metrics.stress),
        "Hydration": _clamp(metrics.hydration_oz / HYDRATION_TARGET_OZ, 0.0, 1.0),
        "Training intensity": normalize_scale(metrics.training_intensity),
        "Kickoff timing": kickoff_urgency(hours_until_kickoff(game, now)),
    }


def factor_contributions(
    game: Game,
    metrics: AthleteMetrics,
    now: datetime | None = None,
) -> dict[str, float]:
    """Return weighted per-factor contributions to the readiness score."""
    normalized = normalized_factors(game, metrics, now)
    return {name: normalized[name] * weight for name, weight in FACTOR_WEIGHTS.items()}


def readiness_label(score: int) -> str:
    for threshold, label in LABEL_THRESHOLDS:
        if score >= threshold:
            return label
    return LOWEST_LABEL


def rank_factors(contributions: dict[str, float], limit: int = TOP_FACTOR_COUNT) -> list[str]:
    """Names ordered by absolute contribution, ties kept in weight-table order."""
    ordered = sorted(contributions.items(), key=lambda item: abs(item[1]), reverse=True)
    return [name for name, _ in ordered[:limit]]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute(game: Game, metrics: AthleteMetrics, now: datetime | None = None) -> ReadinessResult:
    """
    Compute readiness score, label and top factors.

    Args:
        game: Tracked event (only kickoff time is used)
        metrics: Current athlete metrics; out-of-range values are clamped
        now: Evaluation instant, defaults to the current UTC time

    Returns:
        ReadinessResult with score in [0, 100] and up to three factor names

    Example:
        >>> result = compute(game, metrics)
        >>> result.label
        'On Track'
    """
    contributions = factor_contributions(game, metrics, now)
    score = int(_clamp(_round_half_up(sum(contributions.values())), 0, 100))
    result = ReadinessResult(
        score=score,
        label=readiness_label(score),
        top_factors=tuple(rank_factors(contributions)),
    )
    logger.debug(
        "Readiness computed | score=%d label=%s factors=%s",
        result.score,
        result.label,
        ", ".join(result.top_factors),
    )
    return result


class ReadinessEngine:
    """Object wrapper so callers can inject an alternative scorer."""

    def compute(self, game: Game, metrics: AthleteMetrics, now: datetime | None = None) -> ReadinessResult:
        return compute(game, metrics, now)
