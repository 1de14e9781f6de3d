"""Keyword-driven chat replies used when the generative coach is unavailable."""
from __future__ import annotations

from datetime import datetime
from typing import Sequence

from gameday.models.domain import (
    AthleteMetrics,
    ChatMessage,
    Game,
    ReadinessResult,
    RecommendationResult,
)
from gameday.services.kickoff import minutes_until_kickoff, time_window


# Checked in order; the first bucket with a keyword hit answers.
TOPIC_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("sleep", ("sleep",)),
    ("hydration", ("hydrate", "hydration", "water")),
    ("stress", ("stress", "anxious", "anxiety")),
)

TOPIC_REPLIES: dict[str, str] = {
    "sleep": (
        "Protect sleep debt first. With kickoff in {window}, prioritize a short nap "
        "and reduce cognitive load."
    ),
    "hydration": (
        "Hydration is your priority now. With kickoff in {window}, add 16-24 oz with "
        "electrolytes before the next prep block."
    ),
    "stress": (
        "Run a 4-minute breathing reset, then 5 minutes of mobility. With kickoff in "
        "{window}, this lowers arousal without draining energy."
    ),
}


def match_topic(user_message: str) -> str | None:
    message = user_message.lower()
    for topic, keywords in TOPIC_KEYWORDS:
        if any(keyword in message for keyword in keywords):
            return topic
    return None


def priority_focus(metrics: AthleteMetrics, readiness: ReadinessResult) -> str:
    if readiness.score < 60:
        return "recovery and hydration"
    if metrics.stress >= 7:
        return "nervous-system reset and tactical clarity"
    if metrics.soreness >= 7:
        return "mobility and tissue prep"
    return "execution quality and freshness"


def reply(
    user_message: str,
    game: Game,
    metrics: AthleteMetrics,
    readiness: ReadinessResult,
    recommendation: RecommendationResult,
    recent_messages: Sequence[ChatMessage] = (),
    now: datetime | None = None,
) -> str:
    """Return a short deterministic coaching reply."""
    window = time_window(minutes_until_kickoff(game, now))

    topic = match_topic(user_message)
    if topic is not None:
        return TOPIC_REPLIES[topic].format(window=window)

    action = recommendation.next_action.strip().rstrip(".")
    focus = priority_focus(metrics, readiness)
    return f"{action}. With kickoff in {window}, keep your focus on {focus}."


class RuleBasedChatService:
    async def reply(
        self,
        user_message: str,
        game: Game,
        metrics: AthleteMetrics,
        readiness: ReadinessResult,
        recommendation: RecommendationResult,
        recent_messages: Sequence[ChatMessage],
        *,
        locale: str | None = None,
        now: datetime | None = None,
    ) -> str:
        return reply(user_message, game, metrics, readiness, recommendation, recent_messages, now)
