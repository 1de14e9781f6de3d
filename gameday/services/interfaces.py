"""Service protocols shared by the rule-based and generative coaches."""
from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from gameday.models.domain import (
    AthleteMetrics,
    ChatMessage,
    Game,
    ReadinessResult,
    RecommendationResult,
)


class RecommendationService(Protocol):
    """Produces a pre-game plan for the current readiness state."""

    async def recommendations(
        self,
        game: Game,
        metrics: AthleteMetrics,
        readiness: ReadinessResult,
        *,
        locale: str | None = None,
        now: datetime | None = None,
    ) -> RecommendationResult:
        ...


class ChatService(Protocol):
    """Answers a free-text athlete message in the current context."""

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
        ...
