"""Caller-side flow tying readiness, coaching and chat history together."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from gameday.models.domain import (
    AthleteMetrics,
    ChatMessage,
    ChatRole,
    Game,
    ReadinessResult,
    RecommendationResult,
)
from gameday.services.chat_session import ChatSession
from gameday.services.coach_service import CHAT_CONTEXT_LIMIT, GenerativeCoachService
from gameday.services.health_metrics import MetricsProvider, apply_snapshot
from gameday.services.kickoff import kickoff_badge, minutes_until_kickoff
from gameday.services.readiness_engine import ReadinessEngine


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameDayEvaluation:
    readiness: ReadinessResult
    recommendation: RecommendationResult
    mode: str
    minutes_to_kickoff: int
    kickoff_badge: str


@dataclass(frozen=True)
class MetricsImport:
    metrics: AthleteMetrics
    updated_fields: tuple[str, ...]
    evaluation: GameDayEvaluation | None = None


class GameDayCoach:
    """Evaluates readiness and drives coaching conversations for one athlete."""

    def __init__(
        self,
        coach_service: GenerativeCoachService | None = None,
        readiness_engine: ReadinessEngine | None = None,
    ) -> None:
        self.coach_service = coach_service or GenerativeCoachService()
        self.readiness_engine = readiness_engine or ReadinessEngine()

    async def evaluate(
        self,
        game: Game,
        metrics: AthleteMetrics,
        *,
        locale: str | None = None,
        now: datetime | None = None,
    ) -> GameDayEvaluation:
        readiness = self.readiness_engine.compute(game, metrics, now)
        recommendation = await self.coach_service.recommendations(
            game, metrics, readiness, locale=locale, now=now
        )
        minutes = minutes_until_kickoff(game, now)
        logger.info(
            "Evaluation for %s | score=%d label=%s kickoff_in=%dmin",
            game.title,
            readiness.score,
            readiness.label,
            minutes,
        )
        return GameDayEvaluation(
            readiness=readiness,
            recommendation=recommendation,
            mode=self.coach_service.mode_description(locale),
            minutes_to_kickoff=minutes,
            kickoff_badge=kickoff_badge(minutes),
        )

    async def send_chat_message(
        self,
        session: ChatSession,
        text: str,
        game: Game,
        metrics: AthleteMetrics,
        *,
        evaluation: GameDayEvaluation | None = None,
        locale: str | None = None,
        now: datetime | None = None,
    ) -> ChatMessage | None:
        """
        Append the athlete's message, generate a reply and append it.

        Returns:
            The coach message, or None when ``text`` is empty/whitespace-only
            (nothing is sent and the session is left untouched)
        """
        trimmed = text.strip()
        if not trimmed:
            return None

        session.append(ChatRole.ATHLETE, trimmed)

        if evaluation is None:
            evaluation = await self.evaluate(game, metrics, locale=locale, now=now)

        reply = await self.coach_service.reply(
            trimmed,
            game,
            metrics,
            evaluation.readiness,
            evaluation.recommendation,
            session.recent(CHAT_CONTEXT_LIMIT),
            locale=locale,
            now=now,
        )
        return session.append(ChatRole.COACH, reply)

    async def import_metrics(
        self,
        provider: MetricsProvider,
        metrics: AthleteMetrics,
        game: Game | None = None,
        *,
        locale: str | None = None,
        now: datetime | None = None,
    ) -> MetricsImport:
        """
        Fetch a snapshot from ``provider``, apply it and re-evaluate.

        Provider errors propagate unchanged; ``metrics`` itself is never
        modified. The evaluation is only produced when ``game`` is given.
        """
        snapshot = await provider.fetch_snapshot()
        updated = apply_snapshot(metrics, snapshot)

        evaluation = None
        if game is not None:
            evaluation = await self.evaluate(game, updated, locale=locale, now=now)
        return MetricsImport(
            metrics=updated,
            updated_fields=tuple(snapshot.populated_fields),
            evaluation=evaluation,
        )
