"""Generative coaching with a guaranteed rule-based fallback.

Every request computes the deterministic result first. The generative
backend is then tried once; its output can only replace the fallback after
it has been sanitized and repaired, and any failure along the way returns
the fallback unchanged.
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Sequence

import yaml

from gameday.config import Settings, get_settings
from gameday.models.domain import (
    AthleteMetrics,
    ChatMessage,
    Game,
    ReadinessResult,
    RecommendationResult,
)
from gameday.services.chat_rules import RuleBasedChatService
from gameday.services.interfaces import ChatService, RecommendationService
from gameday.services.kickoff import minutes_until_kickoff
from gameday.services.output_repair import MAX_LINE_LENGTH, repair_chat_text, repair_plan
from gameday.services.recommendation_rules import RuleBasedRecommendationService
from gameday.services.text_backend import AnthropicTextBackend, TextGenerationBackend


logger = logging.getLogger(__name__)

CHAT_CONTEXT_LIMIT = 6

GENERATIVE_MODE = "Generative coach active"
RULE_BASED_MODE = "Rule-based coach mode (generative backend unavailable)"


def load_prompt_config(path: Path) -> dict[str, Any]:
    with Path(path).open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def format_context_lines(
    game: Game,
    metrics: AthleteMetrics,
    readiness: ReadinessResult,
    minutes_to_kickoff: int,
    include_factors: bool = True,
) -> str:
    lines = [
        f"- Game: {game.title}",
        f"- Kickoff in minutes: {minutes_to_kickoff}",
        f"- Athlete type: {metrics.athlete_type.title}",
        f"- Readiness score: {readiness.score} ({readiness.label})",
    ]
    if include_factors:
        lines.append(f"- Top factors: {', '.join(readiness.top_factors)}")
    lines.extend(
        [
            f"- Sleep hours: {metrics.sleep_hours:.1f}",
            f"- Soreness: {metrics.soreness}/10",
            f"- Stress: {metrics.stress}/10",
            f"- Hydration: {int(metrics.hydration_oz)} oz",
            f"- Training intensity: {metrics.training_intensity}/10",
        ]
    )
    return "\n".join(lines)


def format_history(messages: Sequence[ChatMessage], limit: int = CHAT_CONTEXT_LIMIT) -> str:
    """Render the last ``limit`` messages as ``"<Role>: <text>"`` lines."""
    recent = list(messages)[-limit:] if limit > 0 else []
    return "\n".join(f"{message.role.title}: {message.text}" for message in recent)


class GenerativeCoachService:
    """Plan generation and chat replies via a text backend, falling back to rules."""

    def __init__(
        self,
        backend: TextGenerationBackend | None = None,
        fallback_recommendations: RecommendationService | None = None,
        fallback_chat: ChatService | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.backend = backend if backend is not None else AnthropicTextBackend(self.settings)
        self.fallback_recommendations = fallback_recommendations or RuleBasedRecommendationService()
        self.fallback_chat = fallback_chat or RuleBasedChatService()
        self.prompt_config = load_prompt_config(self.settings.prompt_config_path)

    def is_generative_available(self, locale: str | None = None) -> bool:
        return self.backend.is_available(locale)

    def mode_description(self, locale: str | None = None) -> str:
        return GENERATIVE_MODE if self.is_generative_available(locale) else RULE_BASED_MODE

    def _language_directive(self, locale: str | None) -> str | None:
        translations = self.prompt_config.get("translations", {})
        language_for = getattr(self.backend, "language_for", None)
        language = language_for(locale) if callable(language_for) else None
        entry = translations.get(language or self.settings.default_language, {})
        return entry.get("instruction")

    def _finish_prompt(self, prompt: str, locale: str | None) -> str:
        instruction = self._language_directive(locale)
        if instruction:
            prompt = f"{prompt}\n\nLANGUAGE DIRECTIVE:\n{instruction}"
        return prompt

    def build_plan_prompt(
        self,
        game: Game,
        metrics: AthleteMetrics,
        readiness: ReadinessResult,
        minutes_to_kickoff: int,
        locale: str | None = None,
    ) -> str:
        template = self.prompt_config["plan_template"]
        prompt = template.format(
            max_length=MAX_LINE_LENGTH,
            context=format_context_lines(game, metrics, readiness, minutes_to_kickoff),
        )
        return self._finish_prompt(prompt, locale)

    def build_chat_prompt(
        self,
        user_message: str,
        game: Game,
        metrics: AthleteMetrics,
        readiness: ReadinessResult,
        recommendation: RecommendationResult,
        recent_messages: Sequence[ChatMessage],
        minutes_to_kickoff: int,
        locale: str | None = None,
    ) -> str:
        template = self.prompt_config["chat_template"]
        prompt = template.format(
            context=format_context_lines(
                game, metrics, readiness, minutes_to_kickoff, include_factors=False
            ),
            next_action=recommendation.next_action,
            history=format_history(recent_messages),
            user_message=user_message,
        )
        return self._finish_prompt(prompt, locale)

    async def _generate(self, prompt: str, purpose: str) -> str | None:
        """Call the backend once; any failure is logged and mapped to None."""
        try:
            return await self.backend.generate(prompt, system=self.prompt_config.get("system_prompt"))
        except Exception:
            logger.warning("Generative %s failed - using rule-based fallback", purpose, exc_info=True)
            return None

    async def recommendations(
        self,
        game: Game,
        metrics: AthleteMetrics,
        readiness: ReadinessResult,
        *,
        locale: str | None = None,
        now: datetime | None = None,
    ) -> RecommendationResult:
        fallback = await self.fallback_recommendations.recommendations(
            game, metrics, readiness, locale=locale, now=now
        )

        if not self.is_generative_available(locale):
            logger.info("Generative backend unavailable (locale=%s) - returning rule-based plan", locale or "default")
            return fallback

        minutes = minutes_until_kickoff(game, now)
        prompt = self.build_plan_prompt(game, metrics, readiness, minutes, locale=locale)
        raw = await self._generate(prompt, "plan")
        if raw is None:
            return fallback

        result = repair_plan(raw, fallback, minutes)
        if result is fallback:
            logger.warning("Generative plan could not be decoded - returning rule-based plan")
        else:
            logger.info("Generative plan ready | next_action=%s", result.next_action)
        return result

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
        fallback = await self.fallback_chat.reply(
            user_message,
            game,
            metrics,
            readiness,
            recommendation,
            recent_messages,
            locale=locale,
            now=now,
        )

        if not self.is_generative_available(locale):
            logger.info("Generative backend unavailable (locale=%s) - returning rule-based reply", locale or "default")
            return fallback

        minutes = minutes_until_kickoff(game, now)
        prompt = self.build_chat_prompt(
            user_message,
            game,
            metrics,
            readiness,
            recommendation,
            recent_messages,
            minutes,
            locale=locale,
        )
        raw = await self._generate(prompt, "chat reply")
        if raw is None:
            return fallback
        return repair_chat_text(raw, fallback)
