"""Tests for the generative coach service and its fallback guarantee."""
from __future__ import annotations

import asyncio
import json

import pytest

from gameday.models.domain import AthleteType, ChatMessage, ChatRole, RecommendationResult
from gameday.services import chat_rules, recommendation_rules
from gameday.services.coach_service import (
    GENERATIVE_MODE,
    RULE_BASED_MODE,
    GenerativeCoachService,
    format_history,
)
from gameday.services.readiness_engine import compute


@pytest.fixture
def context(make_game, make_metrics, now):
    game = make_game(minutes=300)
    metrics = make_metrics(
        sleep_hours=6.0,
        hydration_oz=60.0,
        soreness=8,
        stress=8,
        training_intensity=9,
        athlete_type=AthleteType.SOCCER,
    )
    readiness = compute(game, metrics, now)
    return game, metrics, readiness


def _service(backend, settings) -> GenerativeCoachService:
    return GenerativeCoachService(backend=backend, settings=settings)


class TestPlanGeneration:
    """Test plan generation paths."""

    @pytest.mark.asyncio
    async def test_unavailable_backend_returns_rule_based_plan(self, stub_backend_factory, settings, context, now):
        game, metrics, readiness = context
        backend = stub_backend_factory(response="{}", available=False)

        result = await _service(backend, settings).recommendations(game, metrics, readiness, now=now)

        assert result == recommendation_rules.recommend(game, metrics, readiness, now)
        assert backend.prompts == []

    @pytest.mark.asyncio
    async def test_valid_payload_replaces_fallback(self, stub_backend_factory, settings, context, now, plan_fixture):
        game, metrics, readiness = context
        backend = stub_backend_factory(response="```json\n" + json.dumps(plan_fixture) + "\n```")

        result = await _service(backend, settings).recommendations(game, metrics, readiness, now=now)

        assert result.next_action == plan_fixture["nextAction"]
        assert list(result.tips) == plan_fixture["tips"]
        assert len(backend.prompts) == 1

    @pytest.mark.asyncio
    async def test_short_tip_list_is_topped_up_from_fallback(self, stub_backend_factory, settings, context, now):
        game, metrics, readiness = context
        backend = stub_backend_factory(response='{"nextAction": "Hydrate now", "tips": ["Sip water"]}')
        fallback = recommendation_rules.recommend(game, metrics, readiness, now)

        result = await _service(backend, settings).recommendations(game, metrics, readiness, now=now)

        assert result.next_action == "Hydrate now"
        assert result.tips == ("Sip water",) + fallback.tips[:2]

    @pytest.mark.asyncio
    async def test_long_next_action_is_bounded(self, stub_backend_factory, settings, context, now):
        game, metrics, readiness = context
        payload = {"nextAction": "A" * 150, "tips": ["a", "b", "c"]}
        backend = stub_backend_factory(response=json.dumps(payload))

        result = await _service(backend, settings).recommendations(game, metrics, readiness, now=now)

        assert result.next_action == "A" * 100

    @pytest.mark.asyncio
    async def test_malformed_json_returns_fallback(self, stub_backend_factory, settings, context, now):
        game, metrics, readiness = context
        backend = stub_backend_factory(response='{"nextAction": "Hydrate now", "tips": ["a", "b", "c"]')

        result = await _service(backend, settings).recommendations(game, metrics, readiness, now=now)

        assert result == recommendation_rules.recommend(game, metrics, readiness, now)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [TimeoutError("slow"), RuntimeError("boom"), ValueError("bad decode")])
    async def test_backend_errors_never_escape(self, stub_backend_factory, settings, context, now, error):
        game, metrics, readiness = context
        backend = stub_backend_factory(error=error)

        result = await _service(backend, settings).recommendations(game, metrics, readiness, now=now)

        assert result == recommendation_rules.recommend(game, metrics, readiness, now)
        assert len(backend.prompts) == 1

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, stub_backend_factory, settings, context, now):
        game, metrics, readiness = context
        backend = stub_backend_factory(error=asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await _service(backend, settings).recommendations(game, metrics, readiness, now=now)

    @pytest.mark.asyncio
    async def test_custom_fallback_delegate_is_used(self, stub_backend_factory, settings, context, now):
        game, metrics, readiness = context
        expected = RecommendationResult(next_action="Custom.", tips=("one",))

        class FixedPlanService:
            async def recommendations(self, game, metrics, readiness, *, locale=None, now=None):
                return expected

        service = GenerativeCoachService(
            backend=stub_backend_factory(available=False),
            fallback_recommendations=FixedPlanService(),
            settings=settings,
        )

        assert await service.recommendations(game, metrics, readiness, now=now) is expected

    def test_plan_prompt_contents(self, stub_backend_factory, settings, context):
        game, metrics, readiness = context
        prompt = _service(stub_backend_factory(), settings).build_plan_prompt(game, metrics, readiness, 300)

        assert "STRICT JSON" in prompt
        assert '{"nextAction":"...", "tips":["...", "...", "..."]}' in prompt
        assert "- Game: Cup Final" in prompt
        assert "- Kickoff in minutes: 300" in prompt
        assert "- Athlete type: Soccer" in prompt
        assert f"- Readiness score: {readiness.score} ({readiness.label})" in prompt
        assert f"- Top factors: {', '.join(readiness.top_factors)}" in prompt
        assert "- Sleep hours: 6.0" in prompt
        assert "- Hydration: 60 oz" in prompt
        assert "<= 100 chars" in prompt
        assert "Respond in English." in prompt


class TestChatReply:
    """Test chat reply paths."""

    @pytest.mark.asyncio
    async def test_unavailable_backend_returns_rule_based_reply(self, stub_backend_factory, settings, context, now):
        game, metrics, readiness = context
        recommendation = recommendation_rules.recommend(game, metrics, readiness, now)
        backend = stub_backend_factory(available=False)

        text = await _service(backend, settings).reply(
            "I slept badly", game, metrics, readiness, recommendation, [], now=now
        )

        assert text == chat_rules.reply("I slept badly", game, metrics, readiness, recommendation, [], now)

    @pytest.mark.asyncio
    async def test_generated_reply_is_cleaned(self, stub_backend_factory, settings, context, now):
        game, metrics, readiness = context
        recommendation = recommendation_rules.recommend(game, metrics, readiness, now)
        backend = stub_backend_factory(response="  Breathe low and slow.\n\nThen  do light mobility.  ")

        text = await _service(backend, settings).reply("nervous", game, metrics, readiness, recommendation, [], now=now)

        assert text == "Breathe low and slow. Then do light mobility."

    @pytest.mark.asyncio
    async def test_empty_generation_returns_fallback(self, stub_backend_factory, settings, context, now):
        game, metrics, readiness = context
        recommendation = recommendation_rules.recommend(game, metrics, readiness, now)
        backend = stub_backend_factory(response=" \n ")

        text = await _service(backend, settings).reply("water?", game, metrics, readiness, recommendation, [], now=now)

        assert text == chat_rules.reply("water?", game, metrics, readiness, recommendation, [], now)

    @pytest.mark.asyncio
    async def test_backend_error_returns_fallback(self, stub_backend_factory, settings, context, now):
        game, metrics, readiness = context
        recommendation = recommendation_rules.recommend(game, metrics, readiness, now)
        backend = stub_backend_factory(error=ConnectionError("offline"))

        text = await _service(backend, settings).reply("help", game, metrics, readiness, recommendation, [], now=now)

        assert text == chat_rules.reply("help", game, metrics, readiness, recommendation, [], now)

    @pytest.mark.asyncio
    async def test_prompt_includes_only_last_six_messages(self, stub_backend_factory, settings, context, now):
        game, metrics, readiness = context
        recommendation = recommendation_rules.recommend(game, metrics, readiness, now)
        history = [
            ChatMessage(role=ChatRole.ATHLETE if i % 2 else ChatRole.COACH, text=f"message {i}")
            for i in range(8)
        ]
        backend = stub_backend_factory(response="Stay loose.")

        await _service(backend, settings).reply("ready?", game, metrics, readiness, recommendation, history, now=now)

        prompt = backend.prompts[0]
        assert "message 0" not in prompt
        assert "message 1" not in prompt
        assert "Coach AI: message 2" in prompt
        assert "You: message 7" in prompt
        assert "Never discuss scores, teams, or fan content." in prompt
        assert f"- Current nextAction: {recommendation.next_action}" in prompt
        assert prompt.rstrip().endswith("Respond in English.")
        assert len(history) == 8

    def test_format_history(self):
        history = [ChatMessage(role=ChatRole.ATHLETE, text="hi"), ChatMessage(role=ChatRole.COACH, text="hello")]
        assert format_history(history) == "You: hi\nCoach AI: hello"
        assert format_history([]) == ""


class TestModeDescription:
    def test_reports_backend_state(self, stub_backend_factory, settings):
        assert _service(stub_backend_factory(available=True), settings).mode_description() == GENERATIVE_MODE
        assert _service(stub_backend_factory(available=False), settings).mode_description() == RULE_BASED_MODE

    def test_probe_runs_on_every_call(self, stub_backend_factory, settings):
        backend = stub_backend_factory(available=True)
        service = _service(backend, settings)

        assert service.is_generative_available("en-US")
        backend.available = False
        assert not service.is_generative_available("en-US")
        assert backend.availability_checks == ["en-US", "en-US"]
