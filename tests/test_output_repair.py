"""Tests for generative output sanitization and repair."""

from gameday.models.domain import RecommendationResult
from gameday.services.output_repair import (
    bounded_line,
    clean_line,
    decode_plan_payload,
    repair_chat_text,
    repair_plan,
    repair_tips,
    strip_code_fences,
)


FALLBACK = RecommendationResult(
    next_action="Put recovery first: hydrate, stretch lightly and stay off your feet.",
    tips=("fallback one", "fallback two", "fallback three"),
)


class TestDecode:
    """Test JSON extraction from raw responses."""

    def test_fenced_payload(self):
        raw = '```json\n{"nextAction":"Hydrate now","tips":["a","b","c"]}\n```'
        payload = decode_plan_payload(raw)

        assert payload is not None
        assert payload.next_action == "Hydrate now"
        assert payload.tips == ["a", "b", "c"]

    def test_strip_code_fences(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_code_fences("  plain  ") == "plain"

    def test_embedded_in_prose(self):
        raw = 'Here is your plan: {"nextAction": "Go", "tips": ["x"]} Good luck!'
        payload = decode_plan_payload(raw)

        assert payload is not None
        assert payload.next_action == "Go"
        assert payload.tips == ["x"]

    def test_missing_closing_brace(self):
        assert decode_plan_payload('{"nextAction": "Go", "tips": ["x", "y", "z"]') is None

    def test_wrong_shape(self):
        assert decode_plan_payload('{"action": "Go", "tips": []}') is None
        assert decode_plan_payload('{"nextAction": "Go", "tips": "not a list"}') is None
        assert decode_plan_payload("no json here") is None

    def test_extra_keys_are_ignored(self):
        payload = decode_plan_payload('{"nextAction": "Go", "tips": [], "confidence": "high"}')
        assert payload is not None
        assert payload.tips == []


class TestBounding:
    """Test per-field cleanup and truncation."""

    def test_clean_line_collapses_whitespace(self):
        assert clean_line("  Warm up\n\tthen   sprint  ") == "Warm up then sprint"

    def test_truncates_to_100_characters(self):
        text = "x" * 150
        bounded = bounded_line(text, "fallback")
        assert bounded == "x" * 100
        assert len(bounded) == 100

    def test_truncation_counts_characters_not_bytes(self):
        text = "é" * 120
        assert len(bounded_line(text, "fallback")) == 100

    def test_truncation_retrims_trailing_space(self):
        text = "a" * 99 + " " + "b" * 20
        assert bounded_line(text, "fallback") == "a" * 99

    def test_whitespace_uses_fallback(self):
        assert bounded_line(" \n\t  ", "Keep it simple.") == "Keep it simple."

    def test_short_text_unchanged(self):
        assert bounded_line("Hydrate now", "fallback") == "Hydrate now"


class TestRepairTips:
    def test_fills_from_fallback_in_order(self):
        tips = repair_tips(["only one", "   "], FALLBACK.tips, 120)
        assert tips == ["only one", "fallback one", "fallback two"]

    def test_synthesizes_generic_tip_when_fallback_runs_out(self):
        tips = repair_tips([], ["solo fallback"], 30)
        assert tips == [
            "solo fallback",
            "Kickoff in 30 minutes: protect freshness and execution quality",
        ]

    def test_truncates_to_three(self):
        tips = repair_tips(["1", "2", "3", "4", "5"], FALLBACK.tips, 120)
        assert tips == ["1", "2", "3"]


class TestRepairPlan:
    def test_round_trip_from_fenced_json(self):
        raw = '```json\n{"nextAction":"Hydrate now","tips":["a","b","c"]}\n```'
        result = repair_plan(raw, FALLBACK, 120)

        assert result == RecommendationResult(next_action="Hydrate now", tips=("a", "b", "c"))

    def test_blank_next_action_uses_fallback(self):
        result = repair_plan('{"nextAction": "   ", "tips": ["a", "b", "c"]}', FALLBACK, 120)
        assert result.next_action == FALLBACK.next_action
        assert result.tips == ("a", "b", "c")

    def test_malformed_returns_fallback_object(self):
        result = repair_plan('{"nextAction": "Go", "tips": ["a"', FALLBACK, 120)
        assert result is FALLBACK


class TestRepairChat:
    def test_cleans_text(self):
        assert repair_chat_text("Breathe slowly.\n\nThen  stretch.", "fallback") == "Breathe slowly. Then stretch."

    def test_no_length_cap(self):
        text = "word " * 60
        assert repair_chat_text(text, "fallback") == text.strip()

    def test_empty_uses_fallback(self):
        assert repair_chat_text("\n  \t", "Stay loose.") == "Stay loose."
