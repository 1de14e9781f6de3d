"""Sanitize and repair free-form generative coach output."""

from __future__ import annotations

import logging
from typing import Iterable

from pydantic import BaseModel, Field, ValidationError

from gameday.models.domain import RecommendationResult
from gameday.services.kickoff import time_window


logger = logging.getLogger(__name__)

MAX_LINE_LENGTH = 100
MAX_TIPS = 3
_FENCE_MARKERS = ("```json", "```JSON", "```")


class CoachPlanPayload(BaseModel):
    """Shape the generative backend is asked to return for a plan."""

    next_action: str = Field(alias="nextAction")
    tips: list[str]


def strip_code_fences(raw: str) -> str:
    """Remove markdown code-fence markers and surrounding whitespace."""
    cleaned = raw
    for marker in _FENCE_MARKERS:
        cleaned = cleaned.replace(marker, "")
    return cleaned.strip()


def _decode(text: str) -> CoachPlanPayload | None:
    try:
        return CoachPlanPayload.model_validate_json(text)
    except ValidationError:
        return None


def decode_plan_payload(raw: str) -> CoachPlanPayload | None:
    """
    Extract a plan payload from a raw backend response.

    Tries a strict decode of the fence-stripped text first, then the slice
    between the first ``{`` and the last ``}``.

    Returns:
        Parsed payload, or None when nothing usable could be decoded
    """
    cleaned = strip_code_fences(raw)

    payload = _decode(cleaned)
    if payload is not None:
        return payload

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start < 0 or end <= start:
        logger.debug("No JSON object found in coach response")
        return None

    payload = _decode(cleaned[start:end + 1])
    if payload is None:
        logger.debug("JSON object in coach response did not match the plan shape")
    return payload


def clean_line(text: str) -> str:
    """Collapse newlines, tabs and repeated spaces to single spaces and trim."""
    return " ".join(text.split())


def bounded_line(text: str, fallback: str, max_length: int = MAX_LINE_LENGTH) -> str:
    """Clean ``text``; substitute ``fallback`` when empty, truncate when too long."""
    cleaned = clean_line(text)
    if not cleaned:
        return fallback
    if len(cleaned) <= max_length:
        return cleaned
    return cleaned[:max_length].rstrip()


def repair_tips(
    candidates: Iterable[str],
    fallback_tips: Iterable[str],
    minutes_to_kickoff: int,
) -> list[str]:
    """Bound candidate tips and top up from fallback tips to exactly three where possible."""
    tips = [tip for tip in (bounded_line(candidate, "") for candidate in candidates) if tip]

    for tip in fallback_tips:
        if len(tips) >= MAX_TIPS:
            break
        tips.append(tip)

    if len(tips) < MAX_TIPS:
        tips.append(
            f"Kickoff in {time_window(minutes_to_kickoff)}: protect freshness and execution quality"
        )

    return tips[:MAX_TIPS]


def repair_plan(
    raw: str,
    fallback: RecommendationResult,
    minutes_to_kickoff: int,
) -> RecommendationResult:
    """Turn a raw backend response into a bounded plan, merged with ``fallback``."""
    payload = decode_plan_payload(raw)
    if payload is None:
        return fallback

    return RecommendationResult(
        next_action=bounded_line(payload.next_action, fallback.next_action),
        tips=tuple(repair_tips(payload.tips, fallback.tips, minutes_to_kickoff)),
    )


def repair_chat_text(raw: str, fallback: str) -> str:
    cleaned = clean_line(raw)
    return cleaned if cleaned else fallback
