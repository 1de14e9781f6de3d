"""Immutable value types describing the game, the athlete and coaching output."""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AthleteType(str, Enum):
    """Sports the coach knows how to tailor guidance for."""

    SOCCER = "soccer"
    BASKETBALL = "basketball"
    FOOTBALL = "football"
    BASEBALL = "baseball"
    HOCKEY = "hockey"
    TENNIS = "tennis"
    RUNNER = "runner"
    COMBAT = "combat"

    @property
    def title(self) -> str:  # type: ignore[override]
        return self.value.title()


class ChatRole(str, Enum):
    ATHLETE = "athlete"
    COACH = "coach"

    @property
    def title(self) -> str:  # type: ignore[override]
        return "You" if self is ChatRole.ATHLETE else "Coach AI"


class _Value(BaseModel):
    model_config = ConfigDict(frozen=True)


class Game(_Value):
    """The tracked event. Kickoff may be in the past, present or future."""

    title: str
    kickoff_time: datetime

    @property
    def kickoff_utc(self) -> datetime:
        """Kickoff as an aware UTC datetime (naive values are treated as UTC)."""
        if self.kickoff_time.tzinfo is None:
            return self.kickoff_time.replace(tzinfo=timezone.utc)
        return self.kickoff_time.astimezone(timezone.utc)


class AthleteMetrics(_Value):
    """Current athlete state.

    Values are not range-checked here; the readiness engine clamps them and
    the HTTP schemas bound them at the caller boundary.
    """

    athlete_type: AthleteType
    sleep_hours: float
    soreness: int
    stress: int
    hydration_oz: float
    training_intensity: int


class ReadinessResult(_Value):
    score: int = Field(ge=0, le=100)
    label: str
    top_factors: tuple[str, ...] = Field(default=(), max_length=3)


class RecommendationResult(_Value):
    next_action: str
    tips: tuple[str, ...] = Field(default=(), max_length=3)


class ChatMessage(_Value):
    """One entry of a coaching conversation."""

    id: UUID = Field(default_factory=uuid4)
    role: ChatRole
    text: str
    timestamp: datetime = Field(default_factory=utc_now)
