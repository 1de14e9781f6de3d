"""Pydantic models describing API payloads."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from gameday.models.domain import (
    AthleteMetrics,
    AthleteType,
    ChatMessage,
    Game,
    ReadinessResult,
    RecommendationResult,
)

DEFAULT_GAME_TITLE = "Upcoming Game"


class GamePayload(BaseModel):
    """Game as submitted by a client; a blank title becomes a default."""

    title: str = ""
    kickoff_time: datetime

    def to_game(self) -> Game:
        return Game(title=self.title.strip() or DEFAULT_GAME_TITLE, kickoff_time=self.kickoff_time)


class MetricsPayload(BaseModel):
    """Athlete metrics bounded at the API boundary."""

    athlete_type: AthleteType = AthleteType.SOCCER
    sleep_hours: float = Field(ge=0, le=24)
    soreness: int = Field(ge=1, le=10)
    stress: int = Field(ge=1, le=10)
    hydration_oz: float = Field(ge=0, le=400)
    training_intensity: int = Field(ge=1, le=10)

    def to_metrics(self) -> AthleteMetrics:
        return AthleteMetrics(**self.model_dump())


class EvaluationRequest(BaseModel):
    game: GamePayload
    metrics: MetricsPayload


class EvaluationResponse(BaseModel):
    """Schema for the readiness + recommendation response."""

    readiness: ReadinessResult
    recommendation: RecommendationResult
    mode: str
    minutes_to_kickoff: int
    kickoff_badge: str

    @classmethod
    def from_evaluation(cls, evaluation) -> "EvaluationResponse":
        return cls(
            readiness=evaluation.readiness,
            recommendation=evaluation.recommendation,
            mode=evaluation.mode,
            minutes_to_kickoff=evaluation.minutes_to_kickoff,
            kickoff_badge=evaluation.kickoff_badge,
        )


class ChatSessionResponse(BaseModel):
    session_id: UUID
    messages: list[ChatMessage] = []


class ChatMessageRequest(BaseModel):
    """Athlete chat message plus the context it should be answered in."""

    text: str
    game: GamePayload
    metrics: MetricsPayload


class ChatReplyResponse(BaseModel):
    session_id: UUID
    reply: ChatMessage
    messages: list[ChatMessage] = []


class WearableReadings(BaseModel):
    """Raw readings from a health-data provider; every field is optional."""

    sleep_hours: float | None = Field(None, ge=0)
    hydration_oz: float | None = Field(None, ge=0)
    hrv_ms: float | None = Field(None, ge=0)
    resting_hr: float | None = Field(None, ge=0)
    active_energy_kcal: float | None = Field(None, ge=0)


class MetricsImportRequest(BaseModel):
    """Readings to apply; with a game the athlete is re-evaluated afterwards."""

    metrics: MetricsPayload
    readings: WearableReadings
    game: GamePayload | None = None


class MetricsImportResponse(BaseModel):
    metrics: AthleteMetrics
    updated_fields: list[str] = []
    evaluation: EvaluationResponse | None = None
