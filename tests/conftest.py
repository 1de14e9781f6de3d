"""Pytest configuration for global fixtures and logging setup."""
from __future__ import annotations

import json
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

# Tests never talk to the real Claude API.
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ.setdefault("LOG_DIR", "logs")

from gameday.logging_config import configure_logging

configure_logging()

from gameday.config import Settings
from gameday.main import app
from gameday.models.domain import AthleteMetrics, AthleteType, Game

FIXTURES_DIR = Path(__file__).parent / "fixtures"

NOW = datetime(2025, 10, 18, 12, 0, tzinfo=timezone.utc)


class StubBackend:
    """Scriptable stand-in for a generative text backend."""

    def __init__(self, response: str | None = None, available: bool = True, error: Exception | None = None):
        self.response = response
        self.available = available
        self.error = error
        self.prompts: list[str] = []
        self.availability_checks: list[str | None] = []

    def is_available(self, locale: str | None = None) -> bool:
        self.availability_checks.append(locale)
        return self.available

    def language_for(self, locale: str | None) -> str | None:
        return "en"

    async def generate(self, prompt: str, *, system: str | None = None) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response or ""


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_game():
    def _make(minutes: float = 300, title: str = "Cup Final") -> Game:
        return Game(title=title, kickoff_time=NOW + timedelta(minutes=minutes))

    return _make


@pytest.fixture
def make_metrics():
    def _make(**overrides: Any) -> AthleteMetrics:
        values: Dict[str, Any] = {
            "athlete_type": AthleteType.SOCCER,
            "sleep_hours": 8.0,
            "soreness": 3,
            "stress": 3,
            "hydration_oz": 90.0,
            "training_intensity": 5,
        }
        values.update(overrides)
        return AthleteMetrics(**values)

    return _make


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with a configured key so the Anthropic backend reports available."""

    return Settings(
        _env_file=None,
        anthropic_api_key="test-anthropic-key",
        log_dir=tmp_path,
    )


@pytest.fixture
def stub_backend_factory():
    return StubBackend


@pytest.fixture(scope="session")
def test_client() -> TestClient:
    """Provide a FastAPI test client."""

    return TestClient(app)


@pytest.fixture(scope="session")
def plan_fixture() -> Dict[str, Any]:
    """Return a well-formed generative plan payload."""

    with (FIXTURES_DIR / "coach_plan_response.json").open("r", encoding="utf-8") as fh:
        return json.load(fh)
