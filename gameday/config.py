"""Application configuration management."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Centralised application settings derived from environment variables."""

    anthropic_api_key: str | None = Field(
        default=None,
        description="Anthropic API key. Leave empty to run in rule-based coach mode.",
    )
    coach_enabled: bool = Field(default=True)
    coach_model: str = Field(default="claude-sonnet-4-5-20250929")
    coach_max_tokens: int = Field(default=512, ge=64, le=4096)
    coach_temperature: float = Field(default=0.3, ge=0.0, le=1.0)
    coach_timeout_seconds: float = Field(default=20.0, gt=0)
    coach_languages: list[str] = Field(
        default_factory=lambda: ["en"],
        description="Languages the generative coach is allowed to answer in.",
    )
    default_language: str = Field(default="en")
    prompt_config_path: Path = Field(default=_PACKAGE_DIR / "prompts" / "coach_prompts.yaml")

    app_host: str = Field(default="0.0.0.0")
    app_port: int = Field(default=8000, ge=1, le=65535)

    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("logs"))

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        valid = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper = value.upper()
        if upper not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(sorted(valid))}")
        return upper

    @field_validator("coach_languages")
    @classmethod
    def normalize_languages(cls, value: list[str]) -> list[str]:
        return [item.strip().lower() for item in value if item.strip()]

    @property
    def has_anthropic_key(self) -> bool:
        return bool(self.anthropic_api_key and self.anthropic_api_key.strip())


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance so it can be reused across the app."""

    settings = Settings()
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    return settings
