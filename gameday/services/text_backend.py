"""Generative text backends for the coach, with a capability probe."""
from __future__ import annotations

import logging
from typing import Iterable, Protocol

from anthropic import AsyncAnthropic

from gameday.config import Settings, get_settings


logger = logging.getLogger(__name__)


class CoachBackendError(RuntimeError):
    """Raised when the backend returns a response with no usable text."""


class TextGenerationBackend(Protocol):
    """Opaque prompt-in, text-out generator."""

    def is_available(self, locale: str | None = None) -> bool:
        ...

    async def generate(self, prompt: str, *, system: str | None = None) -> str:
        ...


def resolve_language(
    locale: str | None,
    supported: Iterable[str],
    default_language: str,
) -> str | None:
    """
    Normalize a requested locale to a supported language code.

    ``"en-US"``, ``"en_us"`` and ``"EN"`` all resolve to ``"en"`` when English
    is supported. Returns None when neither the locale nor the default is
    supported.
    """
    supported_set = {item.lower() for item in supported}
    candidates: list[str] = []
    if locale and locale.strip():
        normalized = locale.strip().lower().replace("_", "-")
        candidates.append(normalized)
        if "-" in normalized:
            candidates.append(normalized.split("-")[0])
    else:
        candidates.append(default_language.strip().lower())

    for candidate in candidates:
        if candidate in supported_set:
            return candidate
    return None


class AnthropicTextBackend:
    """Claude-backed text generation.

    Availability is re-checked on every call: the backend is usable only when
    it is enabled, an API key is configured and the requested locale maps to
    a supported coach language.
    """

    def __init__(self, settings: Settings | None = None, client: AsyncAnthropic | None = None) -> None:
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> AsyncAnthropic:
        if self._client is None:
            self._client = AsyncAnthropic(
                api_key=self.settings.anthropic_api_key,
                timeout=self.settings.coach_timeout_seconds,
                max_retries=0,
            )
        return self._client

    def language_for(self, locale: str | None) -> str | None:
        return resolve_language(locale, self.settings.coach_languages, self.settings.default_language)

    def is_available(self, locale: str | None = None) -> bool:
        if not self.settings.coach_enabled:
            return False
        if not self.settings.has_anthropic_key:
            return False
        return self.language_for(locale) is not None

    async def generate(self, prompt: str, *, system: str | None = None) -> str:
        request_payload = {
            "model": self.settings.coach_model,
            "max_tokens": self.settings.coach_max_tokens,
            "temperature": self.settings.coach_temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            request_payload["system"] = system

        logger.debug("Requesting coach text | model=%s | prompt_chars=%d", self.settings.coach_model, len(prompt))
        response = await self.client.messages.create(**request_payload)

        texts = [getattr(block, "text", "") for block in (response.content or [])]
        text = "".join(part for part in texts if part)
        if not text:
            raise CoachBackendError("Claude response contained no text content")
        return text
