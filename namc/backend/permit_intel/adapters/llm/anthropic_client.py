# permit_intel/adapters/llm/anthropic_client.py
from __future__ import annotations

import logging
from typing import Any, Sequence

import anthropic

from ...config import Settings
from ...domain.errors import AssistantResponseError, AssistantUnavailableError, ConfigurationError
from ...domain.types import ChatTurn
from .base import CompletionClient

log = logging.getLogger(__name__)


class AnthropicCompletionClient(CompletionClient):
    """
    Thin wrapper over the Anthropic Messages API.

    Single best-effort call: SDK retries are switched off so the caller owns
    retry/fallback policy.
    """

    def __init__(self, settings: Settings, *, sdk: Any | None = None) -> None:
        if not settings.ANTHROPIC_API_KEY:
            raise ConfigurationError(
                "Claude API key not configured. Please set CLAUDE_API_KEY or ANTHROPIC_API_KEY."
            )
        self.model = settings.LLM_MODEL
        self.sdk = sdk if sdk is not None else anthropic.AsyncAnthropic(
            api_key=settings.ANTHROPIC_API_KEY,
            max_retries=0,
            timeout=float(settings.LLM_TIMEOUT_S),
        )

    async def complete(
        self,
        prompt: str,
        *,
        max_tokens: int,
        system: str | None = None,
        history: Sequence[ChatTurn] = (),
    ) -> str:
        messages = [{"role": t.role, "content": t.content} for t in history]
        messages.append({"role": "user", "content": prompt})

        kwargs: dict[str, Any] = {"model": self.model, "max_tokens": int(max_tokens), "messages": messages}
        if system:
            kwargs["system"] = system

        try:
            response = await self.sdk.messages.create(**kwargs)
        except anthropic.APIError as e:
            log.error("anthropic call failed: %s", e)
            raise AssistantUnavailableError("AI assistant unavailable") from e

        texts = [b.text for b in (response.content or []) if getattr(b, "type", None) == "text"]
        if not texts:
            raise AssistantResponseError("Could not get text response from assistant")
        return "".join(texts)
