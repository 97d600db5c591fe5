# permit_intel/adapters/llm/base.py
from __future__ import annotations

from typing import Protocol, Sequence

from ...domain.types import ChatTurn


class CompletionClient(Protocol):
    """One hosted-model call per invocation. Returns the reply text, nothing parsed."""

    async def complete(
        self,
        prompt: str,
        *,
        max_tokens: int,
        system: str | None = None,
        history: Sequence[ChatTurn] = (),
    ) -> str:
        raise NotImplementedError
