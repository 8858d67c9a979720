"""Anthropic Claude provider."""

from __future__ import annotations

import logging
import time
from typing import Any

import anthropic

from cairn.llm.base import ExtractionProvider
from cairn.llm.parsing import parse_json
from cairn.llm.prompts import with_json_instruction
from cairn.semantic.embeddings import embed

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class AnthropicProvider(ExtractionProvider):
    """Anthropic Messages API provider.

    Anthropic has no embeddings endpoint, so ``embed`` uses the offline
    hashing engine.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float | None = None,
    ):
        self._client = anthropic.AsyncAnthropic(api_key=api_key)
        self._model = model or DEFAULT_MODEL
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def model(self) -> str:
        return self._model

    async def chat(self, prompt: str, system_prompt: str | None = None) -> str:
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self._max_tokens,
        }
        if system_prompt:
            kwargs["system"] = system_prompt
        if self._temperature is not None:
            kwargs["temperature"] = self._temperature

        start_time = time.monotonic()
        response = await self._client.messages.create(**kwargs)
        duration_ms = int((time.monotonic() - start_time) * 1000)

        logger.info(
            "llm_complete",
            extra={
                "provider": "anthropic",
                "model": self._model,
                "duration_ms": duration_ms,
                "tokens_in": response.usage.input_tokens,
                "tokens_out": response.usage.output_tokens,
            },
        )

        return "".join(
            block.text for block in response.content if block.type == "text"
        )

    async def extract_structured(
        self, prompt: str, system_prompt: str | None = None
    ) -> dict[str, Any] | list[Any]:
        text = await self.chat(prompt, with_json_instruction(system_prompt))
        return parse_json(text)

    async def embed(self, text: str) -> list[float]:
        return embed(text)
