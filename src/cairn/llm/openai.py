"""OpenAI provider (Responses API)."""

from __future__ import annotations

import logging
import time
from typing import Any

import openai

from cairn.llm.base import ExtractionProvider
from cairn.llm.parsing import parse_json
from cairn.llm.prompts import with_json_instruction

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"


class OpenAIProvider(ExtractionProvider):
    """OpenAI provider using the Responses API and embeddings endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        embedding_model: str | None = None,
        max_tokens: int = 1024,
        temperature: float | None = None,
    ):
        self._client = openai.AsyncOpenAI(api_key=api_key)
        self._model = model or DEFAULT_MODEL
        self._embedding_model = embedding_model or DEFAULT_EMBEDDING_MODEL
        self._max_tokens = max_tokens
        self._temperature = temperature

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    async def chat(self, prompt: str, system_prompt: str | None = None) -> str:
        kwargs: dict[str, Any] = {
            "model": self._model,
            "input": [{"role": "user", "content": prompt}],
            "max_output_tokens": self._max_tokens,
        }
        if system_prompt:
            kwargs["instructions"] = system_prompt
        if self._temperature is not None:
            kwargs["temperature"] = self._temperature

        start_time = time.monotonic()
        response = await self._client.responses.create(**kwargs)
        duration_ms = int((time.monotonic() - start_time) * 1000)

        extra: dict[str, object] = {
            "provider": "openai",
            "model": self._model,
            "duration_ms": duration_ms,
        }
        if response.usage:
            extra["tokens_in"] = response.usage.input_tokens
            extra["tokens_out"] = response.usage.output_tokens
        logger.info("llm_complete", extra=extra)

        parts: list[str] = []
        for item in response.output:
            if item.type == "message":
                for part in item.content:
                    if part.type == "output_text":
                        parts.append(part.text)
        return "".join(parts)

    async def extract_structured(
        self, prompt: str, system_prompt: str | None = None
    ) -> dict[str, Any] | list[Any]:
        text = await self.chat(prompt, with_json_instruction(system_prompt))
        return parse_json(text)

    async def embed(self, text: str) -> list[float]:
        logger.debug(
            "llm_embed", extra={"provider": "openai", "model": self._embedding_model}
        )
        response = await self._client.embeddings.create(
            model=self._embedding_model,
            input=[text],
        )
        return response.data[0].embedding
