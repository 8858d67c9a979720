"""Offline provider built on the heuristic extractor and hashed embeddings.

Needs no API key and never touches the network. Requests are routed by
classifying the system prompt and prompt together.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from cairn.extraction.extractor import HeuristicExtractor
from cairn.extraction.types import Intent
from cairn.llm.base import ExtractionProvider
from cairn.semantic.embeddings import embed

logger = logging.getLogger(__name__)


def _combined(prompt: str, system_prompt: str | None) -> str:
    return f"{system_prompt or ''}\n{prompt}"


class FallbackProvider(ExtractionProvider):
    """Heuristic stand-in for a networked model."""

    def __init__(self, extractor: HeuristicExtractor | None = None) -> None:
        self._extractor = extractor or HeuristicExtractor()

    @property
    def name(self) -> str:
        return "fallback"

    @property
    def extractor(self) -> HeuristicExtractor:
        return self._extractor

    async def chat(self, prompt: str, system_prompt: str | None = None) -> str:
        intent = self._extractor.classify(_combined(prompt, system_prompt))

        if intent is Intent.MEETING:
            result = self._extractor.extract(prompt, hint=Intent.MEETING)
            return json.dumps(result.to_single_dict())
        if intent is Intent.PROFILE:
            return self._extractor.generate_profile(prompt)
        return self._extractor.summarize(prompt)

    async def extract_structured(
        self, prompt: str, system_prompt: str | None = None
    ) -> dict[str, Any] | list[Any]:
        combined = _combined(prompt, system_prompt)
        if self._extractor.classify(combined) is not Intent.MEETING:
            return {}

        result = self._extractor.extract(prompt, hint=Intent.MEETING)
        if "names" in combined and "array" in combined:
            return result.to_dict()
        return result.to_single_dict()

    async def embed(self, text: str) -> list[float]:
        return embed(text)
