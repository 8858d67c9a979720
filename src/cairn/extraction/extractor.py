"""Heuristic extractor combining names, summary and topics."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from cairn.extraction.intent import classify
from cairn.extraction.names import DEFAULT_PATTERNS, NamePattern, extract_names
from cairn.extraction.profile import generate_profile
from cairn.extraction.summary import extract_summary, meeting_text, summarize
from cairn.extraction.topics import extract_topics
from cairn.extraction.types import ExtractionResult, Intent

logger = logging.getLogger(__name__)


class HeuristicExtractor:
    """Pattern and frequency based extraction with no external services.

    All methods are total: ambiguous input degrades to the unknown-person
    sentinel, a slice of the raw text, or an empty topic list.
    """

    def __init__(self, patterns: Sequence[NamePattern] = DEFAULT_PATTERNS) -> None:
        self._patterns = tuple(patterns)

    def classify(self, text: str) -> Intent:
        return classify(text)

    def extract(self, text: str, hint: Intent | None = None) -> ExtractionResult:
        """Extract names, summary and topics from a note or meeting prompt.

        ``hint`` overrides intent classification. Non-meeting intents
        still produce a result, with a generic summary and no topics.
        """
        intent = hint or classify(text)

        if intent is Intent.MEETING:
            names = extract_names(meeting_text(text), self._patterns)
            result = ExtractionResult(
                names=names,
                summary=extract_summary(text),
                topics=extract_topics(text),
            )
        else:
            names = extract_names(text, self._patterns)
            result = ExtractionResult(names=names, summary=summarize(text), topics=[])

        logger.debug(
            "heuristic_extraction",
            extra={
                "intent": intent.value,
                "names.count": len(result.names),
                "topics.count": len(result.topics),
            },
        )
        return result

    def extract_names(self, text: str) -> list[str]:
        return extract_names(text, self._patterns)

    def extract_summary(self, text: str) -> str:
        return extract_summary(text)

    def extract_topics(self, text: str) -> list[str]:
        return extract_topics(text)

    def generate_profile(self, prompt: str) -> str:
        return generate_profile(prompt)

    def summarize(self, text: str) -> str:
        return summarize(text)
