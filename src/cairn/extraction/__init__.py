"""Heuristic extraction of people, summaries and topics from notes."""

from cairn.extraction.extractor import HeuristicExtractor
from cairn.extraction.intent import classify
from cairn.extraction.names import (
    DEFAULT_PATTERNS,
    SKIP_WORDS,
    NamePattern,
    extract_names,
    extract_primary_name,
)
from cairn.extraction.profile import generate_profile
from cairn.extraction.summary import extract_summary, meeting_text, summarize
from cairn.extraction.topics import PROMPT_WORDS, extract_topics
from cairn.extraction.types import UNKNOWN_PERSON, ExtractionResult, Intent

__all__ = [
    "DEFAULT_PATTERNS",
    "ExtractionResult",
    "HeuristicExtractor",
    "Intent",
    "NamePattern",
    "PROMPT_WORDS",
    "SKIP_WORDS",
    "UNKNOWN_PERSON",
    "classify",
    "extract_names",
    "extract_primary_name",
    "extract_summary",
    "extract_topics",
    "generate_profile",
    "meeting_text",
    "summarize",
]
