"""Keyword-based intent classification for prompts."""

from cairn.extraction.types import Intent

_MEETING_VERBS = ("extract", "parse", "analyze")
_MEETING_NOUNS = ("meeting", "note", "conversation")
_PROFILE_KINDS = ("markdown", "summary", "profile")
_PROFILE_SUBJECTS = ("person", "contact")


def _mentions(text: str, words: tuple[str, ...]) -> bool:
    return any(w in text for w in words)


def classify(text: str) -> Intent:
    """Decide what a prompt is asking for. Meeting wins over profile."""
    lower = text.lower()
    if _mentions(lower, _MEETING_VERBS) and _mentions(lower, _MEETING_NOUNS):
        return Intent.MEETING
    if _mentions(lower, _PROFILE_KINDS) and _mentions(lower, _PROFILE_SUBJECTS):
        return Intent.PROFILE
    return Intent.GENERIC
