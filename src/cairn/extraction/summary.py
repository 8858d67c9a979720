"""Content isolation and extractive summaries."""

import re

# Delimiters that separate instructions from the note itself
CONTENT_MARKERS: tuple[str, ...] = (
    "meeting note:",
    "meeting text:",
    "meeting notes:",
    "note:",
    "text:",
    "input:",
    "---",
    "```",
    "here is",
    "here's the",
    "transcript:",
    "content:",
    "the following",
)

_LEADING_NOISE = re.compile(r"^[\s`\-:]+")
_IMPERATIVE_LINE = re.compile(
    r"^(extract|analyze|parse|return|provide|generate|create|output|identify"
    r"|list|find)\b",
    re.IGNORECASE,
)
_JSON_WORD = re.compile(r"\bjson\b")
_FORMAT_WORD = re.compile(r"\b(return|format|valid|object|array)\b")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")

MIN_CONTENT_LENGTH = 20
MIN_SENTENCE_LENGTH = 10
MAX_SUMMARY_LENGTH = 300


def _is_instruction(line: str) -> bool:
    lower = line.lower().strip()
    if not lower:
        return True
    if _IMPERATIVE_LINE.match(lower):
        return True
    return bool(_JSON_WORD.search(lower) and _FORMAT_WORD.search(lower))


def meeting_text(prompt: str) -> str:
    """Isolate the note content from any surrounding instructions.

    The right-most content marker wins. If what follows it is too short,
    instruction-looking lines are dropped instead. Falls back to the
    whole prompt.
    """
    lower = prompt.lower()
    best_idx = -1
    best_len = 0
    for marker in CONTENT_MARKERS:
        idx = lower.find(marker)
        if idx > best_idx:
            best_idx = idx
            best_len = len(marker)

    if best_idx != -1:
        extracted = _LEADING_NOISE.sub("", prompt[best_idx + best_len :]).strip()
        if len(extracted) > MIN_CONTENT_LENGTH:
            return extracted

    content = [line for line in prompt.split("\n") if not _is_instruction(line)]
    return "\n".join(content).strip() or prompt


def sentences(text: str) -> list[str]:
    """Split on sentence punctuation, keeping fragments over 10 characters."""
    parts = (s.strip() for s in _SENTENCE_SPLIT.split(text))
    return [s for s in parts if len(s) > MIN_SENTENCE_LENGTH]


def extract_summary(text: str) -> str:
    """First two sentences of the note, capped at 300 characters."""
    content = meeting_text(text)
    found = sentences(content)
    if not found:
        return content[:200]

    summary = ". ".join(found[:2]) + "."
    if len(summary) > MAX_SUMMARY_LENGTH:
        return summary[: MAX_SUMMARY_LENGTH - 3] + "..."
    return summary


def summarize(text: str) -> str:
    """Generic summary: the first three sentences, or the text unchanged."""
    found = sentences(text)
    if len(found) <= 3:
        return text
    return ". ".join(found[:3]) + "."
