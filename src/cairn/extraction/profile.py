"""Markdown profile rendering from a profile prompt."""

import re

from cairn.extraction.topics import PROMPT_WORDS
from cairn.semantic.tokenizer import extract_keywords

_NAME_FIELD = re.compile(r"name[:\s]+([^\n,]+)", re.IGNORECASE)
_COMPANY_FIELD = re.compile(r"company[:\s]+([^\n,]+)", re.IGNORECASE)
_ROLE_FIELD = re.compile(r"role[:\s]+([^\n,]+)", re.IGNORECASE)

MAX_PROFILE_TOPICS = 6

# Field labels and request words of a profile prompt
_PROFILE_PROMPT_WORDS: frozenset[str] = frozenset(
    {
        "generate", "markdown", "profile", "contact", "name", "company",
        "role", "email", "tags", "history", "unknown", "meetings",
        "recorded", "yet",
    }
)  # fmt: skip


def _field(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    if match is None:
        return None
    return match.group(1).strip() or None


def generate_profile(prompt: str) -> str:
    """Render a markdown profile from ``name:``/``company:``/``role:`` fields.

    Key topics are the most frequent keywords of the whole prompt, which
    normally includes the person's meeting history.
    """
    name = _field(_NAME_FIELD, prompt) or "Unknown"
    company = _field(_COMPANY_FIELD, prompt)
    role = _field(_ROLE_FIELD, prompt)

    lines = [f"# {name}", ""]
    if role and company:
        lines += [f"**{role}** at {company}", ""]
    elif role:
        lines += [f"**{role}**", ""]
    elif company:
        lines += [f"Works at {company}", ""]

    keywords = [
        kw
        for kw in extract_keywords(prompt, 25)
        if kw not in PROMPT_WORDS
        and kw not in _PROFILE_PROMPT_WORDS
        and not kw[0].isdigit()
    ][:MAX_PROFILE_TOPICS]
    if keywords:
        lines.append("## Key Topics")
        lines += [f"- {kw}" for kw in keywords]
        lines.append("")

    lines += ["## Notes", "- Profile auto-generated from meeting notes", ""]
    return "\n".join(lines)
