"""Owner-name filtering.

Extracted names sometimes refer to the CRM owner ("I", "me", the owner's
own name or chat handle). Those must never become contacts.
"""

from __future__ import annotations

from dataclasses import dataclass

# Pronouns and chat-export labels that always mean the owner
SELF_WORDS: frozenset[str] = frozenset({"you", "du", "ich", "me", "myself", "i"})


@dataclass
class OwnerMatchers:
    """Compiled matchers for owner name filtering."""

    exact: set[str]  # Exact matches (self words, full names, handles)
    parts: set[str]  # Name parts of multi-word owner names


def build_owner_matchers(owner_names: list[str] | None) -> OwnerMatchers:
    """Build matchers for detecting owner names.

    Multi-word names also match on each word of three or more characters
    ("David" or "Cramer" from "David Cramer"). Single-word names and
    handles are exact-only.
    """
    exact: set[str] = set(SELF_WORDS)
    parts: set[str] = set()

    for name in owner_names or []:
        cleaned = name.lower().strip().lstrip("@")
        if not cleaned:
            continue
        exact.add(cleaned)
        words = cleaned.split()
        if len(words) > 1:
            parts.update(word for word in words if len(word) >= 3)

    return OwnerMatchers(exact=exact, parts=parts)


def _matches_part(token: str, parts: set[str]) -> bool:
    # Whole word, or an abbreviation of one ("Dav", "A.")
    token = token.rstrip(".")
    if not token:
        return False
    return token in parts or any(part.startswith(token) for part in parts)


def is_owner_name(name: str, matchers: OwnerMatchers) -> bool:
    """Check if a name likely refers to the owner.

    Matching is word-bounded: "Samantha" is not the owner "Sam Altman".
    A single word matches an owner name part or abbreviates one ("Dav"
    for "David"). A multi-word name matches when one word is a whole
    owner part and every other word is a part or its initial
    ("David C.").
    """
    normalized = name.lower().strip().lstrip("@")

    if normalized in matchers.exact or normalized in matchers.parts:
        return True
    if not matchers.parts:
        return False

    tokens = normalized.split()
    if len(tokens) == 1:
        # Skip very short names to avoid false positives on initials
        if len(normalized) < 3:
            return False
        return any(part.startswith(normalized) for part in matchers.parts)

    if not any(t.rstrip(".") in matchers.parts for t in tokens):
        return False
    return all(_matches_part(t, matchers.parts) for t in tokens)


class OwnerNameFilter:
    """High-level check for names that refer to the CRM owner."""

    def __init__(self, owner_names: list[str] | None = None):
        self._matchers = build_owner_matchers(owner_names)

    def is_owner_reference(self, name: str) -> bool:
        return is_owner_name(name, self._matchers)

    def filter_names(self, names: list[str]) -> list[str]:
        """Drop owner references, keeping order."""
        return [n for n in names if not self.is_owner_reference(n)]

    @property
    def owner_names(self) -> set[str]:
        """Get the set of exact owner name matches."""
        return self._matchers.exact
