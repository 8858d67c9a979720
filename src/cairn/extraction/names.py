"""Regex-ensemble person-name extraction.

Each NamePattern is an independent voter: every match adds one vote for
the captured name. Candidates are ranked by votes, ties by first
appearance. The ensemble is a plain list so it can be replaced (for
example by an NER model wrapped in the same interface) without touching
callers.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from cairn.extraction.types import UNKNOWN_PERSON

# A capitalised run of one to four words on a single line
_NAME = r"[A-Z][a-z]+(?:[ \t]+[A-Z][a-z'’-]+){0,3}"
# Two to four words, for voters where a lone capitalised word is too noisy
_MULTI_NAME = r"[A-Z][a-z]+(?:[ \t]+[A-Z][a-z'’-]+){1,3}"

# Follows "Sarah Chen and David Kim" or "Ann, Bob & Carl" after a voter match
_CONTINUATION = re.compile(rf"(?:\s*,\s*(?:and\s+)?|\s+and\s+|\s*&\s*)({_NAME})")

SKIP_WORDS: frozenset[str] = frozenset(
    {
        "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
        "Sunday", "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
        "Today", "Yesterday", "Tomorrow", "Zoom", "Google", "Microsoft",
        "Apple", "Amazon", "The", "This", "That", "These", "Those", "Here",
        "There", "Had", "Got",
    }
)  # fmt: skip


@dataclass(frozen=True)
class NamePattern:
    """One voter in the name-extraction ensemble.

    ``pattern`` must capture the name in group 1. When ``continues`` is
    set, names chained after the match with commas, "and" or "&" also
    receive a vote.
    """

    label: str
    pattern: re.Pattern[str]
    continues: bool = False

    def votes(self, text: str) -> Iterable[tuple[int, str]]:
        """Yield (position, name) for every name this voter sees."""
        for match in self.pattern.finditer(text):
            yield match.start(1), match.group(1).strip()
            if not self.continues:
                continue
            end = match.end(1)
            while follow := _CONTINUATION.match(text, end):
                yield follow.start(1), follow.group(1).strip()
                end = follow.end(1)


DEFAULT_PATTERNS: tuple[NamePattern, ...] = (
    NamePattern(
        "verb_led",
        re.compile(
            r"\b(?i:with|met|saw|called|emailed|texted|messaged|visited|contacted)"
            rf"\s+({_NAME})"
        ),
        continues=True,
    ),
    NamePattern(
        "trailing_verb",
        re.compile(
            rf"({_MULTI_NAME})\s+(?:told|said|mentioned|showed|shared|offered"
            r"|suggested|introduced|asked|explained)"
        ),
    ),
    NamePattern(
        "relational_noun",
        re.compile(
            r"\b(?i:call|meeting|chat|conversation|discussion|lunch|dinner|coffee"
            r"|drinks)"
            rf"\s+(?i:with)\s+({_NAME})"
        ),
        continues=True,
    ),
    NamePattern(
        "trailing_preposition",
        re.compile(rf"({_MULTI_NAME})\s+(?:from|at|of)\s+"),
    ),
    NamePattern(
        "sentence_subject",
        re.compile(rf"(?:^|\.\s+)({_MULTI_NAME})\s+(?:and I|is|was|has)"),
    ),
)


def _accept(name: str) -> bool:
    return len(name) > 2 and name.split()[0] not in SKIP_WORDS


def _fold_partial_names(
    votes: dict[str, int], first_seen: dict[str, int]
) -> dict[str, int]:
    """Merge names whose words all belong to exactly one longer candidate.

    "Sarah" is folded into "Sarah Chen" unless "Sarah Kim" is also present.
    """
    folded = dict(votes)
    for name in sorted(votes, key=lambda n: len(n.split())):
        words = set(name.split())
        owners = [
            other
            for other in folded
            if len(other.split()) > len(words) and words <= set(other.split())
        ]
        if len(owners) == 1 and name in folded:
            owner = owners[0]
            folded[owner] += folded.pop(name)
            first_seen[owner] = min(first_seen[owner], first_seen[name])
    return folded


def extract_names(
    text: str, patterns: Sequence[NamePattern] = DEFAULT_PATTERNS
) -> list[str]:
    """Return every candidate person name, most-voted first.

    Never empty: with no candidates the result is ``["Unknown Person"]``.
    """
    votes: dict[str, int] = {}
    first_seen: dict[str, int] = {}

    for pattern in patterns:
        for position, name in pattern.votes(text):
            if not _accept(name):
                continue
            votes[name] = votes.get(name, 0) + 1
            first_seen[name] = min(first_seen.get(name, position), position)

    if not votes:
        return [UNKNOWN_PERSON]

    folded = _fold_partial_names(votes, first_seen)
    return sorted(folded, key=lambda n: (-folded[n], first_seen[n]))


def extract_primary_name(
    text: str, patterns: Sequence[NamePattern] = DEFAULT_PATTERNS
) -> str:
    """Return the single most-voted name, or the unknown-person sentinel."""
    return extract_names(text, patterns)[0]
