"""Entity resolution: match an extracted name against the roster.

Every path scores names with the same token-overlap formula, so the two
acceptance thresholds are directly comparable: 0.4 accepts a shared
surname or first name between two-word names ("Sara Chen" and "Sarah
Chen" score 0.5), while 0.7 needs containment or a near-complete token
match.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from cairn.config.models import ResolverConfig
from cairn.errors import SelfReferenceError
from cairn.people.filters import OwnerNameFilter
from cairn.semantic.vectors import NumpyVectorIndex
from cairn.store.types import PersonRecord

logger = logging.getLogger(__name__)

EXACT_SCORE = 1.0
CONTAINMENT_SCORE = 0.8


def name_match_score(a: str, b: str) -> float:
    """Similarity between two person names in [0, 1].

    Case-insensitive exact match is 1.0, containment either way is 0.8,
    otherwise the number of distinct shared tokens over the longer token
    count. A repeated token is shared once.
    """
    la = a.lower().strip()
    lb = b.lower().strip()
    if not la or not lb:
        return 0.0
    if la == lb:
        return EXACT_SCORE
    if la in lb or lb in la:
        return CONTAINMENT_SCORE

    tokens_a = la.split()
    tokens_b = lb.split()
    overlap = len(set(tokens_a) & set(tokens_b))
    return overlap / max(len(tokens_a), len(tokens_b))


@dataclass(frozen=True)
class MatchCandidate:
    """A roster entry scored against an extracted name."""

    person_id: int
    name: str
    score: float


@dataclass
class Resolution:
    """Scored candidates for one name and the accepted match, if any."""

    name: str
    candidates: list[MatchCandidate] = field(default_factory=list)
    best: MatchCandidate | None = None

    @property
    def is_new(self) -> bool:
        return self.best is None


class EntityResolver:
    """Resolve extracted names to known people.

    Args:
        config: Thresholds and candidate list size.
        owner_filter: Detects names that refer to the CRM owner.
    """

    def __init__(
        self,
        config: ResolverConfig | None = None,
        owner_filter: OwnerNameFilter | None = None,
    ) -> None:
        self._config = config or ResolverConfig()
        self._owner_filter = owner_filter or OwnerNameFilter()

    @property
    def config(self) -> ResolverConfig:
        return self._config

    def is_self(self, name: str) -> bool:
        return self._owner_filter.is_owner_reference(name)

    def resolve(
        self,
        name: str,
        roster: Sequence[PersonRecord],
        threshold: float | None = None,
        context_embedding: Sequence[float] | None = None,
    ) -> Resolution:
        """Score every roster entry and accept the top one above threshold.

        Ties on name score are broken by similarity between
        ``context_embedding`` and each person's stored embedding, then by
        ascending id. Zero-score entries never appear as candidates.
        """
        if threshold is None:
            threshold = self._config.meeting_threshold

        scored = [
            (name_match_score(name, person.name), person) for person in roster
        ]
        scored = [(score, person) for score, person in scored if score > 0]

        index: NumpyVectorIndex | None = None
        if context_embedding is not None and len(scored) > 1:
            index = NumpyVectorIndex.from_items(
                (person.id, person.embedding) for _, person in scored
            )

        def sort_key(item: tuple[float, PersonRecord]) -> tuple[float, float, int]:
            score, person = item
            semantic = (
                index.similarity(person.id, context_embedding)
                if index is not None and context_embedding is not None
                else 0.0
            )
            return (-score, -semantic, person.id)

        scored.sort(key=sort_key)
        candidates = [
            MatchCandidate(person_id=person.id, name=person.name, score=score)
            for score, person in scored[: self._config.max_candidates]
        ]
        best = None
        if candidates and candidates[0].score >= threshold:
            best = candidates[0]

        logger.debug(
            "name_resolved",
            extra={
                "candidates.count": len(candidates),
                "best.person_id": best.person_id if best else None,
                "best.score": best.score if best else None,
                "threshold": threshold,
            },
        )
        return Resolution(name=name, candidates=candidates, best=best)

    def resolve_identity(
        self,
        name: str,
        roster: Sequence[PersonRecord],
        phone: str | None = None,
    ) -> MatchCandidate | None:
        """Resolve a live-channel identity (e.g. a chat participant).

        Tries an exact phone match, then an exact case-insensitive name
        match, then the fuzzy score at the stricter identity threshold.

        Raises:
            SelfReferenceError: If the name refers to the owner.
        """
        if self.is_self(name):
            raise SelfReferenceError(name)

        if phone:
            for person in roster:
                if person.phone and person.phone == phone:
                    return MatchCandidate(person.id, person.name, EXACT_SCORE)

        lowered = name.lower().strip()
        for person in roster:
            if person.name.lower().strip() == lowered:
                return MatchCandidate(person.id, person.name, EXACT_SCORE)

        threshold = self._config.identity_threshold
        return self.resolve(name, roster, threshold=threshold).best


def resolve(
    name: str, roster: Sequence[PersonRecord], threshold: float = 0.4
) -> Resolution:
    """Resolve one name with default settings and no owner names."""
    return EntityResolver().resolve(name, roster, threshold=threshold)
