"""Keyword plus semantic search, people lookup and stale contacts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Literal

from cairn.people.resolver import name_match_score
from cairn.semantic.vectors import NumpyVectorIndex

if TYPE_CHECKING:
    from cairn.llm.base import Embedder
    from cairn.store.protocols import CRMStore
    from cairn.store.types import PersonRecord

logger = logging.getLogger(__name__)

MIN_SEARCH_SCORE = 0.1
NAME_BOOST = 0.5
MIN_PEOPLE_SCORE = 0.2
COMPANY_WEIGHT = 0.8
TAG_SCORE = 0.6
STALE_AFTER_DAYS = 30


@dataclass
class SearchHit:
    """A person or meeting matching a query."""

    kind: Literal["person", "meeting"]
    id: int
    title: str
    subtitle: str
    score: float
    person_ids: list[int] = field(default_factory=list)


@dataclass
class PersonMatch:
    person: PersonRecord
    score: float


@dataclass
class StaleContact:
    person: PersonRecord
    last_meeting: datetime
    days_since_contact: int


def keyword_score(query: str, haystack: str) -> float:
    """Share of query words that occur anywhere in the haystack."""
    words = query.split()
    if not words:
        return 0.0
    return sum(1 for w in words if w in haystack) / len(words)


async def search(
    store: CRMStore,
    embedder: Embedder | None,
    query: str,
    limit: int = 20,
) -> list[SearchHit]:
    """Rank people and meetings against a free-text query.

    Each record scores the share of query words it contains (people get
    a bonus when their name contains the whole query), raised to the
    cosine similarity of its stored embedding when that is higher.
    """
    query = query.strip().lower()
    if not query:
        return []

    query_embedding: list[float] | None = None
    if embedder is not None:
        try:
            query_embedding = await embedder.embed(query)
        except Exception:
            logger.warning(
                "embedding_failed", extra={"operation": "search"}, exc_info=True
            )

    people = await store.list_people()
    meetings = await store.list_meetings()

    person_similarity: dict[int, float] = {}
    meeting_similarity: dict[int, float] = {}
    if query_embedding is not None:
        person_index = NumpyVectorIndex.from_items(
            (p.id, p.embedding) for p in people
        )
        meeting_index = NumpyVectorIndex.from_items(
            (m.id, m.embedding) for m in meetings
        )
        person_similarity = dict(person_index.search(query_embedding, len(people)))
        meeting_similarity = dict(
            meeting_index.search(query_embedding, len(meetings))
        )

    names = {p.id: p.name for p in people}
    hits: list[SearchHit] = []

    for person in people:
        haystack = " ".join(
            part
            for part in (
                person.name,
                person.company,
                person.role,
                person.email,
                person.context,
                *person.tags,
            )
            if part
        ).lower()
        score = keyword_score(query, haystack)
        if query in person.name.lower():
            score += NAME_BOOST
        score = max(score, person_similarity.get(person.id, 0.0))
        if score > MIN_SEARCH_SCORE:
            subtitle = " at ".join(p for p in (person.role, person.company) if p)
            hits.append(
                SearchHit(
                    kind="person",
                    id=person.id,
                    title=person.name,
                    subtitle=subtitle or "Contact",
                    score=score,
                    person_ids=[person.id],
                )
            )

    for meeting in meetings:
        parts = (meeting.raw_input, meeting.summary, *meeting.topics)
        haystack = " ".join(part for part in parts if part).lower()
        score = max(
            keyword_score(query, haystack), meeting_similarity.get(meeting.id, 0.0)
        )
        if score > MIN_SEARCH_SCORE:
            attendees = [names[pid] for pid in meeting.person_ids if pid in names]
            if attendees:
                subtitle = f"Meeting with {', '.join(attendees)}"
            elif meeting.date:
                subtitle = f"Meeting on {meeting.date:%Y-%m-%d}"
            else:
                subtitle = "Meeting"
            hits.append(
                SearchHit(
                    kind="meeting",
                    id=meeting.id,
                    title=meeting.summary or meeting.raw_input[:100],
                    subtitle=subtitle,
                    score=score,
                    person_ids=list(meeting.person_ids),
                )
            )

    hits.sort(key=lambda h: h.score, reverse=True)
    return hits[:limit]


async def find_people(
    store: CRMStore, query: str, limit: int = 10
) -> list[PersonMatch]:
    """Look people up by name, company or tag.

    An empty query lists everyone, unscored.
    """
    people = await store.list_people()
    q = query.strip().lower()
    if not q:
        return [PersonMatch(person=p, score=0.0) for p in people[:limit]]

    matches: list[PersonMatch] = []
    for person in people:
        name_score = name_match_score(q, person.name)
        company_score = (
            name_match_score(q, person.company) * COMPANY_WEIGHT
            if person.company
            else 0.0
        )
        tag_score = TAG_SCORE if any(q in t.lower() for t in person.tags) else 0.0
        score = max(name_score, company_score, tag_score)
        if score > MIN_PEOPLE_SCORE:
            matches.append(PersonMatch(person=person, score=score))

    matches.sort(key=lambda m: (-m.score, m.person.id))
    return matches[:limit]


async def stale_contacts(
    store: CRMStore,
    days: int = STALE_AFTER_DAYS,
    now: datetime | None = None,
) -> list[StaleContact]:
    """People whose most recent meeting is older than ``days``, oldest first.

    People with no meetings at all are not included.
    """
    now = now or datetime.now(UTC)
    cutoff = now - timedelta(days=days)
    last_dates = await store.last_meeting_dates()

    stale: list[StaleContact] = []
    for person in await store.list_people():
        last = last_dates.get(person.id)
        if last is None or last >= cutoff:
            continue
        stale.append(
            StaleContact(
                person=person,
                last_meeting=last,
                days_since_contact=(now - last).days,
            )
        )

    stale.sort(key=lambda s: s.last_meeting)
    return stale


@dataclass
class CRMStats:
    """Dashboard counters."""

    total_contacts: int
    total_meetings: int
    meetings_this_week: int
    total_relationships: int
    tags: list[str] = field(default_factory=list)


async def crm_stats(store: CRMStore, now: datetime | None = None) -> CRMStats:
    """Count contacts, meetings and relationships, and collect every tag."""
    now = now or datetime.now(UTC)
    week_ago = now - timedelta(days=7)
    people = await store.list_people()
    meetings = await store.list_meetings()
    relationships = await store.list_relationships()

    tags: list[str] = []
    for person in people:
        for tag in person.tags:
            if tag not in tags:
                tags.append(tag)

    return CRMStats(
        total_contacts=len(people),
        total_meetings=len(meetings),
        meetings_this_week=sum(
            1 for m in meetings if m.date is not None and m.date >= week_ago
        ),
        total_relationships=len(relationships),
        tags=tags,
    )
