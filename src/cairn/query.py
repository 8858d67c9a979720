"""Answer short natural-language questions about the CRM.

Questions are routed by pattern to one of a few intents, then answered
from the store without any model call:

- person_lookup: "when did I last talk to Sarah", "who is Dave Kim"
- company_search: "who works at Acme"
- topic_search: "meetings about hiring last month"
- stats: "how many contacts do I have"
- recent_meetings: "recent meetings"
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import TYPE_CHECKING

from cairn.people.resolver import name_match_score

if TYPE_CHECKING:
    from cairn.store.protocols import CRMStore
    from cairn.store.types import MeetingRecord, PersonRecord

logger = logging.getLogger(__name__)

MIN_LOOKUP_SCORE = 0.3
MIN_FALLBACK_SCORE = 0.4
RECENT_LIMIT = 5


class Intent(StrEnum):
    PERSON_LOOKUP = "person_lookup"
    COMPANY_SEARCH = "company_search"
    TOPIC_SEARCH = "topic_search"
    STATS = "stats"
    RECENT_MEETINGS = "recent_meetings"
    UNKNOWN = "unknown"


class DateFilter(StrEnum):
    ALL = "all"
    TODAY = "today"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"


@dataclass
class ParsedQuery:
    intent: Intent
    subject: str = ""
    date_filter: DateFilter = DateFilter.ALL
    stat: str | None = None


@dataclass
class QueryAnswer:
    """A plain-text answer plus the records it was built from."""

    intent: Intent
    answer: str
    people: list[PersonRecord] = field(default_factory=list)
    meetings: list[MeetingRecord] = field(default_factory=list)


_STATS_PATTERNS = [
    (re.compile(r"\bhow many (?:people|contacts)\b"), "people_count"),
    (re.compile(r"\bhow many meetings\b"), "meeting_count"),
    (
        re.compile(r"\b(?:stats|statistics|overview|summary of (?:my )?crm)\b"),
        "overview",
    ),
]
_COMPANY = re.compile(
    r"\b(?:who works at|people at|contacts at|anyone (?:at|from)|who is from)\s+(.+)"
)
_TOPIC = re.compile(r"\bmeetings?\s+(?:about|on|regarding)\s+(.+)")
_RECENT = re.compile(
    r"\b(?:recent|latest|last few)\s+meetings\b|\bwho did i (?:meet|see) recently\b"
)
_PERSON = re.compile(
    r"\b(?:when did i last (?:talk to|speak (?:to|with)|meet|see)"
    r"|tell me about|what do i know about|look up|find|who is)\s+(.+)"
)
_DATE_SUFFIXES = [
    ("this month", DateFilter.THIS_MONTH),
    ("last month", DateFilter.LAST_MONTH),
    ("this week", DateFilter.THIS_WEEK),
    ("today", DateFilter.TODAY),
]
_QUESTION_WORDS = frozenset(
    {"who", "what", "when", "where", "why", "how", "which", "did", "do", "is", "are"}
)


def _clean(subject: str) -> str:
    return subject.strip().strip("?.!").strip()


def _split_date_filter(subject: str) -> tuple[str, DateFilter]:
    for suffix, date_filter in _DATE_SUFFIXES:
        if subject.endswith(" " + suffix):
            return subject[: -len(suffix)].strip(), date_filter
    return subject, DateFilter.ALL


def detect_intent(query: str) -> ParsedQuery:
    """Classify a question. Patterns are tried in a fixed order."""
    q = query.strip().lower()

    for pattern, stat in _STATS_PATTERNS:
        if pattern.search(q):
            return ParsedQuery(Intent.STATS, stat=stat)

    if match := _COMPANY.search(q):
        return ParsedQuery(Intent.COMPANY_SEARCH, subject=_clean(match.group(1)))

    if match := _TOPIC.search(q):
        subject, date_filter = _split_date_filter(_clean(match.group(1)))
        return ParsedQuery(
            Intent.TOPIC_SEARCH, subject=subject, date_filter=date_filter
        )

    if _RECENT.search(q):
        return ParsedQuery(Intent.RECENT_MEETINGS)

    if match := _PERSON.search(q):
        return ParsedQuery(Intent.PERSON_LOOKUP, subject=_clean(match.group(1)))

    # A bare name: one to three words, none of them a question word
    words = _clean(q).split()
    if 1 <= len(words) <= 3 and not _QUESTION_WORDS & set(words):
        return ParsedQuery(Intent.PERSON_LOOKUP, subject=" ".join(words))

    return ParsedQuery(Intent.UNKNOWN, subject=_clean(q))


def date_range(
    date_filter: DateFilter, now: datetime
) -> tuple[datetime | None, datetime | None]:
    """Return the ``[start, end)`` window for a filter; ``None`` is unbounded."""
    day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    month = day.replace(day=1)
    if date_filter is DateFilter.TODAY:
        return day, None
    if date_filter is DateFilter.THIS_WEEK:
        # Weeks start on Sunday
        return day - timedelta(days=(day.weekday() + 1) % 7), None
    if date_filter is DateFilter.THIS_MONTH:
        return month, None
    if date_filter is DateFilter.LAST_MONTH:
        previous = (month - timedelta(days=1)).replace(day=1)
        return previous, month
    return None, None


def _in_range(
    meeting: MeetingRecord, start: datetime | None, end: datetime | None
) -> bool:
    if start is None and end is None:
        return True
    if meeting.date is None:
        return False
    if start is not None and meeting.date < start:
        return False
    return end is None or meeting.date < end


def _fuzzy_people(
    people: list[PersonRecord], subject: str, cutoff: float
) -> list[PersonRecord]:
    scored = [(name_match_score(subject, p.name), p) for p in people]
    scored = [(s, p) for s, p in scored if s > cutoff]
    scored.sort(key=lambda sp: (-sp[0], sp[1].id))
    return [p for _, p in scored]


def _format_day(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value else "an unknown date"


def _describe(person: PersonRecord) -> str:
    if person.role and person.company:
        return f"{person.name} ({person.role} at {person.company})"
    if person.company:
        return f"{person.name} ({person.company})"
    return person.name


async def _person_lookup(
    store: CRMStore, subject: str, cutoff: float
) -> QueryAnswer:
    matches = _fuzzy_people(await store.list_people(), subject, cutoff)
    if not matches:
        return QueryAnswer(Intent.PERSON_LOOKUP, f"No one matching '{subject}'.")

    person = matches[0]
    recent = await store.list_meetings(person_id=person.id, limit=1)
    lines = [_describe(person)]
    if person.context:
        lines.append(person.context)
    if recent:
        last = recent[0]
        line = f"Last met on {_format_day(last.date)}"
        if last.summary:
            line += f": {last.summary}"
        lines.append(line)
    else:
        lines.append("No meetings recorded.")
    if len(matches) > 1:
        lines.append("Also matched: " + ", ".join(p.name for p in matches[1:4]))
    return QueryAnswer(
        Intent.PERSON_LOOKUP, "\n".join(lines), people=matches, meetings=recent
    )


async def _company_search(store: CRMStore, subject: str) -> QueryAnswer:
    people = [
        p
        for p in await store.list_people()
        if p.company and subject in p.company.lower()
    ]
    if not people:
        return QueryAnswer(Intent.COMPANY_SEARCH, f"No contacts at '{subject}'.")
    names = ", ".join(_describe(p) for p in people)
    return QueryAnswer(
        Intent.COMPANY_SEARCH,
        f"{len(people)} contact(s) at {subject}: {names}",
        people=people,
    )


async def _topic_search(
    store: CRMStore, parsed: ParsedQuery, now: datetime
) -> QueryAnswer:
    start, end = date_range(parsed.date_filter, now)
    subject = parsed.subject
    meetings = [
        m
        for m in await store.list_meetings()
        if _in_range(m, start, end)
        and (
            any(subject in t.lower() for t in m.topics)
            or subject in (m.summary or "").lower()
            or subject in m.raw_input.lower()
        )
    ]
    if not meetings:
        return QueryAnswer(Intent.TOPIC_SEARCH, f"No meetings about '{subject}'.")
    lines = [f"{len(meetings)} meeting(s) about {subject}:"]
    lines.extend(
        f"- {_format_day(m.date)}: {m.summary or m.raw_input[:80]}" for m in meetings
    )
    return QueryAnswer(Intent.TOPIC_SEARCH, "\n".join(lines), meetings=meetings)


async def _stats(store: CRMStore, stat: str | None, now: datetime) -> QueryAnswer:
    from cairn.search import crm_stats

    result = await crm_stats(store, now=now)
    if stat == "people_count":
        answer = f"You have {result.total_contacts} contacts."
    elif stat == "meeting_count":
        answer = f"You have logged {result.total_meetings} meetings."
    else:
        answer = (
            f"{result.total_contacts} contacts, {result.total_meetings} meetings "
            f"({result.meetings_this_week} this week), "
            f"{result.total_relationships} relationships."
        )
    return QueryAnswer(Intent.STATS, answer)


async def _recent_meetings(store: CRMStore) -> QueryAnswer:
    meetings = await store.list_meetings(limit=RECENT_LIMIT)
    if not meetings:
        return QueryAnswer(Intent.RECENT_MEETINGS, "No meetings recorded yet.")
    names = {p.id: p.name for p in await store.list_people()}
    lines = []
    for m in meetings:
        who = ", ".join(names.get(pid, f"#{pid}") for pid in m.person_ids)
        line = f"- {_format_day(m.date)}"
        if who:
            line += f" with {who}"
        if m.summary:
            line += f": {m.summary}"
        lines.append(line)
    return QueryAnswer(Intent.RECENT_MEETINGS, "\n".join(lines), meetings=meetings)


async def answer_query(
    store: CRMStore, query: str, now: datetime | None = None
) -> QueryAnswer:
    """Route a question to its intent and answer it from the store.

    Unrecognised questions fall back to a stricter fuzzy name match.
    """
    now = now or datetime.now(UTC)
    parsed = detect_intent(query)
    logger.debug(
        "query_routed", extra={"intent": parsed.intent.value, "subject": parsed.subject}
    )

    if parsed.intent is Intent.STATS:
        return await _stats(store, parsed.stat, now)
    if parsed.intent is Intent.COMPANY_SEARCH:
        return await _company_search(store, parsed.subject)
    if parsed.intent is Intent.TOPIC_SEARCH:
        return await _topic_search(store, parsed, now)
    if parsed.intent is Intent.RECENT_MEETINGS:
        return await _recent_meetings(store)
    if parsed.intent is Intent.PERSON_LOOKUP:
        return await _person_lookup(store, parsed.subject, MIN_LOOKUP_SCORE)

    if parsed.subject:
        fallback = await _person_lookup(store, parsed.subject, MIN_FALLBACK_SCORE)
        if fallback.people:
            return fallback
    return QueryAnswer(
        Intent.UNKNOWN,
        "I couldn't understand that. Try 'who is <name>', 'who works at <company>', "
        "'meetings about <topic>' or 'how many contacts'.",
    )
