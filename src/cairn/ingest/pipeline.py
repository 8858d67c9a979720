"""Two-phase ingestion: preview (read-only) then confirm (writes).

Name extraction is unreliable, so nothing is written until a caller has
seen the per-name candidates and chosen an assignment for each mention.
``ingest`` chains both phases with automatic assignments for callers
that trust the resolver.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from datetime import datetime
from itertools import combinations
from typing import TYPE_CHECKING

from cairn.errors import StructuredOutputError
from cairn.extraction.extractor import HeuristicExtractor
from cairn.extraction.types import UNKNOWN_PERSON, ExtractionResult, Intent
from cairn.ingest.types import (
    Assignment,
    ConfirmRequest,
    IngestionPreview,
    IngestionResult,
    LinkedPerson,
    LinkExisting,
    NameMatch,
    is_unknown_person,
)
from cairn.llm.fallback import FallbackProvider
from cairn.llm.prompts import MEETING_EXTRACTION_PROMPT, MEETING_SYSTEM_PROMPT
from cairn.people.resolver import EntityResolver
from cairn.store.relationships import canonical_pair

if TYPE_CHECKING:
    from cairn.llm.base import Embedder, ExtractionProvider
    from cairn.store.protocols import CRMStore
    from cairn.store.types import MeetingRecord, PersonRecord

logger = logging.getLogger(__name__)

MAX_NEW_PERSON_TAGS = 5
CONTEXT_SEPARATOR = "\n\n"


class IngestionPipeline:
    """Turn meeting notes into meetings, people and relationships.

    Args:
        store: Persistence backend.
        provider: Extraction provider; defaults to the offline fallback.
        embedder: Embedding provider; defaults to ``provider``.
        resolver: Entity resolver with thresholds and owner names.
    """

    def __init__(
        self,
        store: CRMStore,
        provider: ExtractionProvider | None = None,
        embedder: Embedder | None = None,
        resolver: EntityResolver | None = None,
    ) -> None:
        self._store = store
        self._provider = provider or FallbackProvider()
        self._embedder = embedder or self._provider
        self._resolver = resolver or EntityResolver()
        self._fallback_extractor = HeuristicExtractor()
        # One lock per canonical pair, dropped once no writer holds it
        self._pair_locks: weakref.WeakValueDictionary[
            tuple[int, int], asyncio.Lock
        ] = weakref.WeakValueDictionary()

    @property
    def resolver(self) -> EntityResolver:
        return self._resolver

    async def _extract(self, text: str) -> ExtractionResult:
        prompt = MEETING_EXTRACTION_PROMPT.format(text=text)
        try:
            data = await self._provider.extract_structured(
                prompt, MEETING_SYSTEM_PROMPT
            )
        except StructuredOutputError:
            logger.warning(
                "structured_output_failed",
                extra={"provider": self._provider.name},
                exc_info=True,
            )
            return self._fallback_extractor.extract(prompt, hint=Intent.MEETING)

        extraction = ExtractionResult.from_structured(data)
        if not extraction.summary:
            extraction.summary = text[:200]
        return extraction

    async def _embed(self, text: str, **log_extra: object) -> list[float] | None:
        try:
            return await self._embedder.embed(text)
        except Exception:
            logger.warning("embedding_failed", extra=log_extra, exc_info=True)
            return None

    async def preview(self, text: str) -> IngestionPreview:
        """Extract and resolve every mention without writing anything.

        Raises:
            ValueError: If text is empty.
            StructuredOutputError: Never; malformed provider output falls
                back to the offline extractor.
        """
        if not text or not text.strip():
            raise ValueError("Meeting text is required")

        extraction = await self._extract(text)

        owner_mentions = [n for n in extraction.names if self._resolver.is_self(n)]
        extraction.names = [n for n in extraction.names if n not in owner_mentions]

        embedding = await self._embed(text, operation="preview")
        roster = await self._store.list_people()

        matches: list[NameMatch] = []
        for name in extraction.names:
            # The sentinel is never merged into an earlier unknown person
            if is_unknown_person(name):
                matches.append(NameMatch(extracted_name=UNKNOWN_PERSON))
                continue
            resolution = self._resolver.resolve(
                name, roster, context_embedding=embedding
            )
            matches.append(NameMatch.from_resolution(resolution))

        logger.debug(
            "ingestion_previewed",
            extra={
                "names.count": len(matches),
                "matched.count": sum(1 for m in matches if m.best),
                "owner_mentions.count": len(owner_mentions),
            },
        )
        return IngestionPreview(
            text=text,
            extraction=extraction,
            matches=matches,
            owner_mentions=owner_mentions,
            embedding=embedding,
        )

    async def _assign(
        self, assignment: Assignment, topics: list[str]
    ) -> tuple[PersonRecord, bool] | None:
        if isinstance(assignment, LinkExisting):
            person = await self._store.get_person(assignment.person_id)
            if person is None:
                logger.warning(
                    "assignment_person_missing",
                    extra={"person.id": assignment.person_id},
                )
                return None
            return person, False

        name = assignment.name.strip() or UNKNOWN_PERSON
        if self._resolver.is_self(name):
            logger.warning(
                "assignment_owner_skipped", extra={"reason": "self_reference"}
            )
            return None
        person = await self._store.insert_person(
            name, tags=topics[:MAX_NEW_PERSON_TAGS]
        )
        return person, True

    async def _append_context(self, person: PersonRecord, summary: str) -> None:
        if not summary:
            return
        context = summary
        if person.context:
            context = f"{person.context}{CONTEXT_SEPARATOR}{summary}"
        embedding = await self._embed(
            context, operation="person_context", **{"person.id": person.id}
        )
        if embedding is None:
            await self._store.update_person(person.id, context=context)
        else:
            await self._store.update_person(
                person.id, context=context, embedding=embedding
            )

    async def _increment_relationship(
        self, person_a_id: int, person_b_id: int, context: str | None
    ) -> None:
        pair = canonical_pair(person_a_id, person_b_id)
        lock = self._pair_locks.get(pair)
        if lock is None:
            lock = asyncio.Lock()
            self._pair_locks[pair] = lock
        async with lock:
            await self._store.upsert_relationship(*pair, context_delta=context)

    async def confirm(self, request: ConfirmRequest) -> IngestionResult:
        """Write the meeting, people, links and relationships.

        Embedding failures leave vectors empty but never abort. Writes are
        not atomic as a whole; a failure part-way leaves earlier rows.

        Raises:
            ValueError: If text is empty.
            RelationshipConflictError: A concurrent writer won a race on a
                relationship row. Retryable.
        """
        if not request.text or not request.text.strip():
            raise ValueError("Meeting text is required")

        embedding = request.embedding
        if embedding is None:
            embedding = await self._embed(request.text, operation="meeting")

        meeting = await self._store.insert_meeting(
            raw_input=request.text,
            summary=request.summary,
            topics=request.topics,
            embedding=embedding,
            date=request.date,
            source=request.source,
        )

        linked: dict[int, LinkedPerson] = {}
        for assignment in request.assignments:
            assigned = await self._assign(assignment, request.topics)
            if assigned is None:
                continue
            person, created = assigned
            if person.id in linked:
                continue

            await self._store.link_meeting_person(meeting.id, person.id)
            await self._append_context(person, request.summary)
            linked[person.id] = LinkedPerson(
                person_id=person.id, name=person.name, created=created
            )

        relationships = 0
        for a, b in combinations(sorted(linked), 2):
            await self._increment_relationship(a, b, request.summary or None)
            relationships += 1

        logger.info(
            "meeting_ingested",
            extra={
                "meeting.id": meeting.id,
                "persons.count": len(linked),
                "persons.created": sum(1 for p in linked.values() if p.created),
                "relationships.count": relationships,
            },
        )
        return IngestionResult(
            meeting_id=meeting.id,
            linked_persons=list(linked.values()),
            relationships_updated=relationships,
            summary=request.summary,
            topics=list(request.topics),
        )

    async def ingest(
        self,
        text: str,
        assignments: list[Assignment] | None = None,
        date: datetime | None = None,
        source: str = "manual",
    ) -> IngestionResult:
        """Preview then confirm in one call.

        Without explicit assignments each name links to its accepted match
        or creates a new person.
        """
        preview = await self.preview(text)
        request = preview.to_confirm_request(assignments, date=date, source=source)
        return await self.confirm(request)

    async def correct_meeting_date(
        self, meeting_id: int, date: datetime
    ) -> MeetingRecord | None:
        """Move a meeting to a different date. Returns None if missing."""
        meeting = await self._store.update_meeting(meeting_id, date=date)
        if meeting is not None:
            logger.info("meeting_date_corrected", extra={"meeting.id": meeting_id})
        return meeting
