"""Tests for two-phase meeting ingestion."""

import asyncio
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from cairn.errors import StructuredOutputError
from cairn.extraction.types import UNKNOWN_PERSON
from cairn.ingest import CreateNew, IngestionPipeline, LinkExisting
from cairn.people import EntityResolver, OwnerNameFilter
from cairn.store import Store

from tests.conftest import MockProvider

NOTE = "Had coffee with Sarah Chen and David Kim, discussed AI infrastructure."


class TestPreview:
    """Tests for the read-only preview phase."""

    async def test_writes_nothing(self, pipeline: IngestionPipeline, store: Store):
        preview = await pipeline.preview(NOTE)
        assert [m.extracted_name for m in preview.matches] == ["Sarah Chen", "David Kim"]
        assert all(m.best is None for m in preview.matches)
        assert await store.list_people() == []
        assert await store.list_meetings() == []

    async def test_scores_existing_people(
        self, pipeline: IngestionPipeline, store: Store
    ):
        sarah = await store.insert_person("Sarah Chen")
        preview = await pipeline.preview("Coffee with Sara Chen about hiring.")
        match = preview.matches[0]
        assert match.extracted_name == "Sara Chen"
        assert match.best is not None
        assert match.best.person_id == sarah.id
        assert match.best.score == 0.5

    async def test_owner_mentions_are_reported(self, pipeline: IngestionPipeline):
        preview = await pipeline.preview("Lunch with Jordan Avery and Sarah Chen.")
        assert preview.owner_mentions == ["Jordan Avery"]
        assert [m.extracted_name for m in preview.matches] == ["Sarah Chen"]

    async def test_contact_sharing_owner_prefix_is_kept(self, store: Store):
        resolver = EntityResolver(owner_filter=OwnerNameFilter(["Sam Altman"]))
        pipeline = IngestionPipeline(store, resolver=resolver)
        preview = await pipeline.preview(
            "Lunch with Samantha Jones and Lee Park, talked about hiring."
        )
        assert preview.owner_mentions == []
        names = {m.extracted_name for m in preview.matches}
        assert names == {"Samantha Jones", "Lee Park"}

    async def test_sentinel_is_never_matched(
        self, pipeline: IngestionPipeline, store: Store
    ):
        await store.insert_person(UNKNOWN_PERSON)
        preview = await pipeline.preview("quick sync on budgets and hiring")
        assert len(preview.matches) == 1
        assert preview.matches[0].extracted_name == UNKNOWN_PERSON
        assert preview.matches[0].best is None
        assert preview.matches[0].candidates == []

    async def test_empty_text_rejected(self, pipeline: IngestionPipeline):
        with pytest.raises(ValueError, match="required"):
            await pipeline.preview("   ")

    async def test_malformed_provider_output_falls_back(
        self, store: Store, resolver: EntityResolver
    ):
        provider = MockProvider(structured=StructuredOutputError("not json"))
        pipeline = IngestionPipeline(store, provider=provider, resolver=resolver)
        preview = await pipeline.preview(NOTE)
        assert preview.extraction.names == ["Sarah Chen", "David Kim"]
        assert preview.extraction.summary

    async def test_provider_output_is_used(
        self, store: Store, resolver: EntityResolver
    ):
        provider = MockProvider(
            structured={"names": ["Ann Lee"], "summary": "", "topics": ["robotics"]}
        )
        pipeline = IngestionPipeline(store, provider=provider, resolver=resolver)
        text = "Some note about a robotics demo."
        preview = await pipeline.preview(text)
        assert preview.extraction.names == ["Ann Lee"]
        assert preview.extraction.topics == ["robotics"]
        # Empty provider summaries fall back to the start of the note
        assert preview.extraction.summary == text
        assert text in provider.prompts[0]


class TestConfirm:
    """Tests for the writing phase."""

    async def test_creates_people_meeting_and_relationship(
        self, pipeline: IngestionPipeline, store: Store
    ):
        result = await pipeline.ingest(NOTE)

        assert [p.name for p in result.linked_persons] == ["Sarah Chen", "David Kim"]
        assert len(result.created_persons) == 2
        assert result.relationships_updated == 1

        meeting = await store.get_meeting(result.meeting_id)
        assert meeting is not None
        assert meeting.raw_input == NOTE
        assert meeting.embedding is not None
        assert sorted(meeting.person_ids) == sorted(
            p.person_id for p in result.linked_persons
        )

        sarah_id, david_id = (p.person_id for p in result.linked_persons)
        relationship = await store.get_relationship(sarah_id, david_id)
        assert relationship is not None
        assert relationship.strength == 1.0

    async def test_second_meeting_links_and_strengthens(
        self, pipeline: IngestionPipeline, store: Store
    ):
        first = await pipeline.ingest(NOTE)
        second = await pipeline.ingest(NOTE)

        assert second.created_persons == []
        assert [p.person_id for p in second.linked_persons] == [
            p.person_id for p in first.linked_persons
        ]
        assert len(await store.list_people()) == 2

        sarah_id, david_id = (p.person_id for p in first.linked_persons)
        relationship = await store.get_relationship(sarah_id, david_id)
        assert relationship is not None
        assert relationship.strength == 2.0

        sarah = await store.get_person(sarah_id)
        assert sarah is not None
        assert sarah.context == f"{first.summary}\n\n{second.summary}"
        assert sarah.embedding is not None

    async def test_new_people_are_tagged_with_topics(
        self, pipeline: IngestionPipeline, store: Store
    ):
        result = await pipeline.ingest(NOTE)
        person = await store.get_person(result.linked_persons[0].person_id)
        assert person is not None
        assert person.tags == result.topics[:5]

    async def test_unknown_person_is_created_each_time(
        self, pipeline: IngestionPipeline, store: Store
    ):
        await pipeline.ingest("quick sync on budgets and hiring")
        await pipeline.ingest("another quick sync on budgets")
        people = await store.list_people()
        assert [p.name for p in people] == [UNKNOWN_PERSON, UNKNOWN_PERSON]

    async def test_owner_is_never_created(
        self, pipeline: IngestionPipeline, store: Store
    ):
        result = await pipeline.ingest("Lunch with Jordan Avery and Sarah Chen.")
        assert [p.name for p in result.linked_persons] == ["Sarah Chen"]
        assert result.relationships_updated == 0

    async def test_manual_assignments(
        self, pipeline: IngestionPipeline, store: Store
    ):
        ann = await store.insert_person("Ann Lee")
        preview = await pipeline.preview(NOTE)
        request = preview.to_confirm_request(
            [LinkExisting(ann.id), CreateNew("Bob Stone"), LinkExisting(ann.id)]
        )
        result = await pipeline.confirm(request)

        assert [p.name for p in result.linked_persons] == ["Ann Lee", "Bob Stone"]
        assert [p.created for p in result.linked_persons] == [False, True]
        assert result.relationships_updated == 1

    async def test_missing_person_assignment_is_skipped(
        self, pipeline: IngestionPipeline
    ):
        preview = await pipeline.preview(NOTE)
        result = await pipeline.confirm(preview.to_confirm_request([LinkExisting(404)]))
        assert result.linked_persons == []

    async def test_owner_create_assignment_is_skipped(
        self, pipeline: IngestionPipeline
    ):
        preview = await pipeline.preview(NOTE)
        request = preview.to_confirm_request([CreateNew("me"), CreateNew("Ann Lee")])
        result = await pipeline.confirm(request)
        assert [p.name for p in result.linked_persons] == ["Ann Lee"]

    async def test_date_and_source(self, pipeline: IngestionPipeline, store: Store):
        date = datetime(2024, 2, 14, 18, 30, tzinfo=UTC)
        result = await pipeline.ingest(NOTE, date=date, source="chat_import")
        meeting = await store.get_meeting(result.meeting_id)
        assert meeting is not None
        assert meeting.date == date
        assert meeting.source == "chat_import"

    async def test_embedding_failure_does_not_abort(
        self, store: Store, resolver: EntityResolver
    ):
        embedder = MagicMock()
        embedder.embed = AsyncMock(side_effect=RuntimeError("embedding service down"))
        pipeline = IngestionPipeline(store, embedder=embedder, resolver=resolver)

        result = await pipeline.ingest(NOTE)

        meeting = await store.get_meeting(result.meeting_id)
        assert meeting is not None
        assert meeting.embedding is None
        person = await store.get_person(result.linked_persons[0].person_id)
        assert person is not None
        assert person.embedding is None
        assert person.context == result.summary

    async def test_empty_text_rejected(self, pipeline: IngestionPipeline):
        preview = await pipeline.preview(NOTE)
        request = preview.to_confirm_request()
        request.text = ""
        with pytest.raises(ValueError):
            await pipeline.confirm(request)


class TestRelationshipLocking:
    async def test_concurrent_increments_are_serialised(
        self, pipeline: IngestionPipeline, store: Store
    ):
        ann = await store.insert_person("Ann Lee")
        bob = await store.insert_person("Bob Stone")

        await asyncio.gather(
            *(pipeline._increment_relationship(ann.id, bob.id, None) for _ in range(5))
        )

        relationship = await store.get_relationship(ann.id, bob.id)
        assert relationship is not None
        assert relationship.strength == 5.0


class TestCorrectMeetingDate:
    async def test_moves_meeting(self, pipeline: IngestionPipeline):
        result = await pipeline.ingest(NOTE)
        new_date = datetime(2023, 12, 1, tzinfo=UTC)
        meeting = await pipeline.correct_meeting_date(result.meeting_id, new_date)
        assert meeting is not None
        assert meeting.date == new_date

    async def test_missing_meeting(self, pipeline: IngestionPipeline):
        assert await pipeline.correct_meeting_date(404, datetime.now(UTC)) is None
