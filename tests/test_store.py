"""Tests for the SQLAlchemy-backed store."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from cairn.errors import RelationshipConflictError
from cairn.semantic.embeddings import embed
from cairn.store import CRMStore, Store, canonical_pair


class TestProtocol:
    def test_store_satisfies_protocol(self, store: Store):
        assert isinstance(store, CRMStore)


class TestPeople:
    """Tests for person CRUD."""

    async def test_insert_and_get(self, store: Store):
        person = await store.insert_person(
            "  Sarah Chen ", company="Acme", tags=["ai", "infra"]
        )
        assert person.id > 0
        assert person.name == "Sarah Chen"
        assert person.tags == ["ai", "infra"]
        assert person.created_at is not None
        assert person.created_at.tzinfo is not None

        fetched = await store.get_person(person.id)
        assert fetched is not None
        assert fetched.company == "Acme"

    async def test_empty_name_rejected(self, store: Store):
        with pytest.raises(ValueError, match="must not be empty"):
            await store.insert_person("   ")

    async def test_unknown_field_rejected(self, store: Store):
        with pytest.raises(ValueError, match="Unknown person fields"):
            await store.insert_person("Ann Lee", nickname="Annie")

    async def test_embedding_round_trip(self, store: Store):
        vector = embed("robotics startup founder")
        person = await store.insert_person("Ann Lee", embedding=vector)
        assert person.embedding is not None
        assert len(person.embedding) == len(vector)
        assert person.embedding == pytest.approx(vector, abs=1e-6)

    async def test_update(self, store: Store):
        person = await store.insert_person("Ann Lee")
        updated = await store.update_person(person.id, role="CTO", context="Met once")
        assert updated is not None
        assert updated.role == "CTO"
        assert updated.context == "Met once"

    async def test_update_missing(self, store: Store):
        assert await store.update_person(999, role="CTO") is None

    async def test_list_and_find(self, store: Store):
        await store.insert_person("Ann Lee", company="Acme")
        await store.insert_person("Bob Stone", company="Globex")
        people = await store.list_people()
        assert [p.name for p in people] == ["Ann Lee", "Bob Stone"]

        found = await store.find_people_by(lambda p: p.company == "Globex")
        assert [p.name for p in found] == ["Bob Stone"]

    async def test_delete_cascades(self, store: Store):
        ann = await store.insert_person("Ann Lee")
        bob = await store.insert_person("Bob Stone")
        meeting = await store.insert_meeting("Lunch with Ann and Bob")
        await store.link_meeting_person(meeting.id, ann.id)
        await store.upsert_relationship(ann.id, bob.id)

        assert await store.delete_person(ann.id)
        assert await store.get_person(ann.id) is None
        assert await store.list_relationships() == []
        fetched = await store.get_meeting(meeting.id)
        assert fetched is not None
        assert fetched.person_ids == []

    async def test_delete_missing(self, store: Store):
        assert not await store.delete_person(999)


class TestMeetings:
    """Tests for meetings and links."""

    async def test_delete_meeting_removes_links(self, store: Store):
        ann = await store.insert_person("Ann Lee")
        meeting = await store.insert_meeting("Lunch with Ann")
        await store.link_meeting_person(meeting.id, ann.id)

        assert await store.delete_meeting(meeting.id)
        assert await store.get_meeting(meeting.id) is None
        assert await store.list_meetings(person_id=ann.id) == []
        assert await store.get_person(ann.id) is not None
        assert not await store.delete_meeting(meeting.id)

    async def test_insert_defaults(self, store: Store):
        meeting = await store.insert_meeting("Quick sync")
        assert meeting.source == "manual"
        assert meeting.topics == []
        assert meeting.embedding is None
        assert meeting.date is not None

    async def test_date_is_stored_as_utc(self, store: Store):
        local = datetime(2024, 5, 1, 9, 0, tzinfo=timezone(timedelta(hours=2)))
        meeting = await store.insert_meeting("Breakfast", date=local)
        assert meeting.date == datetime(2024, 5, 1, 7, 0, tzinfo=UTC)

    async def test_link_is_idempotent(self, store: Store):
        person = await store.insert_person("Ann Lee")
        meeting = await store.insert_meeting("Coffee")
        assert await store.link_meeting_person(meeting.id, person.id)
        assert not await store.link_meeting_person(meeting.id, person.id)

        fetched = await store.get_meeting(meeting.id)
        assert fetched is not None
        assert fetched.person_ids == [person.id]

    async def test_list_newest_first_and_by_person(self, store: Store):
        ann = await store.insert_person("Ann Lee")
        old = await store.insert_meeting("Old", date=datetime(2024, 1, 1, tzinfo=UTC))
        new = await store.insert_meeting("New", date=datetime(2024, 6, 1, tzinfo=UTC))
        await store.link_meeting_person(old.id, ann.id)

        assert [m.id for m in await store.list_meetings()] == [new.id, old.id]
        assert [m.id for m in await store.list_meetings(person_id=ann.id)] == [old.id]
        assert len(await store.list_meetings(limit=1)) == 1

    async def test_update_meeting(self, store: Store):
        meeting = await store.insert_meeting("Coffee")
        updated = await store.update_meeting(meeting.id, summary="Talked hiring")
        assert updated is not None
        assert updated.summary == "Talked hiring"

        with pytest.raises(ValueError, match="Unknown meeting fields"):
            await store.update_meeting(meeting.id, venue="Cafe")

    async def test_last_meeting_dates(self, store: Store):
        ann = await store.insert_person("Ann Lee")
        first = await store.insert_meeting("A", date=datetime(2024, 1, 1, tzinfo=UTC))
        second = await store.insert_meeting("B", date=datetime(2024, 3, 1, tzinfo=UTC))
        await store.link_meeting_person(first.id, ann.id)
        await store.link_meeting_person(second.id, ann.id)

        dates = await store.last_meeting_dates()
        assert dates == {ann.id: datetime(2024, 3, 1, tzinfo=UTC)}


class TestRelationships:
    """Tests for co-mention edges."""

    def test_canonical_pair(self):
        assert canonical_pair(5, 2) == (2, 5)
        assert canonical_pair(2, 5) == (2, 5)
        with pytest.raises(ValueError):
            canonical_pair(3, 3)

    async def test_upsert_creates_then_increments(self, store: Store):
        ann = await store.insert_person("Ann Lee")
        bob = await store.insert_person("Bob Stone")

        first = await store.upsert_relationship(bob.id, ann.id, "Lunch")
        assert first.strength == 1.0
        assert (first.person_a_id, first.person_b_id) == (ann.id, bob.id)

        second = await store.upsert_relationship(ann.id, bob.id, "Dinner")
        assert second.id == first.id
        assert second.strength == 2.0
        assert second.context == "Lunch\nDinner"

    async def test_repeated_context_not_duplicated(self, store: Store):
        ann = await store.insert_person("Ann Lee")
        bob = await store.insert_person("Bob Stone")
        await store.upsert_relationship(ann.id, bob.id, "Lunch")
        rel = await store.upsert_relationship(ann.id, bob.id, "Lunch")
        assert rel.context == "Lunch"

    async def test_get_in_either_order(self, store: Store):
        ann = await store.insert_person("Ann Lee")
        bob = await store.insert_person("Bob Stone")
        await store.upsert_relationship(ann.id, bob.id)
        rel = await store.get_relationship(bob.id, ann.id)
        assert rel is not None
        assert rel.other(ann.id) == bob.id

    async def test_list_for_person(self, store: Store):
        ann = await store.insert_person("Ann Lee")
        bob = await store.insert_person("Bob Stone")
        cal = await store.insert_person("Cal Reyes")
        await store.upsert_relationship(ann.id, bob.id)
        await store.upsert_relationship(bob.id, cal.id)
        assert len(await store.list_relationships(person_id=ann.id)) == 1
        assert len(await store.list_relationships(person_id=bob.id)) == 2

    async def test_integrity_error_maps_to_conflict(self, store: Store):
        ann = await store.insert_person("Ann Lee")
        with pytest.raises(RelationshipConflictError) as exc_info:
            await store.upsert_relationship(ann.id, 999)
        assert exc_info.value.retryable


class TestSettings:
    async def test_set_and_get(self, store: Store):
        assert await store.get_setting("llm_provider") is None
        await store.set_setting("llm_provider", "openai")
        await store.set_setting("llm_provider", "anthropic")
        assert await store.get_setting("llm_provider") == "anthropic"

    async def test_get_settings_skips_empty(self, store: Store):
        await store.set_setting("llm_provider", "openai")
        await store.set_setting("llm_model", None)
        assert await store.get_settings() == {"llm_provider": "openai"}
