"""Tests for markdown profile regeneration."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

from cairn.llm.fallback import FallbackProvider
from cairn.people.profiles import (
    build_profile_prompt,
    format_meeting_history,
    regenerate_profile,
)
from cairn.store import Store
from cairn.store.types import MeetingRecord, PersonRecord

from tests.conftest import MockProvider


class TestPromptBuilding:
    def test_history_lines(self):
        meetings = [
            MeetingRecord(
                id=1,
                raw_input="raw",
                summary="Talked hiring",
                date=datetime(2024, 3, 2, tzinfo=UTC),
            ),
            MeetingRecord(id=2, raw_input="Only raw text"),
        ]
        assert format_meeting_history(meetings) == (
            "- 2024-03-02: Talked hiring\n- undated: Only raw text"
        )

    def test_prompt_includes_present_fields_only(self):
        person = PersonRecord(id=1, name="Ann Lee", company="Acme", tags=["ai"])
        prompt = build_profile_prompt(person, "")
        assert "Name: Ann Lee" in prompt
        assert "Company: Acme" in prompt
        assert "Tags: ai" in prompt
        assert "Role:" not in prompt
        assert "No meetings recorded yet." in prompt


class TestRegenerateProfile:
    """Tests for regenerate_profile()."""

    async def test_offline_profile(self, store: Store):
        person = await store.insert_person("Ann Lee", company="Acme", role="CTO")
        meeting = await store.insert_meeting(
            "Lunch with Ann", summary="Talked about robotics hiring"
        )
        await store.link_meeting_person(meeting.id, person.id)

        provider = FallbackProvider()
        updated = await regenerate_profile(store, provider, provider, person.id)

        assert updated is not None
        assert updated.profile_md is not None
        assert updated.profile_md.startswith("# Ann Lee")
        assert "**CTO** at Acme" in updated.profile_md
        assert "- robotics" in updated.profile_md
        assert updated.embedding is not None

    async def test_uses_provider_output(self, store: Store):
        person = await store.insert_person("Ann Lee")
        provider = MockProvider(chat_response="# Ann\n\nLikes robots.")
        updated = await regenerate_profile(store, provider, provider, person.id)
        assert updated is not None
        assert updated.profile_md == "# Ann\n\nLikes robots."
        assert "Name: Ann Lee" in provider.prompts[0]

    async def test_embedding_failure_still_saves_profile(self, store: Store):
        person = await store.insert_person("Ann Lee")
        embedder = MagicMock()
        embedder.embed = AsyncMock(side_effect=RuntimeError("down"))

        updated = await regenerate_profile(
            store, FallbackProvider(), embedder, person.id
        )

        assert updated is not None
        assert updated.profile_md
        assert updated.embedding is None

    async def test_missing_person(self, store: Store):
        provider = FallbackProvider()
        assert await regenerate_profile(store, provider, provider, 404) is None
