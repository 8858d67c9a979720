"""Tests for question routing and answers."""

from datetime import UTC, datetime

import pytest

from cairn.query import (
    DateFilter,
    Intent,
    answer_query,
    date_range,
    detect_intent,
)
from cairn.store import Store

NOW = datetime(2024, 6, 12, 15, 30, tzinfo=UTC)


class TestDetectIntent:
    @pytest.mark.parametrize(
        ("query", "stat"),
        [
            ("How many contacts do I have?", "people_count"),
            ("how many people are in here", "people_count"),
            ("How many meetings this year", "meeting_count"),
            ("give me an overview", "overview"),
            ("summary of my CRM", "overview"),
        ],
    )
    def test_stats(self, query, stat):
        parsed = detect_intent(query)
        assert parsed.intent is Intent.STATS
        assert parsed.stat == stat

    def test_company(self):
        parsed = detect_intent("Who works at Acme?")
        assert parsed.intent is Intent.COMPANY_SEARCH
        assert parsed.subject == "acme"

    def test_topic_with_date_filter(self):
        parsed = detect_intent("meetings about hiring last month")
        assert parsed.intent is Intent.TOPIC_SEARCH
        assert parsed.subject == "hiring"
        assert parsed.date_filter is DateFilter.LAST_MONTH

    def test_topic_without_date_filter(self):
        parsed = detect_intent("Meetings regarding GPU budgets")
        assert parsed.subject == "gpu budgets"
        assert parsed.date_filter is DateFilter.ALL

    def test_recent(self):
        assert detect_intent("show my recent meetings").intent is Intent.RECENT_MEETINGS

    @pytest.mark.parametrize(
        "query",
        [
            "When did I last talk to Sarah Chen?",
            "tell me about sarah chen",
            "What do I know about Sarah Chen",
            "who is Sarah Chen",
            "look up sarah chen",
        ],
    )
    def test_person_lookup(self, query):
        parsed = detect_intent(query)
        assert parsed.intent is Intent.PERSON_LOOKUP
        assert parsed.subject == "sarah chen"

    def test_bare_name_is_a_lookup(self):
        parsed = detect_intent("Dave Kim")
        assert parsed.intent is Intent.PERSON_LOOKUP
        assert parsed.subject == "dave kim"

    def test_question_words_are_not_a_name(self):
        assert detect_intent("why is it").intent is Intent.UNKNOWN
        parsed = detect_intent("what should I do about the offsite")
        assert parsed.intent is Intent.UNKNOWN


class TestDateRange:
    def test_all_is_unbounded(self):
        assert date_range(DateFilter.ALL, NOW) == (None, None)

    def test_today(self):
        assert date_range(DateFilter.TODAY, NOW) == (
            datetime(2024, 6, 12, tzinfo=UTC),
            None,
        )

    def test_week_starts_on_sunday(self):
        assert date_range(DateFilter.THIS_WEEK, NOW)[0] == datetime(
            2024, 6, 9, tzinfo=UTC
        )
        sunday = datetime(2024, 6, 9, 8, tzinfo=UTC)
        assert date_range(DateFilter.THIS_WEEK, sunday)[0] == datetime(
            2024, 6, 9, tzinfo=UTC
        )

    def test_this_month(self):
        assert date_range(DateFilter.THIS_MONTH, NOW)[0] == datetime(
            2024, 6, 1, tzinfo=UTC
        )

    def test_last_month_crosses_year(self):
        january = datetime(2024, 1, 15, tzinfo=UTC)
        assert date_range(DateFilter.LAST_MONTH, january) == (
            datetime(2023, 12, 1, tzinfo=UTC),
            datetime(2024, 1, 1, tzinfo=UTC),
        )


class TestAnswerQuery:
    async def test_person_lookup_reports_last_meeting(self, store: Store):
        sarah = await store.insert_person("Sarah Chen", role="CTO", company="Acme")
        await store.insert_person("Dave Kim")
        for date, summary in (
            (datetime(2024, 5, 1, tzinfo=UTC), "Intro call"),
            (datetime(2024, 6, 3, tzinfo=UTC), "GPU budget review"),
        ):
            meeting = await store.insert_meeting("Catch-up", summary=summary, date=date)
            await store.link_meeting_person(meeting.id, sarah.id)

        result = await answer_query(store, "When did I last talk to Sarah?", now=NOW)
        assert result.intent is Intent.PERSON_LOOKUP
        assert result.people[0].id == sarah.id
        assert "Sarah Chen (CTO at Acme)" in result.answer
        assert "Last met on 2024-06-03: GPU budget review" in result.answer

    async def test_person_lookup_without_match(self, store: Store):
        await store.insert_person("Sarah Chen")
        result = await answer_query(store, "who is Priya Patel", now=NOW)
        assert result.people == []
        assert "No one matching 'priya patel'" in result.answer

    async def test_company_search(self, store: Store):
        await store.insert_person("Sarah Chen", company="Acme Robotics")
        await store.insert_person("Dave Kim", company="Globex")
        result = await answer_query(store, "who works at acme", now=NOW)
        assert [p.name for p in result.people] == ["Sarah Chen"]
        assert result.answer.startswith("1 contact(s) at acme")

    async def test_topic_search_respects_date_filter(self, store: Store):
        may = await store.insert_meeting(
            "Hiring sync", topics=["hiring"], date=datetime(2024, 5, 20, tzinfo=UTC)
        )
        await store.insert_meeting(
            "Hiring sync", topics=["hiring"], date=datetime(2024, 6, 5, tzinfo=UTC)
        )
        await store.insert_meeting(
            "Budget review", topics=["budget"], date=datetime(2024, 5, 21, tzinfo=UTC)
        )

        result = await answer_query(store, "meetings about hiring last month", now=NOW)
        assert [m.id for m in result.meetings] == [may.id]

        everything = await answer_query(store, "meetings about hiring", now=NOW)
        assert len(everything.meetings) == 2

    async def test_stats(self, store: Store):
        await store.insert_person("Sarah Chen")
        await store.insert_meeting("Coffee", date=datetime(2024, 6, 10, tzinfo=UTC))
        result = await answer_query(store, "how many meetings", now=NOW)
        assert result.intent is Intent.STATS
        assert result.answer == "You have logged 1 meetings."

        overview = await answer_query(store, "overview", now=NOW)
        assert overview.answer.startswith("1 contacts, 1 meetings (1 this week)")

    async def test_recent_meetings_name_attendees(self, store: Store):
        sarah = await store.insert_person("Sarah Chen")
        meeting = await store.insert_meeting(
            "Coffee", summary="Talked GPUs", date=datetime(2024, 6, 10, tzinfo=UTC)
        )
        await store.link_meeting_person(meeting.id, sarah.id)

        result = await answer_query(store, "recent meetings", now=NOW)
        assert result.answer == "- 2024-06-10 with Sarah Chen: Talked GPUs"

    async def test_recent_meetings_empty(self, store: Store):
        result = await answer_query(store, "latest meetings", now=NOW)
        assert result.meetings == []
        assert result.answer == "No meetings recorded yet."

    async def test_unknown_falls_back_to_close_name(self, store: Store):
        sarah = await store.insert_person("Sarah Chen")
        result = await answer_query(store, "where is sarah chen working now", now=NOW)
        assert result.intent is Intent.PERSON_LOOKUP
        assert result.people[0].id == sarah.id

    async def test_unknown_without_match(self, store: Store):
        await store.insert_person("Sarah Chen")
        result = await answer_query(store, "what should I do about the offsite")
        assert result.intent is Intent.UNKNOWN
        assert result.answer.startswith("I couldn't understand that.")
