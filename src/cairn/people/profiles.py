"""Markdown profile regeneration for a person."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cairn.llm.prompts import PROFILE_PROMPT, PROFILE_SYSTEM_PROMPT

if TYPE_CHECKING:
    from cairn.llm.base import Embedder, ExtractionProvider
    from cairn.store.protocols import CRMStore
    from cairn.store.types import MeetingRecord, PersonRecord

logger = logging.getLogger(__name__)

NO_MEETINGS = "No meetings recorded yet."


def format_meeting_history(meetings: list[MeetingRecord]) -> str:
    """One ``- date: summary`` line per meeting, newest first."""
    lines = []
    for meeting in meetings:
        day = meeting.date.strftime("%Y-%m-%d") if meeting.date else "undated"
        lines.append(f"- {day}: {meeting.summary or meeting.raw_input}")
    return "\n".join(lines)


def build_profile_prompt(person: PersonRecord, history: str) -> str:
    details = [f"Name: {person.name}"]
    if person.company:
        details.append(f"Company: {person.company}")
    if person.role:
        details.append(f"Role: {person.role}")
    if person.email:
        details.append(f"Email: {person.email}")
    if person.tags:
        details.append(f"Tags: {', '.join(person.tags)}")
    return PROFILE_PROMPT.format(
        details="\n".join(details), meetings=history or NO_MEETINGS
    )


async def regenerate_profile(
    store: CRMStore,
    provider: ExtractionProvider,
    embedder: Embedder,
    person_id: int,
) -> PersonRecord | None:
    """Rebuild a person's markdown profile from their meeting history.

    The person's embedding is recomputed from name, company, role, tags
    and history. An embedding failure is logged and the profile is still
    saved. Returns None if the person does not exist.
    """
    person = await store.get_person(person_id)
    if person is None:
        return None

    meetings = await store.list_meetings(person_id=person_id)
    history = format_meeting_history(meetings)

    profile_md = await provider.chat(
        build_profile_prompt(person, history), PROFILE_SYSTEM_PROMPT
    )

    embedding_text = " ".join(
        part
        for part in (
            person.name,
            person.company or "",
            person.role or "",
            " ".join(person.tags),
            history,
        )
        if part
    )
    try:
        embedding = await embedder.embed(embedding_text)
    except Exception:
        logger.warning(
            "embedding_failed",
            extra={"person.id": person_id, "operation": "regenerate_profile"},
            exc_info=True,
        )
        return await store.update_person(person_id, profile_md=profile_md)

    logger.info("profile_regenerated", extra={"person.id": person_id})
    return await store.update_person(
        person_id, profile_md=profile_md, embedding=embedding
    )
