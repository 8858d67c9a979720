"""Meeting CRUD and meeting/person link mixin for Store."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, select

from cairn.db.models import Meeting, MeetingPerson
from cairn.semantic.embeddings import encode_embedding
from cairn.store.mappers import row_to_meeting
from cairn.store.types import MEETING_FIELDS, MeetingRecord, _parse_datetime

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from cairn.store.store import Store

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    """SQLite stores datetimes without an offset, so convert to UTC first."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


async def _load_person_ids(session: AsyncSession, meeting_id: int) -> list[int]:
    result = await session.execute(
        select(MeetingPerson.person_id)
        .where(MeetingPerson.meeting_id == meeting_id)
        .order_by(MeetingPerson.id)
    )
    return list(result.scalars())


class MeetingOpsMixin:
    """Meeting create, read, update and linking operations."""

    async def insert_meeting(
        self: Store,
        raw_input: str,
        summary: str | None = None,
        topics: list[str] | None = None,
        embedding: list[float] | None = None,
        date: datetime | None = None,
        source: str = "manual",
    ) -> MeetingRecord:
        values: dict[str, Any] = {
            "raw_input": raw_input,
            "summary": summary,
            "topics": list(topics or []),
            "source": source,
            "embedding": encode_embedding(embedding) if embedding else None,
        }
        if date is not None:
            values["date"] = _as_utc(date)

        async with self._db.session() as session:
            row = Meeting(**values)
            session.add(row)
            await session.flush()
            await session.refresh(row)
            meeting = row_to_meeting(row)

        logger.debug("meeting_created", extra={"meeting.id": meeting.id})
        return meeting

    async def get_meeting(self: Store, meeting_id: int) -> MeetingRecord | None:
        async with self._db.session() as session:
            row = await session.get(Meeting, meeting_id)
            if row is None:
                return None
            return row_to_meeting(row, await _load_person_ids(session, meeting_id))

    async def update_meeting(
        self: Store, meeting_id: int, **fields: Any
    ) -> MeetingRecord | None:
        unknown = set(fields) - MEETING_FIELDS
        if unknown:
            raise ValueError(f"Unknown meeting fields: {', '.join(sorted(unknown))}")
        if "embedding" in fields and fields["embedding"] is not None:
            fields["embedding"] = encode_embedding(fields["embedding"])
        if isinstance(fields.get("date"), datetime):
            fields["date"] = _as_utc(fields["date"])

        async with self._db.session() as session:
            row = await session.get(Meeting, meeting_id)
            if row is None:
                return None
            for key, value in fields.items():
                setattr(row, key, value)
            await session.flush()
            await session.refresh(row)
            return row_to_meeting(row, await _load_person_ids(session, meeting_id))

    async def delete_meeting(self: Store, meeting_id: int) -> bool:
        async with self._db.session() as session:
            result = await session.execute(
                delete(Meeting).where(Meeting.id == meeting_id)
            )
            return result.rowcount > 0

    async def list_meetings(
        self: Store, person_id: int | None = None, limit: int | None = None
    ) -> list[MeetingRecord]:
        stmt = select(Meeting).order_by(Meeting.date.desc(), Meeting.id.desc())
        if person_id is not None:
            stmt = stmt.join(
                MeetingPerson, MeetingPerson.meeting_id == Meeting.id
            ).where(MeetingPerson.person_id == person_id)
        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._db.session() as session:
            rows = list((await session.execute(stmt)).scalars())
            return [
                row_to_meeting(row, await _load_person_ids(session, row.id))
                for row in rows
            ]

    async def link_meeting_person(
        self: Store, meeting_id: int, person_id: int
    ) -> bool:
        async with self._db.session() as session:
            existing = await session.execute(
                select(MeetingPerson.id).where(
                    MeetingPerson.meeting_id == meeting_id,
                    MeetingPerson.person_id == person_id,
                )
            )
            if existing.first() is not None:
                return False
            session.add(MeetingPerson(meeting_id=meeting_id, person_id=person_id))
        return True

    async def last_meeting_dates(self: Store) -> dict[int, datetime]:
        async with self._db.session() as session:
            result = await session.execute(
                select(MeetingPerson.person_id, func.max(Meeting.date))
                .join(Meeting, Meeting.id == MeetingPerson.meeting_id)
                .group_by(MeetingPerson.person_id)
            )
            dates: dict[int, datetime] = {}
            for person_id, last in result.all():
                parsed = _parse_datetime(last)
                if parsed is not None:
                    dates[person_id] = parsed
            return dates
