"""Row mappers for converting ORM rows to domain types.

Centralizes row-to-object conversion logic, including decoding of
packed embedding blobs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cairn.semantic.embeddings import decode_embedding
from cairn.store.types import (
    MeetingRecord,
    PersonRecord,
    RelationshipRecord,
    _parse_datetime,
)

if TYPE_CHECKING:
    from cairn.db.models import Meeting, Person, Relationship

logger = logging.getLogger(__name__)


def blob_to_embedding(blob: bytes | None) -> list[float] | None:
    """Decode a stored embedding, treating corrupt blobs as missing."""
    if not blob:
        return None
    try:
        return decode_embedding(blob)
    except ValueError:
        logger.warning("embedding_blob_invalid", extra={"blob_length": len(blob)})
        return None


def row_to_person(row: Person) -> PersonRecord:
    return PersonRecord(
        id=row.id,
        name=row.name,
        phone=row.phone,
        email=row.email,
        company=row.company,
        role=row.role,
        tags=list(row.tags or []),
        context=row.context,
        profile_md=row.profile_md,
        embedding=blob_to_embedding(row.embedding),
        created_at=_parse_datetime(row.created_at),
        updated_at=_parse_datetime(row.updated_at),
    )


def row_to_meeting(row: Meeting, person_ids: list[int] | None = None) -> MeetingRecord:
    """Convert a meeting row; linked person ids are loaded separately."""
    return MeetingRecord(
        id=row.id,
        raw_input=row.raw_input,
        summary=row.summary,
        topics=list(row.topics or []),
        source=row.source,
        embedding=blob_to_embedding(row.embedding),
        date=_parse_datetime(row.date),
        created_at=_parse_datetime(row.created_at),
        person_ids=person_ids or [],
    )


def row_to_relationship(row: Relationship) -> RelationshipRecord:
    return RelationshipRecord(
        id=row.id,
        person_a_id=row.person_a_id,
        person_b_id=row.person_b_id,
        context=row.context,
        strength=row.strength,
        created_at=_parse_datetime(row.created_at),
        updated_at=_parse_datetime(row.updated_at),
    )
