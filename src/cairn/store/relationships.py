"""Co-mention relationship mixin for Store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError

from cairn.db.models import Relationship
from cairn.errors import RelationshipConflictError
from cairn.store.mappers import row_to_relationship
from cairn.store.types import RelationshipRecord

if TYPE_CHECKING:
    from cairn.store.store import Store

logger = logging.getLogger(__name__)


def canonical_pair(person_a_id: int, person_b_id: int) -> tuple[int, int]:
    """Order a pair so the smaller id comes first."""
    if person_a_id == person_b_id:
        raise ValueError(f"Relationship needs two distinct people, got {person_a_id}")
    return (person_a_id, person_b_id) if person_a_id < person_b_id else (
        person_b_id,
        person_a_id,
    )


def _merge_context(existing: str | None, delta: str | None) -> str | None:
    if not delta:
        return existing
    if not existing:
        return delta
    if delta in existing:
        return existing
    return f"{existing}\n{delta}"


class RelationshipOpsMixin:
    """Undirected relationship edges keyed by canonical pair."""

    async def upsert_relationship(
        self: Store,
        person_a_id: int,
        person_b_id: int,
        context_delta: str | None = None,
    ) -> RelationshipRecord:
        """Increment the pair's strength by 1, creating the edge at 1.

        Raises:
            RelationshipConflictError: A concurrent writer inserted the same
                pair first. The caller may retry.
        """
        a, b = canonical_pair(person_a_id, person_b_id)
        try:
            async with self._db.session() as session:
                result = await session.execute(
                    select(Relationship).where(
                        Relationship.person_a_id == a, Relationship.person_b_id == b
                    )
                )
                row = result.scalar_one_or_none()
                if row is None:
                    row = Relationship(
                        person_a_id=a,
                        person_b_id=b,
                        strength=1.0,
                        context=context_delta,
                    )
                    session.add(row)
                else:
                    row.strength = (row.strength or 0.0) + 1.0
                    row.context = _merge_context(row.context, context_delta)
                await session.flush()
                await session.refresh(row)
                record = row_to_relationship(row)
        except IntegrityError as e:
            logger.warning(
                "relationship_conflict", extra={"person_a_id": a, "person_b_id": b}
            )
            raise RelationshipConflictError(a, b) from e

        logger.debug(
            "relationship_upserted",
            extra={"person_a_id": a, "person_b_id": b, "strength": record.strength},
        )
        return record

    async def get_relationship(
        self: Store, person_a_id: int, person_b_id: int
    ) -> RelationshipRecord | None:
        a, b = canonical_pair(person_a_id, person_b_id)
        async with self._db.session() as session:
            result = await session.execute(
                select(Relationship).where(
                    Relationship.person_a_id == a, Relationship.person_b_id == b
                )
            )
            row = result.scalar_one_or_none()
            return row_to_relationship(row) if row else None

    async def list_relationships(
        self: Store, person_id: int | None = None
    ) -> list[RelationshipRecord]:
        stmt = select(Relationship).order_by(Relationship.id)
        if person_id is not None:
            stmt = stmt.where(
                or_(
                    Relationship.person_a_id == person_id,
                    Relationship.person_b_id == person_id,
                )
            )
        async with self._db.session() as session:
            result = await session.execute(stmt)
            return [row_to_relationship(row) for row in result.scalars()]
