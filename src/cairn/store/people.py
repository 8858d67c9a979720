"""Person CRUD mixin for Store."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, select

from cairn.db.models import Person
from cairn.semantic.embeddings import encode_embedding
from cairn.store.mappers import row_to_person
from cairn.store.types import PERSON_FIELDS, PersonRecord

if TYPE_CHECKING:
    from cairn.store.store import Store

logger = logging.getLogger(__name__)


def _column_values(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - PERSON_FIELDS
    if unknown:
        raise ValueError(f"Unknown person fields: {', '.join(sorted(unknown))}")
    values = dict(fields)
    if "embedding" in values:
        embedding = values["embedding"]
        values["embedding"] = (
            encode_embedding(embedding) if embedding is not None else None
        )
    if "tags" in values and values["tags"] is None:
        values["tags"] = []
    return values


class PeopleOpsMixin:
    """Person create, read, update, delete operations."""

    async def insert_person(self: Store, name: str, **fields: Any) -> PersonRecord:
        name = name.strip()
        if not name:
            raise ValueError("Person name must not be empty")
        values = _column_values(fields)
        values.setdefault("tags", [])

        async with self._db.session() as session:
            row = Person(name=name, **values)
            session.add(row)
            await session.flush()
            await session.refresh(row)
            person = row_to_person(row)

        logger.debug("person_created", extra={"person.id": person.id})
        return person

    async def get_person(self: Store, person_id: int) -> PersonRecord | None:
        async with self._db.session() as session:
            row = await session.get(Person, person_id)
            return row_to_person(row) if row else None

    async def list_people(self: Store) -> list[PersonRecord]:
        async with self._db.session() as session:
            result = await session.execute(select(Person).order_by(Person.id))
            return [row_to_person(row) for row in result.scalars()]

    async def find_people_by(
        self: Store, predicate: Callable[[PersonRecord], bool]
    ) -> list[PersonRecord]:
        return [p for p in await self.list_people() if predicate(p)]

    async def update_person(
        self: Store, person_id: int, **fields: Any
    ) -> PersonRecord | None:
        values = _column_values(fields)
        if "name" in values and not (values["name"] or "").strip():
            raise ValueError("Person name must not be empty")

        async with self._db.session() as session:
            row = await session.get(Person, person_id)
            if row is None:
                return None
            for key, value in values.items():
                setattr(row, key, value)
            await session.flush()
            await session.refresh(row)
            return row_to_person(row)

    async def delete_person(self: Store, person_id: int) -> bool:
        async with self._db.session() as session:
            result = await session.execute(delete(Person).where(Person.id == person_id))
            deleted = result.rowcount > 0

        if deleted:
            logger.info("person_deleted", extra={"person.id": person_id})
        return deleted
