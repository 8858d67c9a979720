"""Persistence for people, meetings, relationships and settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cairn.store.protocols import CRMStore
from cairn.store.relationships import canonical_pair
from cairn.store.store import Store
from cairn.store.types import MeetingRecord, PersonRecord, RelationshipRecord

if TYPE_CHECKING:
    from cairn.config.models import CairnConfig

__all__ = [
    "CRMStore",
    "MeetingRecord",
    "PersonRecord",
    "RelationshipRecord",
    "Store",
    "canonical_pair",
    "create_store",
]


async def create_store(config: CairnConfig) -> Store:
    """Connect to the configured database, creating tables if needed."""
    from cairn.db.engine import Database

    db = Database(
        database_url=config.database.url, database_path=config.database.path
    )
    await db.connect()
    await db.create_all()
    return Store(db)
