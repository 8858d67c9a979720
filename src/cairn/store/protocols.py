"""Protocol definitions for the store subsystem.

The ingestion pipeline, resolver and search only ever talk to persistence
through these interfaces, so tests can substitute fakes and applications
can bring their own backend.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cairn.store.types import MeetingRecord, PersonRecord, RelationshipRecord


@runtime_checkable
class PersonStore(Protocol):
    """Protocol for person storage operations."""

    async def get_person(self, person_id: int) -> PersonRecord | None:
        """Get a person by ID."""
        ...

    async def list_people(self) -> list[PersonRecord]:
        """List all people ordered by id."""
        ...

    async def find_people_by(
        self, predicate: Callable[[PersonRecord], bool]
    ) -> list[PersonRecord]:
        """Return the people for which predicate is true."""
        ...

    async def insert_person(self, name: str, **fields: Any) -> PersonRecord:
        """Create a person."""
        ...

    async def update_person(self, person_id: int, **fields: Any) -> PersonRecord | None:
        """Update fields on a person, returning None if it does not exist."""
        ...

    async def delete_person(self, person_id: int) -> bool:
        """Delete a person and cascade to links and relationships."""
        ...


@runtime_checkable
class MeetingStore(Protocol):
    """Protocol for meeting storage operations."""

    async def insert_meeting(
        self,
        raw_input: str,
        summary: str | None = None,
        topics: list[str] | None = None,
        embedding: list[float] | None = None,
        date: datetime | None = None,
        source: str = "manual",
    ) -> MeetingRecord:
        """Create a meeting."""
        ...

    async def get_meeting(self, meeting_id: int) -> MeetingRecord | None:
        """Get a meeting by ID, with linked person ids."""
        ...

    async def update_meeting(
        self, meeting_id: int, **fields: Any
    ) -> MeetingRecord | None:
        """Update fields on a meeting."""
        ...

    async def delete_meeting(self, meeting_id: int) -> bool:
        """Delete a meeting and its person links."""
        ...

    async def list_meetings(
        self, person_id: int | None = None, limit: int | None = None
    ) -> list[MeetingRecord]:
        """List meetings, newest first, optionally for one person."""
        ...

    async def link_meeting_person(self, meeting_id: int, person_id: int) -> bool:
        """Link a person to a meeting. Returns False if already linked."""
        ...

    async def last_meeting_dates(self) -> dict[int, datetime]:
        """Map person id to the date of their most recent meeting."""
        ...


@runtime_checkable
class RelationshipStore(Protocol):
    """Protocol for co-mention relationship storage."""

    async def upsert_relationship(
        self, person_a_id: int, person_b_id: int, context_delta: str | None = None
    ) -> RelationshipRecord:
        """Increment strength of the pair's edge, creating it at strength 1."""
        ...

    async def get_relationship(
        self, person_a_id: int, person_b_id: int
    ) -> RelationshipRecord | None:
        """Get the edge between two people in either order."""
        ...

    async def list_relationships(
        self, person_id: int | None = None
    ) -> list[RelationshipRecord]:
        """List edges, optionally those touching one person."""
        ...


@runtime_checkable
class SettingsStore(Protocol):
    """Protocol for key/value settings."""

    async def get_setting(self, key: str) -> str | None: ...

    async def set_setting(self, key: str, value: str | None) -> None: ...

    async def get_settings(self) -> dict[str, str]: ...


@runtime_checkable
class CRMStore(PersonStore, MeetingStore, RelationshipStore, SettingsStore, Protocol):
    """Everything the ingestion core needs from persistence."""
