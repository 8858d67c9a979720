"""Public types for the store subsystem."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _parse_datetime(value: datetime | str | None) -> datetime | None:
    """Normalise a stored timestamp to an aware UTC datetime.

    SQLite drops tzinfo, so naive values are treated as UTC.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class PersonRecord(BaseModel):
    """A contact known to the CRM owner."""

    model_config = ConfigDict(frozen=False)

    id: int
    name: str
    phone: str | None = None
    email: str | None = None
    company: str | None = None
    role: str | None = None
    tags: list[str] = Field(default_factory=list)
    context: str | None = None
    profile_md: str | None = None
    embedding: list[float] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict without the embedding."""
        return self.model_dump(mode="json", exclude={"embedding"}, exclude_none=True)


class MeetingRecord(BaseModel):
    """One ingested meeting note."""

    id: int
    raw_input: str
    summary: str | None = None
    topics: list[str] = Field(default_factory=list)
    source: str = "manual"
    embedding: list[float] | None = None
    date: datetime | None = None
    created_at: datetime | None = None
    person_ids: list[int] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude={"embedding"}, exclude_none=True)


class RelationshipRecord(BaseModel):
    """Undirected co-mention edge, stored with person_a_id < person_b_id."""

    id: int
    person_a_id: int
    person_b_id: int
    context: str | None = None
    strength: float = 1.0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def other(self, person_id: int) -> int:
        """Return the id on the opposite end of the edge."""
        return self.person_b_id if person_id == self.person_a_id else self.person_a_id


# Fields callers may pass to insert_person / update_person
PERSON_FIELDS = frozenset(
    {
        "name",
        "phone",
        "email",
        "company",
        "role",
        "tags",
        "context",
        "profile_md",
        "embedding",
    }
)

MEETING_FIELDS = frozenset(
    {"raw_input", "summary", "topics", "source", "embedding", "date"}
)
