"""Types for the two-phase ingestion protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from cairn.extraction.types import UNKNOWN_PERSON, ExtractionResult
from cairn.people.resolver import MatchCandidate, Resolution


@dataclass(frozen=True)
class LinkExisting:
    """Attach the meeting to a known person."""

    person_id: int


@dataclass(frozen=True)
class CreateNew:
    """Create a new person for the mention."""

    name: str


Assignment = LinkExisting | CreateNew


@dataclass
class NameMatch:
    """Resolver output for one extracted name."""

    extracted_name: str
    candidates: list[MatchCandidate] = field(default_factory=list)
    best: MatchCandidate | None = None

    @classmethod
    def from_resolution(cls, resolution: Resolution) -> NameMatch:
        return cls(
            extracted_name=resolution.name,
            candidates=list(resolution.candidates),
            best=resolution.best,
        )

    def auto_assignment(self) -> Assignment:
        """Link to the accepted match, otherwise create a new person."""
        if self.best is not None:
            return LinkExisting(self.best.person_id)
        return CreateNew(self.extracted_name)


@dataclass
class ConfirmRequest:
    """Caller-approved extraction plus one assignment per mention."""

    text: str
    summary: str
    topics: list[str]
    assignments: list[Assignment]
    date: datetime | None = None
    source: str = "manual"
    # Fingerprint computed during preview; recomputed when absent
    embedding: list[float] | None = None


@dataclass
class IngestionPreview:
    """Phase one result. Nothing has been written yet."""

    text: str
    extraction: ExtractionResult
    matches: list[NameMatch]
    owner_mentions: list[str] = field(default_factory=list)
    embedding: list[float] | None = None

    def auto_assignments(self) -> list[Assignment]:
        return [match.auto_assignment() for match in self.matches]

    def to_confirm_request(
        self,
        assignments: list[Assignment] | None = None,
        date: datetime | None = None,
        source: str = "manual",
    ) -> ConfirmRequest:
        """Build the confirm request, auto-assigning when none are given."""
        return ConfirmRequest(
            text=self.text,
            summary=self.extraction.summary,
            topics=list(self.extraction.topics),
            assignments=(
                list(assignments)
                if assignments is not None
                else self.auto_assignments()
            ),
            date=date,
            source=source,
            embedding=self.embedding,
        )


@dataclass(frozen=True)
class LinkedPerson:
    person_id: int
    name: str
    created: bool


@dataclass
class IngestionResult:
    """Phase two result."""

    meeting_id: int
    linked_persons: list[LinkedPerson] = field(default_factory=list)
    relationships_updated: int = 0
    summary: str = ""
    topics: list[str] = field(default_factory=list)

    @property
    def created_persons(self) -> list[LinkedPerson]:
        return [p for p in self.linked_persons if p.created]


def is_unknown_person(name: str) -> bool:
    return name.strip().lower() == UNKNOWN_PERSON.lower()
