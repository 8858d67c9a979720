"""Types produced by heuristic extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

UNKNOWN_PERSON = "Unknown Person"


class Intent(Enum):
    """What kind of output a prompt is asking for.

    - meeting: pull names, summary and topics out of a meeting note
    - profile: render a markdown profile for a person
    - generic: anything else, answered with a short summary
    """

    MEETING = "meeting"
    PROFILE = "profile"
    GENERIC = "generic"


@dataclass
class ExtractionResult:
    """Names, summary and topics pulled from one block of text."""

    names: list[str] = field(default_factory=lambda: [UNKNOWN_PERSON])
    summary: str = ""
    topics: list[str] = field(default_factory=list)

    @property
    def primary_name(self) -> str:
        return self.names[0] if self.names else UNKNOWN_PERSON

    def to_dict(self) -> dict[str, Any]:
        """Multi-name structured form: {"names", "summary", "topics"}."""
        return {
            "names": list(self.names),
            "summary": self.summary,
            "topics": list(self.topics),
        }

    def to_single_dict(self) -> dict[str, Any]:
        """Single-name structured form: {"name", "summary", "topics"}."""
        return {
            "name": self.primary_name,
            "summary": self.summary,
            "topics": list(self.topics),
        }

    @classmethod
    def from_structured(cls, data: Any) -> ExtractionResult:
        """Coerce provider output into a result, filling gaps with defaults.

        Accepts either the multi-name (``names``) or single-name (``name``)
        shape. Non-string entries are dropped.
        """
        if not isinstance(data, dict):
            return cls()

        raw_names = data.get("names")
        if raw_names is None and data.get("name"):
            raw_names = [data["name"]]
        names: list[str] = []
        seen: set[str] = set()
        for name in raw_names if isinstance(raw_names, list) else []:
            if isinstance(name, str) and name.strip() and name.strip() not in seen:
                seen.add(name.strip())
                names.append(name.strip())

        summary = data.get("summary")
        topics: list[str] = []
        raw_topics = data.get("topics")
        for topic in raw_topics if isinstance(raw_topics, list) else []:
            if isinstance(topic, str) and topic.strip() and topic.strip() not in topics:
                topics.append(topic.strip())

        return cls(
            names=names or [UNKNOWN_PERSON],
            summary=summary.strip() if isinstance(summary, str) else "",
            topics=topics,
        )
