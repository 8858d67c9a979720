"""Database layer."""

from cairn.db.engine import Database
from cairn.db.models import (
    Base,
    Meeting,
    MeetingPerson,
    Person,
    Relationship,
    Setting,
)

__all__ = [
    # Engine
    "Database",
    # Models
    "Base",
    "Meeting",
    "MeetingPerson",
    "Person",
    "Relationship",
    "Setting",
]
