"""Unified store facade backed by SQLAlchemy async sessions.

Implementation is split across focused mixin modules:
- people: Person CRUD
- meetings: Meeting CRUD, meeting/person links, last-contact dates
- relationships: Canonical co-mention edges
- settings: Key/value application settings
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cairn.store.meetings import MeetingOpsMixin
from cairn.store.people import PeopleOpsMixin
from cairn.store.relationships import RelationshipOpsMixin
from cairn.store.settings import SettingsOpsMixin

if TYPE_CHECKING:
    from cairn.db.engine import Database

logger = logging.getLogger(__name__)


class Store(
    PeopleOpsMixin,
    MeetingOpsMixin,
    RelationshipOpsMixin,
    SettingsOpsMixin,
):
    """CRM persistence over a connected Database.

    Every operation opens its own session, so each call commits
    independently.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    @property
    def db(self) -> Database:
        return self._db
