"""People: owner filtering, entity resolution, profiles."""

from cairn.people.filters import SELF_WORDS, OwnerNameFilter
from cairn.people.profiles import regenerate_profile
from cairn.people.resolver import (
    EntityResolver,
    MatchCandidate,
    Resolution,
    name_match_score,
    resolve,
)

__all__ = [
    "SELF_WORDS",
    "EntityResolver",
    "MatchCandidate",
    "OwnerNameFilter",
    "Resolution",
    "name_match_score",
    "regenerate_profile",
    "resolve",
]
