"""Exception hierarchy for Cairn.

Heuristic components are total functions and never raise; these errors
cover the few paths that do surface to callers.
"""


class CairnError(Exception):
    """Base class for all Cairn errors."""


class StructuredOutputError(CairnError):
    """A provider returned text that could not be parsed as JSON."""

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


class RelationshipConflictError(CairnError):
    """Concurrent writers raced on the same person pair.

    Retryable: the caller may re-run the increment.
    """

    retryable = True

    def __init__(self, person_a_id: int, person_b_id: int):
        super().__init__(
            f"Conflicting relationship write for pair ({person_a_id}, {person_b_id})"
        )
        self.person_a_id = person_a_id
        self.person_b_id = person_b_id


class SelfReferenceError(CairnError):
    """A name refers to the CRM owner and cannot be resolved to a contact."""

    def __init__(self, name: str):
        super().__init__(f"'{name}' refers to the owner")
        self.name = name
