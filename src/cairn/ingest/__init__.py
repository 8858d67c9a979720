"""Two-phase meeting ingestion."""

from cairn.ingest.pipeline import IngestionPipeline
from cairn.ingest.types import (
    Assignment,
    ConfirmRequest,
    CreateNew,
    IngestionPreview,
    IngestionResult,
    LinkedPerson,
    LinkExisting,
    NameMatch,
)

__all__ = [
    "Assignment",
    "ConfirmRequest",
    "CreateNew",
    "IngestionPipeline",
    "IngestionPreview",
    "IngestionResult",
    "LinkExisting",
    "LinkedPerson",
    "NameMatch",
]
