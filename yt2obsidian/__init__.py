"""YouTube → Obsidian note pipeline."""
from .errors import (
    NoteError,
    InvalidReference,
    MetadataFetchError,
    NoTranscriptAvailable,
    SummaryError,
    MissingCredential,
    SummaryApiError,
    PersistenceError,
)
from .pipeline import process_youtube, ProcessResult

__all__ = [
    "NoteError",
    "InvalidReference",
    "MetadataFetchError",
    "NoTranscriptAvailable",
    "SummaryError",
    "MissingCredential",
    "SummaryApiError",
    "PersistenceError",
    "process_youtube",
    "ProcessResult",
]
