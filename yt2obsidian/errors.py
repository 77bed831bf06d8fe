# yt2obsidian/errors.py
"""Errors raised by the note pipeline.

Only the summary family is recovered inside the pipeline; everything else
reaches the caller.
"""


class NoteError(Exception):
    """Base class for pipeline failures."""


class InvalidReference(NoteError, ValueError):
    """Input is neither a known YouTube URL shape nor a bare video ID."""


class MetadataFetchError(NoteError):
    """The watch page (or yt-dlp) could not deliver metadata."""


class NoTranscriptAvailable(NoteError):
    """Every language attempt, including the unconstrained one, failed."""


class SummaryError(NoteError):
    """Summarization failed; the note is written without a summary."""


class MissingCredential(SummaryError):
    pass


class SummaryApiError(SummaryError):
    pass


class PersistenceError(NoteError):
    """Writing the note to disk failed. The OSError is chained as __cause__."""
