# yt2obsidian/transcripts.py
"""
Transcript retrieval with a short language fallback chain.

The chain is [preferred, default, secondary] (deduplicated). The first
language that yields a transcript is used; if none does, one last attempt is
made without a language constraint.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence

from youtube_transcript_api import YouTubeTranscriptApi

from .config import DEFAULT_LANG, SECONDARY_LANG
from .errors import NoTranscriptAvailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscriptSnippet:
    text: str
    start: float


@dataclass(frozen=True)
class Transcript:
    language_code: str
    language: str
    snippets: List[TranscriptSnippet] = field(default_factory=list)


class TranscriptFetcher(Protocol):
    def fetch(self, video_id: str, language: Optional[str] = None) -> Optional[Transcript]:
        ...


class YouTubeTranscriptFetcher:
    """youtube-transcript-api instance API (.fetch/.list) behind TranscriptFetcher."""

    def __init__(self, api: Optional[YouTubeTranscriptApi] = None):
        self.api = api or YouTubeTranscriptApi()

    def fetch(self, video_id: str, language: Optional[str] = None) -> Optional[Transcript]:
        if language:
            fetched = self.api.fetch(video_id, languages=[language])
        else:
            # No constraint: whatever the video lists first.
            listed = next(iter(self.api.list(video_id)), None)
            if listed is None:
                return None
            fetched = listed.fetch()
        return _normalize(fetched)


def _normalize(fetched) -> Transcript:
    return Transcript(
        language_code=fetched.language_code,
        language=fetched.language,
        snippets=[TranscriptSnippet(text=s.text, start=float(s.start)) for s in fetched.snippets],
    )


def language_priority(preferred: Optional[str] = None,
                      default: str = DEFAULT_LANG,
                      secondary: str = SECONDARY_LANG) -> List[str]:
    preferred = preferred or default
    langs = [default, secondary] if preferred == default else [preferred, default, secondary]
    return list(dict.fromkeys(langs))


def acquire_transcript(
    video_id: str,
    preferred_language: Optional[str],
    fetcher: TranscriptFetcher,
    on_progress: Optional[Callable[[str], None]] = None,
) -> Transcript:
    log = on_progress or logger.info

    transcript: Optional[Transcript] = None
    for lang in language_priority(preferred_language):
        try:
            transcript = fetcher.fetch(video_id, lang)
        except Exception as e:
            logger.debug(f"Transcript fetch failed for {video_id} ({lang}): {e}")
            transcript = None
        if transcript is not None:
            break
        log(f"No transcript for lang: {lang}, trying next...")

    if transcript is None:
        try:
            transcript = fetcher.fetch(video_id)
        except Exception as e:
            raise NoTranscriptAvailable("No transcript available for this video.") from e
        if transcript is None:
            raise NoTranscriptAvailable("No transcript available for this video.")

    log(f"Transcript found (lang: {transcript.language_code}, {transcript.language})")
    return transcript


def format_timestamp(seconds: float) -> str:
    total = int(seconds)
    h, m, s = total // 3600, (total % 3600) // 60, total % 60
    return f"{h:02d}:{m:02d}:{s:02d}" if h else f"{m:02d}:{s:02d}"


def format_lines(snippets: Sequence[TranscriptSnippet]) -> List[str]:
    return [f"[{format_timestamp(s.start)}] {s.text}" for s in snippets]


def format_transcript(transcript: Transcript) -> str:
    return "\n".join(format_lines(transcript.snippets))
