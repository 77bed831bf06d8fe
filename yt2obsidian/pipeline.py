# yt2obsidian/pipeline.py
"""
YouTube → Obsidian orchestrator.

ResolveId → FetchMetadata → AcquireTranscript → GenerateSummary (optional)
→ AssembleNote → Persist. Only summary failures are recovered; everything
else propagates to the caller unchanged.
"""
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from .config import Settings
from .errors import PersistenceError, SummaryError
from .notes import assemble_note
from .summary import Summarizer, SummaryResult
from .transcripts import (
    TranscriptFetcher,
    YouTubeTranscriptFetcher,
    acquire_transcript,
    format_transcript,
)
from .youtube import MetadataSource, canonical_url, extract_video_id, make_metadata_source

logger = logging.getLogger(__name__)
if not logger.handlers:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

ProgressSink = Callable[[str], None]


@dataclass(frozen=True)
class ProcessResult:
    title: str
    channel_name: str
    filename: str
    output_path: str
    language: str
    has_summary: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "channelName": self.channel_name,
            "filename": self.filename,
            "outputPath": self.output_path,
            "language": self.language,
            "hasSummary": self.has_summary,
        }


def _progress(on_progress: Optional[ProgressSink]) -> ProgressSink:
    if on_progress is None:
        return logger.info

    def log(msg: str) -> None:
        logger.info(msg)
        on_progress(msg)
    return log


def write_note(output_dir: Path, filename: str, markdown: str) -> Path:
    """Write (or overwrite) ``output_dir/filename``."""
    path = Path(output_dir).expanduser().resolve() / filename
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(markdown, encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"Failed to write note {path}: {e}") from e
    return path


def process_youtube(
    youtube_url: str,
    *,
    lang: Optional[str] = None,
    skip_summary: bool = False,
    output_dir: Optional[Union[str, Path]] = None,
    on_progress: Optional[ProgressSink] = None,
    settings: Optional[Settings] = None,
    metadata_source: Optional[MetadataSource] = None,
    transcript_fetcher: Optional[TranscriptFetcher] = None,
    summarizer: Optional[Summarizer] = None,
    today: Optional[date] = None,
) -> ProcessResult:
    """Main entrypoint used by the CLI, Flask and RQ.

    Raises InvalidReference, MetadataFetchError, NoTranscriptAvailable or
    PersistenceError on hard failures.
    """
    settings = settings or Settings.from_env()
    log = _progress(on_progress)
    preferred_lang = lang or settings.language
    target_dir = Path(output_dir) if output_dir else settings.output_dir

    video_id = extract_video_id(youtube_url)
    source_url = canonical_url(video_id)

    log(f"Fetching video metadata for {video_id}...")
    source = metadata_source or make_metadata_source(settings.metadata_source, timeout=settings.http_timeout)
    try:
        meta = source.fetch(video_id)
    except Exception as e:
        logger.error(f"Failed to fetch metadata: {e}")
        raise
    log(f"Title: {meta.title}")
    log(f"Channel: {meta.channel_name}")

    log(f"Fetching transcript (preferred: {preferred_lang})...")
    fetcher = transcript_fetcher or YouTubeTranscriptFetcher()
    transcript = acquire_transcript(video_id, preferred_lang, fetcher, on_progress=log)
    transcript_text = format_transcript(transcript)

    summary: Optional[SummaryResult] = None
    if not skip_summary:
        summarizer = summarizer or Summarizer(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            base_url=settings.anthropic_base_url,
            prompt=settings.summary_prompt,
        )
        log(f"Generating summary with {summarizer.model}...")
        try:
            summary = summarizer.summarize(meta.title, transcript_text)
            log("Summary generated.")
            if summary.tags:
                log(f"Tags: {', '.join(summary.tags)}")
        except SummaryError as e:
            logger.warning(f"Summary generation failed: {e}")
            if on_progress is not None:
                on_progress(f"Warning: Summary generation failed ({e}). Skipping.")
            summary = None

    note = assemble_note(meta, transcript_text, summary, source_url, today or date.today())
    path = write_note(target_dir, note.filename, note.markdown)
    log(f"Saved: {path}")

    return ProcessResult(
        title=meta.title,
        channel_name=meta.channel_name,
        filename=note.filename,
        output_path=str(path),
        language=transcript.language_code or preferred_lang,
        has_summary=note.has_summary,
    )
