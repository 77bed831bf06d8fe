"""
End-to-end tests for process_youtube with fake collaborators.
"""
import logging
from datetime import date
from unittest.mock import MagicMock

import pytest

from yt2obsidian.errors import (
    InvalidReference,
    MetadataFetchError,
    NoTranscriptAvailable,
    PersistenceError,
    SummaryApiError,
)
from yt2obsidian.pipeline import ProcessResult, process_youtube
from yt2obsidian.summary import Summarizer
from yt2obsidian.youtube import VideoMeta

from conftest import FakeMetadataSource, FakeSummarizer, FakeTranscriptFetcher, make_transcript

URL = "https://youtu.be/dQw4w9WgXcQ"


@pytest.fixture
def source(video_meta):
    return FakeMetadataSource(video_meta)


@pytest.fixture
def fetcher():
    return FakeTranscriptFetcher({"ja": make_transcript()})


def _run(settings, source, fetcher, summarizer=None, **kwargs):
    progress = []
    result = process_youtube(
        URL,
        settings=settings,
        metadata_source=source,
        transcript_fetcher=fetcher,
        summarizer=summarizer,
        on_progress=progress.append,
        today=date(2024, 4, 1),
        **kwargs,
    )
    return result, progress


def test_process_writes_note(settings, source, fetcher, structured_summary):
    summarizer = FakeSummarizer(structured_summary)

    result, progress = _run(settings, source, fetcher, summarizer)

    path = settings.output_dir / "Test Video 1.md"
    assert result == ProcessResult(
        title="Test: Video #1",
        channel_name="Test Channel",
        filename="Test Video 1.md",
        output_path=str(path.resolve()),
        language="ja",
        has_summary=True,
    )
    text = path.read_text(encoding="utf-8")
    assert text.startswith('---\ntitle: "Test: Video #1"\nsource: "https://www.youtube.com/watch?v=dQw4w9WgXcQ"\n')
    assert "## Summary\n\n- point one\n- point two\n" in text
    assert text.endswith("## Transcript\n\n[00:00] hello\n[01:05] world\n")
    assert source.calls == ["dQw4w9WgXcQ"]
    assert summarizer.calls == [("Test: Video #1", "[00:00] hello\n[01:05] world")]
    assert progress[0] == "Fetching video metadata for dQw4w9WgXcQ..."
    assert "Tags: ai, testing" in progress
    assert progress[-1] == f"Saved: {path.resolve()}"


def test_language_reports_fallback_not_preference(settings, source, fetcher):
    result, progress = _run(settings, source, fetcher, lang="en", skip_summary=True)

    assert result.language == "ja"
    assert fetcher.calls == ["en", "ja"]
    assert "No transcript for lang: en, trying next..." in progress


def test_skip_summary(settings, source, fetcher):
    summarizer = FakeSummarizer()

    result, _ = _run(settings, source, fetcher, summarizer, skip_summary=True)

    assert summarizer.calls == []
    assert result.has_summary is False
    assert "## Summary" not in (settings.output_dir / result.filename).read_text(encoding="utf-8")


def test_summary_failure_degrades(settings, source, fetcher):
    summarizer = FakeSummarizer(error=SummaryApiError("Anthropic API error: 500"))

    result, progress = _run(settings, source, fetcher, summarizer)

    assert result.has_summary is False
    assert any(line.startswith("Warning: Summary generation failed") for line in progress)
    text = (settings.output_dir / result.filename).read_text(encoding="utf-8")
    assert "## Summary" not in text
    assert "## Transcript" in text


def test_missing_credential_degrades(settings, source, fetcher):
    session = MagicMock()
    summarizer = Summarizer(api_key=None, session=session)

    result, progress = _run(settings, source, fetcher, summarizer)

    assert result.has_summary is False
    session.post.assert_not_called()
    assert any("ANTHROPIC_API_KEY" in line for line in progress)


def test_invalid_reference_does_no_io(settings, source, fetcher):
    with pytest.raises(InvalidReference):
        process_youtube("https://example.com/video", settings=settings,
                        metadata_source=source, transcript_fetcher=fetcher)
    assert source.calls == []
    assert fetcher.calls == []


def test_metadata_error_propagates(settings, fetcher):
    source = MagicMock()
    source.fetch.side_effect = MetadataFetchError("Failed to fetch YouTube page: 500")

    with pytest.raises(MetadataFetchError):
        _run(settings, source, fetcher)
    assert fetcher.calls == []


def test_no_transcript_aborts(settings, source):
    with pytest.raises(NoTranscriptAvailable):
        _run(settings, source, FakeTranscriptFetcher({}), FakeSummarizer())
    assert not settings.output_dir.exists()


def test_persistence_error(settings, source, fetcher, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")

    with pytest.raises(PersistenceError) as excinfo:
        _run(settings, source, fetcher, skip_summary=True, output_dir=blocker)
    assert isinstance(excinfo.value.__cause__, OSError)


def test_overwrites_existing_note(settings, source, fetcher):
    settings.output_dir.mkdir(parents=True)
    existing = settings.output_dir / "Test Video 1.md"
    existing.write_text("old", encoding="utf-8")

    _run(settings, source, fetcher, skip_summary=True)

    assert existing.read_text(encoding="utf-8").startswith("---\n")
    assert sorted(p.name for p in settings.output_dir.iterdir()) == ["Test Video 1.md"]


def test_result_to_dict(settings, source, fetcher):
    result, _ = _run(settings, source, fetcher, skip_summary=True)

    assert result.to_dict() == {
        "title": "Test: Video #1",
        "channelName": "Test Channel",
        "filename": "Test Video 1.md",
        "outputPath": result.output_path,
        "language": "ja",
        "hasSummary": False,
    }


def test_long_japanese_title_is_written(settings, fetcher):
    meta = VideoMeta(title="日本語の長いタイトル" * 9, channel_name="チャンネル")
    result, _ = _run(settings, FakeMetadataSource(meta), fetcher, skip_summary=True)

    assert len(result.filename.encode("utf-8")) <= 255
    assert (settings.output_dir / result.filename).exists()


def test_bad_prompt_attribute_degrades(settings, source, fetcher):
    summarizer = Summarizer(api_key="k", prompt="{title.nope} {transcript}", session=MagicMock())

    result, progress = _run(settings, source, fetcher, summarizer)

    assert result.has_summary is False
    assert (settings.output_dir / result.filename).exists()
    assert any(line.startswith("Warning: Summary generation failed") for line in progress)


def test_progress_lines_are_logged_at_info(settings, source, fetcher, caplog):
    with caplog.at_level(logging.INFO, logger="yt2obsidian.pipeline"):
        _run(settings, source, fetcher, skip_summary=True)

    assert "Fetching video metadata for dQw4w9WgXcQ..." in [
        r.getMessage() for r in caplog.records if r.levelno == logging.INFO
    ]
