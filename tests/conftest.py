"""
Shared fixtures: fake collaborators so no test touches the network.
"""
from typing import Dict, List, Optional

import pytest

from yt2obsidian.config import Settings
from yt2obsidian.summary import StructuredSummary
from yt2obsidian.transcripts import Transcript, TranscriptSnippet
from yt2obsidian.youtube import VideoMeta


class FakeTranscriptFetcher:
    """Serves transcripts by language; records every attempt (None = unconstrained)."""

    def __init__(self, by_lang: Optional[Dict[str, Transcript]] = None, default: Optional[Transcript] = None):
        self.by_lang = by_lang or {}
        self.default = default
        self.calls: List[Optional[str]] = []

    def fetch(self, video_id, language=None):
        self.calls.append(language)
        if language is None:
            if self.default is None:
                raise LookupError("no transcripts listed")
            return self.default
        if language not in self.by_lang:
            raise LookupError(f"no transcript in {language}")
        return self.by_lang[language]


class FakeMetadataSource:
    def __init__(self, meta: VideoMeta):
        self.meta = meta
        self.calls: List[str] = []

    def fetch(self, video_id):
        self.calls.append(video_id)
        return self.meta


class FakeSummarizer:
    model = "fake-model"

    def __init__(self, result=None, error: Optional[Exception] = None):
        self.result = result
        self.error = error
        self.calls = []

    def summarize(self, title, transcript_text):
        self.calls.append((title, transcript_text))
        if self.error is not None:
            raise self.error
        return self.result


def make_transcript(code="ja", name="Japanese", lines=(("hello", 0.0), ("world", 65.5))):
    return Transcript(
        language_code=code,
        language=name,
        snippets=[TranscriptSnippet(text=t, start=s) for t, s in lines],
    )


@pytest.fixture
def settings(tmp_path):
    return Settings(
        output_dir=tmp_path / "notes",
        vault_dir=tmp_path / "vault",
        anthropic_api_key="test-key",
    )


@pytest.fixture
def video_meta():
    return VideoMeta(
        title="Test: Video #1",
        channel_name="Test Channel",
        description="d" * 250,
        published_date="2024-03-05",
    )


@pytest.fixture
def structured_summary():
    return StructuredSummary(summary_text="- point one\n- point two", tags=["ai", "testing"])
