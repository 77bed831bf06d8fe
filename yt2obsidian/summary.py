# yt2obsidian/summary.py
"""
Summary + topic tags from the Anthropic Messages API.

The transcript is cut to MAX_TRANSCRIPT_CHARS before the request. The reply
is expected to be JSON ({"summary": ..., "tags": [...]}); anything else is
kept verbatim as the summary with no tags.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Union

import requests

from .config import DEFAULT_API_BASE, DEFAULT_MODEL
from .errors import MissingCredential, SummaryApiError, SummaryError

logger = logging.getLogger(__name__)

MAX_TRANSCRIPT_CHARS = 12000
TRUNCATION_MARKER = "\n...(truncated)"
MAX_TAGS = 5
ANTHROPIC_VERSION = "2023-06-01"
_CODE_FENCE_RE = re.compile(r"```[A-Za-z0-9_-]*\s*\n(.*?)\n?```", re.DOTALL)

DEFAULT_SUMMARY_PROMPT = (
    'Below is the transcript of the YouTube video "{title}". Do two things.\n\n'
    "## Task 1: Summary\n"
    "Summarize the main points of the video as 3-7 bullet points.\n"
    "- One or two sentences per point\n"
    "- Keep technical terms as they are\n"
    "- Markdown bullets only, no headings\n"
    "- Write in the language of the transcript\n\n"
    "## Task 2: Tags\n"
    "Produce exactly 5 Obsidian tags classifying the video.\n"
    "- Genre, topic or field of the video\n"
    "- Lower-case English, hyphen separated (e.g. machine-learning, economics)\n"
    "- Neither too generic nor too specific\n\n"
    "Reply with JSON only, in this shape:\n"
    '{{"summary": "bullet summary text", "tags": ["tag1", "tag2", "tag3", "tag4", "tag5"]}}\n\n'
    "Transcript:\n{transcript}"
)


@dataclass(frozen=True)
class StructuredSummary:
    summary_text: str
    tags: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class RawSummary:
    """The model did not return the expected JSON; its text is the summary."""
    summary_text: str
    tags: List[str] = field(default_factory=list)


SummaryResult = Union[StructuredSummary, RawSummary]


def truncate_transcript(text: str, limit: int = MAX_TRANSCRIPT_CHARS) -> str:
    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER
    return text


def _strip_code_fence(text: str) -> str:
    m = _CODE_FENCE_RE.fullmatch(text)
    return m.group(1).strip() if m else text


def parse_summary_reply(text: str) -> SummaryResult:
    raw = text.strip()
    try:
        parsed = json.loads(_strip_code_fence(raw))
    except ValueError:
        return RawSummary(summary_text=raw)
    if not isinstance(parsed, dict):
        return RawSummary(summary_text=raw)

    summary = parsed.get("summary")
    if isinstance(summary, list):
        summary = "\n".join(str(item) for item in summary)
    summary = (summary or "").strip() if isinstance(summary, str) else ""

    tags = parsed.get("tags")
    if isinstance(tags, list):
        tags = [str(t).strip() for t in tags if str(t).strip()][:MAX_TAGS]
    else:
        tags = []
    return StructuredSummary(summary_text=summary or raw, tags=tags)


def _reply_text(data) -> str:
    if not isinstance(data, dict):
        return ""
    for block in data.get("content") or []:
        if isinstance(block, dict) and block.get("type") == "text" and block.get("text"):
            return block["text"]
    return ""


class Summarizer:
    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_API_BASE,
        prompt: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 120.0,
        max_tokens: int = 1024,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.prompt = prompt or DEFAULT_SUMMARY_PROMPT
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_tokens = max_tokens

    def build_prompt(self, title: str, transcript_text: str) -> str:
        try:
            return self.prompt.format(title=title, transcript=truncate_transcript(transcript_text))
        except (KeyError, IndexError, ValueError, AttributeError) as e:
            raise SummaryError(f"Summary prompt is not a valid template: {e}") from e

    def summarize(self, title: str, transcript_text: str) -> SummaryResult:
        if not self.api_key:
            raise MissingCredential("ANTHROPIC_API_KEY is not set")

        try:
            r = self.session.post(
                f"{self.base_url.rstrip('/')}/v1/messages",
                headers={
                    "Content-Type": "application/json",
                    "x-api-key": self.api_key,
                    "anthropic-version": ANTHROPIC_VERSION,
                },
                json={
                    "model": self.model,
                    "max_tokens": self.max_tokens,
                    "messages": [{"role": "user", "content": self.build_prompt(title, transcript_text)}],
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SummaryApiError(f"Anthropic API request failed: {e}") from e

        if not r.ok:
            raise SummaryApiError(f"Anthropic API error: {r.status_code} {r.text}")

        try:
            text = _reply_text(r.json())
        except ValueError as e:
            raise SummaryApiError("Anthropic API returned a non-JSON body") from e
        if not text:
            raise SummaryApiError("Empty response from Anthropic API")

        result = parse_summary_reply(text)
        if isinstance(result, RawSummary):
            logger.warning("Summary reply was not the expected JSON; keeping raw text without tags")
        return result
