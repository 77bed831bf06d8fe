# yt2obsidian/youtube.py
"""
Video ID resolution and watch-page metadata.

- extract_video_id: watch / youtu.be / embed / shorts URLs or a bare 11-char ID
- PageMetadataSource: one GET of the watch page, fields pulled out with regexes
- YtDlpMetadataSource: same fields via yt-dlp (no media download)
"""
import html
import logging
import re
from dataclasses import dataclass
from typing import Optional, Protocol

import requests
from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError

from .errors import InvalidReference, MetadataFetchError

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
ACCEPT_LANGUAGE = "ja,en;q=0.9"

# Order matters: the first structural match wins.
_ID_PATTERNS = [
    re.compile(r"youtube\.com/watch\?v=([A-Za-z0-9_-]{11})"),
    re.compile(r"youtu\.be/([A-Za-z0-9_-]{11})"),
    re.compile(r"youtube\.com/embed/([A-Za-z0-9_-]{11})"),
    re.compile(r"youtube\.com/shorts/([A-Za-z0-9_-]{11})"),
]
_BARE_ID = re.compile(r"[A-Za-z0-9_-]{11}")

_TITLE_RE = re.compile(r"<title>([^<]+)</title>")
_OWNER_RE = re.compile(r'"ownerChannelName"\s*:\s*"([^"]+)"')
_LINK_NAME_RE = re.compile(r'<link itemprop="name" content="([^"]+)">')
_OG_DESC_RE = re.compile(r'<meta property="og:description" content="([^"]*)">')
_DATE_RE = re.compile(r'"(?:datePublished|uploadDate)"\s*:\s*"(\d{4}-\d{2}-\d{2})')
_UNICODE_ESCAPE_RE = re.compile(r"\\u([0-9a-fA-F]{4})")


def canonical_url(video_id: str) -> str:
    return WATCH_URL.format(video_id=video_id)


def extract_video_id(text: str) -> str:
    """Return the 11-char video ID embedded in ``text``.

    Raises InvalidReference when nothing matches.
    """
    value = (text or "").strip()
    for pattern in _ID_PATTERNS:
        m = pattern.search(value)
        if m:
            return m.group(1)
    if _BARE_ID.fullmatch(value):
        return value
    raise InvalidReference(f"Invalid YouTube URL or video ID: {text}")


# ----------------------------- decoding -----------------------------

def decode_html_entities(text: str) -> str:
    """Named plus decimal/hex numeric entities."""
    return html.unescape(text)


def decode_unicode_escapes(text: str) -> str:
    """Decode JSON-style ``\\uXXXX`` escapes, joining surrogate pairs."""
    decoded = _UNICODE_ESCAPE_RE.sub(lambda m: chr(int(m.group(1), 16)), text)
    return decoded.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


# ----------------------------- metadata -----------------------------

@dataclass(frozen=True)
class VideoMeta:
    title: str
    channel_name: str
    description: str = ""
    published_date: str = ""


class MetadataSource(Protocol):
    def fetch(self, video_id: str) -> VideoMeta:
        ...


def parse_watch_page(page: str) -> VideoMeta:
    """Extract metadata from watch-page HTML. Each field falls back on its own."""
    m = _TITLE_RE.search(page)
    if m:
        title = decode_html_entities(re.sub(r" - YouTube$", "", m.group(1)).strip())
    else:
        title = "Untitled"

    channel_name = "Unknown"
    m = _OWNER_RE.search(page)
    if m:
        channel_name = decode_unicode_escapes(m.group(1))
    else:
        m = _LINK_NAME_RE.search(page)
        if m:
            channel_name = decode_html_entities(m.group(1))

    m = _OG_DESC_RE.search(page)
    description = decode_html_entities(m.group(1)) if m else ""

    m = _DATE_RE.search(page)
    published_date = m.group(1) if m else ""

    return VideoMeta(
        title=title,
        channel_name=channel_name,
        description=description,
        published_date=published_date,
    )


class PageMetadataSource:
    """Scrape the public watch page."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 30.0):
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch(self, video_id: str) -> VideoMeta:
        url = canonical_url(video_id)
        try:
            r = self.session.get(
                url,
                headers={"User-Agent": BROWSER_USER_AGENT, "Accept-Language": ACCEPT_LANGUAGE},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise MetadataFetchError(f"Failed to fetch YouTube page: {e}") from e
        if not r.ok:
            raise MetadataFetchError(f"Failed to fetch YouTube page: {r.status_code}")
        return parse_watch_page(r.text)


def fmt_upload_date(s: Optional[str]) -> str:
    """yt-dlp's YYYYMMDD → YYYY-MM-DD; anything else becomes ''."""
    if not s or len(s) != 8 or not s.isdigit():
        return ""
    return f"{s[0:4]}-{s[4:6]}-{s[6:8]}"


class YtDlpMetadataSource:
    """Metadata via yt-dlp, for when the watch-page regexes stop matching."""

    def __init__(self, ydl_opts: Optional[dict] = None):
        self.ydl_opts = {
            "quiet": True,
            "skip_download": True,
            "noplaylist": True,
            "extract_flat": False,
            "extractor_retries": 3,
        }
        if ydl_opts:
            self.ydl_opts.update(ydl_opts)

    def fetch(self, video_id: str) -> VideoMeta:
        try:
            with YoutubeDL(self.ydl_opts) as ydl:
                info = ydl.extract_info(canonical_url(video_id), download=False)
        except DownloadError as e:
            raise MetadataFetchError(f"yt-dlp could not read {video_id}: {e}") from e
        info = info or {}
        return VideoMeta(
            title=info.get("title") or "Untitled",
            channel_name=info.get("uploader") or info.get("channel") or "Unknown",
            description=info.get("description") or "",
            published_date=fmt_upload_date(info.get("upload_date")),
        )


def make_metadata_source(kind: str = "page", session: Optional[requests.Session] = None,
                         timeout: float = 30.0) -> MetadataSource:
    if kind == "yt-dlp":
        return YtDlpMetadataSource()
    if kind != "page":
        logger.warning(f"Unknown METADATA_SOURCE {kind!r}; using the watch page")
    return PageMetadataSource(session=session, timeout=timeout)
