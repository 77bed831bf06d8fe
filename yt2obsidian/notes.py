# yt2obsidian/notes.py
"""
Obsidian note assembly: YAML front matter + Summary/Transcript body, and the
filename derived from the video title. No I/O here.
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Union

from .summary import SummaryResult
from .youtube import VideoMeta

FIXED_TAGS = ["youtube", "clippings"]
MAX_DESCRIPTION_CHARS = 200
MAX_FILENAME_CHARS = 200
MAX_FILENAME_BYTES = 255
FALLBACK_FILENAME = "Untitled"

_YAML_SPECIAL = re.compile(r"[:\"'#\[\]{}|>&*!%@`]")
_FORBIDDEN_CHARS = re.compile(r'[<>:"/\\|?*#^\[\]]')
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


@dataclass(frozen=True)
class Note:
    markdown: str
    filename: str
    has_summary: bool = False


def escape_yaml_string(s: str) -> str:
    """Double-quote ``s``; escape backslashes and quotes when it holds YAML-reserved characters."""
    if _YAML_SPECIAL.search(s) or "\n" in s:
        return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return f'"{s}"'


def _quoted(s: str) -> str:
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"') + '"'


def sanitize_filename(name: str) -> str:
    name = _FORBIDDEN_CHARS.sub("", name or "")
    name = _CONTROL_CHARS.sub("", name)
    name = re.sub(r"\s+", " ", name).strip(" .")
    name = name[:MAX_FILENAME_CHARS].strip(" .")
    # Filesystems cap names in bytes, not characters.
    budget = MAX_FILENAME_BYTES - len(".md")
    while len(name.encode("utf-8")) > budget:
        name = name[:-1].rstrip(" .")
    return name or FALLBACK_FILENAME


def note_filename(title: str) -> str:
    return f"{sanitize_filename(title)}.md"


def shorten_description(description: str, limit: int = MAX_DESCRIPTION_CHARS) -> str:
    if len(description) > limit:
        return description[:limit] + "..."
    return description


def front_matter(meta: VideoMeta, source_url: str, created: str, ai_tags: Sequence[str] = ()) -> str:
    lines: List[str] = [
        "---",
        f"title: {escape_yaml_string(meta.title)}",
        f"source: {escape_yaml_string(source_url)}",
        "author:",
        f"  - {_quoted(f'[[{meta.channel_name}]]')}",
    ]
    if meta.published_date:
        lines.append(f"published: {meta.published_date}")
    lines.append(f"created: {created}")
    lines.append(f"description: {escape_yaml_string(shorten_description(meta.description))}")
    lines.append("tags:")
    for tag in list(FIXED_TAGS) + list(ai_tags):
        lines.append(f"  - {_quoted(tag)}")
    lines.append("---")
    return "\n".join(lines)


def assemble_note(
    meta: VideoMeta,
    transcript_text: str,
    summary: Optional[SummaryResult],
    canonical_url: str,
    created: Union[date, str],
) -> Note:
    if isinstance(created, date):
        created = created.isoformat()

    summary_text = summary.summary_text.strip() if summary else ""
    ai_tags = list(summary.tags) if summary else []
    summary_section = f"\n## Summary\n\n{summary_text}\n" if summary_text else ""

    fm = front_matter(meta, canonical_url, created, ai_tags)
    markdown = f"{fm}\n{summary_section}\n## Transcript\n\n{transcript_text}\n"
    return Note(markdown=markdown, filename=note_filename(meta.title), has_summary=bool(summary_text))
