# yt2obsidian/config.py
"""
Runtime settings, resolved once and passed into the pipeline.

Environment (.env)
- OBSIDIAN_OUTPUT_DIR=~/workspace/obsidian/Clippings
- OBSIDIAN_VAULT=~/workspace/obsidian        # git repo synced after each note
- VAULT_SYNC=1                               # web app: sync after each note
- YT_LANG=ja
- ANTHROPIC_API_KEY=sk-ant-...
- ANTHROPIC_MODEL=claude-haiku-4-5-20251001
- ANTHROPIC_BASE_URL=https://api.anthropic.com
- SUMMARY_PROMPT="...{title}...{transcript}..."
- METADATA_SOURCE=page                       # or yt-dlp
- HTTP_TIMEOUT=30
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_LANG = "ja"
SECONDARY_LANG = "en"
DEFAULT_MODEL = "claude-haiku-4-5-20251001"
DEFAULT_API_BASE = "https://api.anthropic.com"
DEFAULT_HTTP_TIMEOUT = 30.0


def _home() -> Path:
    return Path(os.getenv("HOME") or Path.home())


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _float(value: Optional[str], default: float) -> float:
    try:
        parsed = float(value) if value else default
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@dataclass(frozen=True)
class Settings:
    output_dir: Path
    vault_dir: Path
    vault_sync: bool = False
    language: str = DEFAULT_LANG
    anthropic_api_key: Optional[str] = None
    anthropic_model: str = DEFAULT_MODEL
    anthropic_base_url: str = DEFAULT_API_BASE
    summary_prompt: Optional[str] = None
    metadata_source: str = "page"
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        home = _home()
        output_dir = os.getenv("OBSIDIAN_OUTPUT_DIR") or str(home / "workspace" / "obsidian" / "Clippings")
        vault_dir = os.getenv("OBSIDIAN_VAULT") or str(home / "workspace" / "obsidian")
        return cls(
            output_dir=Path(output_dir).expanduser(),
            vault_dir=Path(vault_dir).expanduser(),
            vault_sync=_flag(os.getenv("VAULT_SYNC")),
            language=(os.getenv("YT_LANG") or DEFAULT_LANG).strip(),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            anthropic_model=os.getenv("ANTHROPIC_MODEL") or DEFAULT_MODEL,
            anthropic_base_url=os.getenv("ANTHROPIC_BASE_URL") or DEFAULT_API_BASE,
            summary_prompt=os.getenv("SUMMARY_PROMPT") or None,
            metadata_source=(os.getenv("METADATA_SOURCE") or "page").strip().lower(),
            http_timeout=_float(os.getenv("HTTP_TIMEOUT"), DEFAULT_HTTP_TIMEOUT),
        )
