# yt2obsidian/jobs.py
"""Work units shared by the Flask routes and the RQ worker."""
import logging
from typing import Any, Dict, List, Optional

from .config import Settings
from .pipeline import process_youtube
from .vault_sync import sync_vault

logger = logging.getLogger(__name__)


def process_and_sync(
    url: str,
    lang: Optional[str] = None,
    skip_summary: bool = False,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """Run the pipeline, then sync the vault if enabled.

    Returns the result dict plus the progress lines. Pipeline errors are
    raised (so RQ can record them); sync failures only show up in ``logs``.
    """
    settings = settings or Settings.from_env()
    logs: List[str] = []
    result = process_youtube(
        url,
        lang=lang or None,
        skip_summary=skip_summary,
        settings=settings,
        on_progress=logs.append,
    )
    payload = result.to_dict()
    if settings.vault_sync:
        outcome = sync_vault(settings.vault_dir, log=logs.append)
        payload["sync"] = outcome.value
    payload["logs"] = logs
    return payload
