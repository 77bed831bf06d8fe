# yt2obsidian/vault_sync.py
"""Commit and push the Obsidian vault after a note is written."""
import logging
import subprocess
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)


class SyncOutcome(str, Enum):
    SYNCED = "synced"
    NO_CHANGES = "no-changes"
    FAILED = "failed"
    SKIPPED = "skipped"


def _git(vault_dir: Path, *args: str) -> str:
    proc = subprocess.run(
        ["git", *args],
        cwd=str(vault_dir),
        capture_output=True,
        text=True,
        check=True,
    )
    return proc.stdout


def sync_vault(vault_dir: Union[str, Path], log: Optional[Callable[[str], None]] = None) -> SyncOutcome:
    """git add/commit/pull --rebase/push in ``vault_dir``. Never raises."""
    print_ = log or logger.info
    vault_dir = Path(vault_dir).expanduser()
    if not (vault_dir / ".git").exists():
        print_(f"Obsidian vault: {vault_dir} is not a git repository, skipping sync")
        return SyncOutcome.SKIPPED

    try:
        if not _git(vault_dir, "status", "--porcelain").strip():
            print_("Obsidian vault: no changes to sync")
            return SyncOutcome.NO_CHANGES

        _git(vault_dir, "add", "-A")
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        _git(vault_dir, "commit", "-m", f"yt2obsidian: auto-sync {stamp}")
        _git(vault_dir, "pull", "--rebase")
        _git(vault_dir, "push")
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or e.stdout or "").strip() or str(e)
        print_(f"Obsidian vault sync failed: {detail}")
        return SyncOutcome.FAILED
    except OSError as e:
        print_(f"Obsidian vault sync failed: {e}")
        return SyncOutcome.FAILED

    print_("Obsidian vault: synced")
    return SyncOutcome.SYNCED
