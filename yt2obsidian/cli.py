# yt2obsidian/cli.py
"""yt2obsidian <url> [--lang ja] [--out DIR] [--no-summary] [--sync]"""
import argparse
import sys
from typing import List, Optional

from .config import Settings
from .errors import NoteError
from .pipeline import process_youtube
from .vault_sync import sync_vault


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yt2obsidian",
        description="Save a YouTube transcript (and AI summary) as an Obsidian note.",
        epilog=(
            "examples:\n"
            "  yt2obsidian https://youtu.be/xxxxx --lang en\n"
            "  yt2obsidian https://youtu.be/xxxxx --no-summary\n"
            "  yt2obsidian https://youtu.be/xxxxx --out ./output"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("url", help="YouTube video URL or video ID")
    parser.add_argument("--lang", help="Preferred transcript language (default: YT_LANG or ja, fallback: en)")
    parser.add_argument("--out", help="Output directory (default: OBSIDIAN_OUTPUT_DIR)")
    parser.add_argument("--no-summary", action="store_true", help="Skip AI summary generation")
    parser.add_argument("--sync", action="store_true", help="git commit & push the vault after saving")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()

    try:
        result = process_youtube(
            args.url,
            lang=args.lang,
            skip_summary=args.no_summary,
            output_dir=args.out,
            settings=settings,
            on_progress=print,
        )
    except NoteError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Done: {result.filename} (lang: {result.language}, summary: {'yes' if result.has_summary else 'no'})")
    if args.sync or settings.vault_sync:
        sync_vault(settings.vault_dir, log=print)
    return 0


if __name__ == "__main__":
    sys.exit(main())
