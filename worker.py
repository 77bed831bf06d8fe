# worker.py
"""RQ worker running yt2obsidian.jobs.process_and_sync jobs enqueued by app.py."""
import os
import logging

from dotenv import load_dotenv
from redis import Redis
from rq import Worker, Queue

from yt2obsidian.config import Settings
import yt2obsidian.jobs  # noqa: F401  preload the job module before forking

logger = logging.getLogger("yt2obsidian.worker")


def main() -> None:
    load_dotenv()
    settings = Settings.from_env()
    conn = Redis.from_url(os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    q = Queue(os.getenv("RQ_QUEUE", "yt2obsidian"), connection=conn)
    logger.info(f"Writing notes to {settings.output_dir} (vault sync: {settings.vault_sync})")
    Worker([q], connection=conn).work()


if __name__ == "__main__":
    main()
