#!/usr/bin/env python3
"""Policy news ingestion worker.

Runs one ingestion cycle (or scheduled):
- scrape the configured listing pages
- skip articles already stored
- embed, transform to Q&A and store new ones
- classify each stored article for public-policy relevance

INGEST_MODE=once (default) runs a single cycle; INGEST_MODE=scheduled keeps
running every SCHEDULE_INTERVAL_MINUTES.
"""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

from policypulse.config.logging_setup import configure_logging
from policypulse.config.settings import PipelineConfig
from policypulse.pipeline.orchestrator import IngestionPipeline
from policypulse.scheduling.scheduler import Scheduler
from policypulse.storage.memory_store import InMemoryPostStore
from policypulse.storage.postgres_posts import PostgresPostStore
from policypulse.storage.postgres_schema import ensure_postgres_schema


logger = logging.getLogger("ingest_worker")


def build_pipeline(config: PipelineConfig, *, dry_run: bool = False) -> IngestionPipeline:
    if dry_run:
        logger.info("DRY_RUN enabled: posts are kept in memory only")
        store = InMemoryPostStore()
    else:
        ensure_postgres_schema(config.pg_dsn)
        store = PostgresPostStore(config.pg_dsn)
    return IngestionPipeline.from_config(config, store)


def main() -> int:
    load_dotenv()
    try:
        config = PipelineConfig.from_env(dotenv=False)
    except ValueError as e:
        configure_logging()
        logger.error(str(e))
        return 2
    configure_logging(config.log_level, config.log_file)

    dry_run = (os.environ.get("DRY_RUN") or "").strip().lower() in ("1", "true", "yes")
    pipeline = build_pipeline(config, dry_run=dry_run)

    mode = (os.environ.get("INGEST_MODE") or "once").lower().strip()
    if mode in ("scheduled", "daemon"):
        scheduler = Scheduler(
            pipeline.run,
            interval_minutes=config.schedule_interval_minutes,
            enabled=config.scheduler_enabled,
            run_on_startup=config.run_on_startup,
        )
        try:
            scheduler.run_forever()
        except KeyboardInterrupt:
            scheduler.stop()
        return 0

    summary = pipeline.run()
    print(f"[ingest] {summary.log_line()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
