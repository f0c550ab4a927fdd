#!/usr/bin/env python3
"""Control server: health check, manual trigger, and the background scheduler."""

from __future__ import annotations

import logging
import os
import sys
import threading

from dotenv import load_dotenv

from ingest_worker import build_pipeline
from policypulse.config.logging_setup import configure_logging
from policypulse.config.settings import PipelineConfig
from policypulse.scheduling.scheduler import Scheduler
from policypulse.web.app import create_app


logger = logging.getLogger("web_app")


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
    app = create_app(pipeline)

    scheduler = Scheduler(
        pipeline.run,
        interval_minutes=config.schedule_interval_minutes,
        enabled=config.scheduler_enabled,
        run_on_startup=config.run_on_startup,
    )
    threading.Thread(target=scheduler.run_forever, name="scheduler", daemon=True).start()

    logger.info(f"Starting control server on port {config.port}")
    logger.info(f"Health check: http://localhost:{config.port}/health")
    app.run(host="0.0.0.0", port=config.port, debug=False, threaded=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
