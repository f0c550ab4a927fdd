"""Fixed-interval trigger for pipeline runs.

The cadence lives in a per-instance `schedule.Scheduler`, not the module-level
default one, so tests can drive it with `run_all()` and a fake sleep instead of
waiting on the wall clock.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

import schedule

from policypulse.errors import RunInProgressError
from policypulse.pipeline.summary import RunSummary


logger = logging.getLogger(__name__)


class Scheduler:
    def __init__(
        self,
        job: Callable[[], RunSummary],
        *,
        interval_minutes: int = 120,
        enabled: bool = True,
        run_on_startup: bool = False,
        backend: Optional[schedule.Scheduler] = None,
        sleep: Callable[[float], None] = time.sleep,
        poll_seconds: float = 5.0,
    ):
        self.job = job
        self.interval_minutes = interval_minutes
        self.enabled = enabled
        self.run_on_startup = run_on_startup
        self.backend = backend or schedule.Scheduler()
        self._sleep = sleep
        self.poll_seconds = poll_seconds
        self._stop = threading.Event()
        self._started = False
        self.runs = 0
        self.skipped = 0

    def trigger(self) -> Optional[RunSummary]:
        """Run the job now. Returns None when a run was already in progress."""
        try:
            summary = self.job()
        except RunInProgressError:
            self.skipped += 1
            logger.warning("Scheduled run skipped: previous run still in progress")
            return None
        self.runs += 1
        return summary

    def _tick(self) -> None:
        try:
            self.trigger()
        except Exception:
            # keep the schedule alive; the next interval retries
            logger.exception("Scheduled ingestion run failed")

    def start(self) -> bool:
        """Register the job with the backend. Returns False when scheduling is disabled."""
        if not self.enabled:
            logger.info("Scheduler disabled (ENABLE_SCHEDULER=false)")
            return False
        if self._started:
            return True
        self.backend.every(self.interval_minutes).minutes.do(self._tick)
        self._started = True
        logger.info(f"Scheduler started: every {self.interval_minutes} minute(s)")
        if self.run_on_startup:
            logger.info("Running initial job on startup")
            self._tick()
        return True

    def run_pending(self) -> None:
        self.backend.run_pending()

    def run_forever(self) -> None:
        if not self.start():
            return
        while not self._stop.is_set():
            self.backend.run_pending()
            self._sleep(self.poll_seconds)
        logger.info("Scheduler stopped")

    def stop(self) -> None:
        self._stop.set()
        self.backend.clear()
        self._started = False
