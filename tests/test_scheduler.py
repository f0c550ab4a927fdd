import unittest
from datetime import datetime, timezone

import schedule

from policypulse.errors import RunInProgressError
from policypulse.pipeline.summary import RunSummary
from policypulse.scheduling.scheduler import Scheduler


class CountingJob:
    def __init__(self, errors=()):
        self.calls = 0
        self.errors = list(errors)

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return RunSummary(started_at=datetime.now(timezone.utc))


class TestScheduler(unittest.TestCase):
    def test_disabled_scheduler_never_runs(self):
        job = CountingJob()
        s = Scheduler(job, enabled=False, backend=schedule.Scheduler(), sleep=lambda _: None)
        self.assertFalse(s.start())
        s.run_forever()
        self.assertEqual(job.calls, 0)

    def test_registers_interval_job(self):
        backend = schedule.Scheduler()
        s = Scheduler(CountingJob(), interval_minutes=120, backend=backend)
        s.start()
        self.assertEqual(len(backend.get_jobs()), 1)
        self.assertEqual(backend.get_jobs()[0].interval, 120)
        self.assertEqual(backend.get_jobs()[0].unit, "minutes")

    def test_each_due_tick_triggers_one_run(self):
        job = CountingJob()
        backend = schedule.Scheduler()
        s = Scheduler(job, backend=backend)
        s.start()
        backend.run_all()
        backend.run_all()
        self.assertEqual(job.calls, 2)
        self.assertEqual(s.runs, 2)

    def test_run_on_startup(self):
        job = CountingJob()
        Scheduler(job, run_on_startup=True, backend=schedule.Scheduler()).start()
        self.assertEqual(job.calls, 1)

    def test_overlapping_run_is_skipped(self):
        job = CountingJob(errors=[RunInProgressError("busy")])
        s = Scheduler(job, backend=schedule.Scheduler())
        self.assertIsNone(s.trigger())
        self.assertEqual(s.skipped, 1)
        self.assertIsNotNone(s.trigger())

    def test_failed_run_keeps_schedule_alive(self):
        job = CountingJob(errors=[RuntimeError("db down")])
        backend = schedule.Scheduler()
        s = Scheduler(job, backend=backend)
        s.start()
        backend.run_all()
        backend.run_all()
        self.assertEqual(job.calls, 2)
        self.assertEqual(len(backend.get_jobs()), 1)

    def test_run_forever_polls_until_stopped(self):
        backend = schedule.Scheduler()
        polls = []
        s = Scheduler(CountingJob(), backend=backend, poll_seconds=0.5)

        def fake_sleep(seconds):
            polls.append(seconds)
            if len(polls) == 3:
                s.stop()

        s._sleep = fake_sleep
        s.run_forever()
        self.assertEqual(polls, [0.5, 0.5, 0.5])
        self.assertEqual(backend.get_jobs(), [])


if __name__ == "__main__":
    unittest.main()
