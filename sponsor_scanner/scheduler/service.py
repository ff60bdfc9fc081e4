"""Interval scheduler for daemon mode."""

import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from sponsor_scanner.logging import get_logger

logger = get_logger(__name__, component="scheduler")

JOB_ID = "sponsor-scan"


class SchedulerService:
    """
    Runs the scan callable every ``interval_seconds`` on a background thread.

    The first run starts immediately. At most one run is active at a time;
    a trigger that fires while a run is still going is coalesced away.
    """

    def __init__(
        self,
        scan_callable: Callable[[], object],
        interval_seconds: int,
        shutdown_event: Optional[threading.Event] = None,
    ):
        """
        Args:
            scan_callable: Called on each tick (e.g. a wrapper around pipeline.run_once)
            interval_seconds: Seconds between runs
            shutdown_event: Set once the scheduler has shut down
        """
        self.scan_callable = scan_callable
        self.interval_seconds = interval_seconds
        self.shutdown_event = shutdown_event

        self.scheduler = BackgroundScheduler(
            job_defaults={
                "max_instances": 1,
                "coalesce": True,
                "misfire_grace_time": interval_seconds,
            },
            timezone=timezone.utc,
        )

    def start(self) -> None:
        """Register the scan job and start the scheduler thread. No-op if already running."""
        if self.scheduler.running:
            logger.warning(
                "Scan schedule already active; ignoring start()",
                extra={"event": "scheduler.already_running"},
            )
            return

        first_run = datetime.now(timezone.utc)

        self.scheduler.add_job(
            func=self.scan_callable,
            trigger=IntervalTrigger(seconds=self.interval_seconds, timezone=timezone.utc),
            id=JOB_ID,
            name="H-1B sponsor job scan",
            replace_existing=True,
            next_run_time=first_run,
        )
        self.scheduler.start()

        logger.info(
            f"Scanning every {self.interval_seconds}s, first run now",
            extra={
                "event": "scheduler.started",
                "interval_seconds": self.interval_seconds,
                "next_run_time": first_run.isoformat(),
            },
        )

    def shutdown(self, wait: bool = False) -> None:
        """Stop the scheduler and signal ``shutdown_event``.

        Args:
            wait: Block until a running scan has finished
        """
        logger.info(
            "Stopping scan schedule",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )

        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)

        if self.shutdown_event is not None:
            self.shutdown_event.set()

        logger.info("Scan schedule stopped", extra={"event": "scheduler.stopped"})

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        job = self.scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None
