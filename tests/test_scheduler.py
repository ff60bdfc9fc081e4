"""Tests for the daemon-mode interval scheduler."""

import threading
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from sponsor_scanner.scheduler import SchedulerService
from sponsor_scanner.scheduler.service import JOB_ID


@pytest.fixture
def make_service():
    """Build SchedulerService instances and make sure none outlive the test."""
    created = []

    def _make(scan=None, interval=3600, shutdown_event=None):
        service = SchedulerService(
            scan_callable=scan or Mock(),
            interval_seconds=interval,
            shutdown_event=shutdown_event,
        )
        created.append(service)
        return service

    yield _make

    for service in created:
        if service.is_running():
            service.shutdown(wait=True)


class TestConstruction:
    """Test state before start()."""

    def test_not_running_until_started(self, make_service):
        """Test a fresh service has no job and no thread."""
        service = make_service(interval=900)

        assert service.interval_seconds == 900
        assert not service.is_running()
        assert service.get_next_run_time() is None

    def test_job_defaults_forbid_overlap(self, make_service):
        """Test one instance at a time, coalesced misfires, grace of one interval."""
        defaults = make_service(interval=600).scheduler._job_defaults

        assert defaults["max_instances"] == 1
        assert defaults["coalesce"] is True
        assert defaults["misfire_grace_time"] == 600


class TestLifecycle:
    """Test start() and shutdown()."""

    def test_start_registers_single_job(self, make_service):
        """Test start adds the scan job and a second start changes nothing."""
        service = make_service(interval=300)

        service.start()
        service.start()

        assert service.is_running()
        assert [job.id for job in service.scheduler.get_jobs()] == [JOB_ID]

    def test_shutdown_sets_event(self, make_service):
        """Test shutdown stops the thread and signals the waiter."""
        stopped = threading.Event()
        service = make_service(interval=300, shutdown_event=stopped)
        service.start()

        service.shutdown()

        assert not service.is_running()
        assert stopped.is_set()

    def test_shutdown_without_event(self, make_service):
        """Test shutdown works when nobody is waiting on an event."""
        service = make_service(interval=300)
        service.start()

        service.shutdown()

        assert not service.is_running()

    def test_shutdown_before_start(self, make_service):
        """Test shutting down a service that never started still signals."""
        stopped = threading.Event()
        service = make_service(shutdown_event=stopped)

        service.shutdown()

        assert stopped.is_set()


class TestExecution:
    """Test the scan callable is invoked on schedule."""

    def test_first_scan_runs_immediately(self, make_service):
        """Test the scan fires right after start, not one interval later."""
        ran = threading.Event()
        make_service(scan=ran.set).start()

        assert ran.wait(timeout=5)

    def test_next_scan_one_interval_out(self, make_service):
        """Test after the first scan the next is about an hour away."""
        ran = threading.Event()
        service = make_service(scan=ran.set, interval=3600)
        service.start()
        ran.wait(timeout=5)
        time.sleep(0.1)

        remaining = service.get_next_run_time() - datetime.now(timezone.utc)

        assert timedelta(minutes=55) < remaining <= timedelta(hours=1)

    def test_slow_scan_never_overlaps(self, make_service):
        """Test a scan longer than the interval does not run twice at once."""
        in_flight = []
        overlapped = threading.Event()
        guard = threading.Lock()

        def slow_scan():
            with guard:
                if in_flight:
                    overlapped.set()
                in_flight.append(None)
            time.sleep(1.5)
            with guard:
                in_flight.pop()

        service = make_service(scan=slow_scan, interval=1)
        service.start()
        time.sleep(3)
        service.shutdown(wait=True)

        assert not overlapped.is_set()

    def test_failing_scan_keeps_schedule(self, make_service):
        """Test an exception from the scan leaves the next run scheduled."""
        ran = threading.Event()

        def broken_scan():
            ran.set()
            raise RuntimeError("scan blew up")

        service = make_service(scan=broken_scan, interval=300)
        service.start()

        assert ran.wait(timeout=5)
        time.sleep(0.1)
        assert service.is_running()
        assert service.get_next_run_time() is not None
