"""Pipeline orchestration for one scan run."""

import threading
import time
from pathlib import Path
from typing import Callable, List, Optional, Union
from uuid import uuid4

from sponsor_scanner.config.models import AppConfig
from sponsor_scanner.deduplication.service import Deduplicator
from sponsor_scanner.domain.models import JobRecord, RunStats
from sponsor_scanner.export.csv_writer import append_records
from sponsor_scanner.logging import get_logger
from sponsor_scanner.logging.context import log_context
from sponsor_scanner.matching.engine import CompanyMatcher
from sponsor_scanner.normalization.service import JobRecordBuilder
from sponsor_scanner.persistence.store import JobStore
from sponsor_scanner.reference.loader import load_reference_set
from sponsor_scanner.utils.timestamps import utc_now

from .fetch import FetchPipeline
from .models import PipelineRunResult
from .reporter import RunReporter

logger = get_logger(__name__, component="pipeline")


class ScanPipeline:
    """
    Orchestrates a single scan: load reference set, fetch and filter pages,
    deduplicate and persist, back up to CSV, and record the run.

    Every run that starts is recorded exactly once in the run history, on
    success and on failure alike.
    """

    def __init__(
        self,
        app_config: AppConfig,
        store: JobStore,
        adapter,
        reference_csv_path: Optional[Union[str, Path]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the scan pipeline.

        Args:
            app_config: Application configuration
            store: Storage facade bound to an open Database
            adapter: Search provider with a ``fetch_page(offset)`` method
            reference_csv_path: Overrides ``files.reference_csv`` from the config
            sleep: Pause function between pages (injectable for tests)
        """
        self.app_config = app_config
        self.store = store
        self.adapter = adapter
        self.reference_csv_path = reference_csv_path or app_config.files.reference_csv
        self.results_csv_path = app_config.files.results_csv
        self.sleep = sleep

        self.builder = JobRecordBuilder()
        self.deduplicator = Deduplicator(store)
        self.reporter = RunReporter(store)
        self._lock = threading.Lock()

    def run_once(self) -> PipelineRunResult:
        """
        Execute one complete scan.

        Returns:
            PipelineRunResult; ``skipped`` is set when another run was active

        Raises:
            AdapterError, PersistenceError, ReferenceLoadError: The first
            failure of the run, after it has been recorded in the run history
        """
        run_started_at = utc_now()
        run_id = uuid4().hex

        if not self._lock.acquire(blocking=False):
            with log_context(run_id=run_id):
                logger.warning(
                    "Pipeline run skipped: previous run still in progress",
                    extra={"event": "pipeline.run.skipped", "reason": "lock_held"},
                )
            return PipelineRunResult(
                run_id=run_id,
                run_started_at=run_started_at,
                run_finished_at=utc_now(),
                skipped=True,
            )

        try:
            with log_context(run_id=run_id):
                stats = RunStats()

                logger.info(
                    "Pipeline run started",
                    extra={
                        "event": "pipeline.run.started",
                        "query": self.app_config.search.query,
                    },
                )

                try:
                    records = self._execute(stats)
                except Exception as e:
                    stats.mark_failed(e)
                    logger.error(
                        f"Pipeline run failed: {e}",
                        extra={"event": "pipeline.run.failed", "error_type": type(e).__name__},
                        exc_info=True,
                    )
                    self._finalize_failed_run(stats)
                    raise

                try:
                    self.reporter.finalize(stats)
                except Exception as e:
                    # Jobs are stored; only the run history row is missing
                    stats.mark_failed(e)
                    logger.error(
                        f"Failed to record run: {e}",
                        extra={"event": "pipeline.run.report_failed", "error_type": type(e).__name__},
                        exc_info=True,
                    )
                    raise

                result = PipelineRunResult(
                    run_id=run_id,
                    run_started_at=run_started_at,
                    run_finished_at=utc_now(),
                    stats=stats,
                    records=records,
                )

                logger.info(
                    "Pipeline run completed",
                    extra={
                        "event": "pipeline.run.completed",
                        "duration_ms": int(result.total_duration_seconds * 1000),
                        "jobs_scraped": stats.jobs_scraped,
                        "jobs_filtered": stats.jobs_filtered,
                        "jobs_inserted": stats.jobs_inserted,
                        "jobs_duplicated": stats.jobs_duplicated,
                        "api_calls_made": stats.api_calls_made,
                    },
                )
                return result

        finally:
            self._lock.release()

    def _execute(self, stats: RunStats) -> List[JobRecord]:
        reference_set = load_reference_set(self.store, self.reference_csv_path)

        fetch = FetchPipeline(
            CompanyMatcher(reference_set),
            self.builder,
            page_delay_seconds=self.app_config.advanced.page_delay_seconds,
            sleep=self.sleep,
        )
        records, _ = fetch.run(self.adapter.fetch_page, stats)

        dedup = self.deduplicator.insert_all(records)
        stats.jobs_inserted = dedup.inserted
        stats.jobs_duplicated = dedup.duplicated

        if self.results_csv_path and records:
            self._backup_to_csv(records)

        return records

    def _backup_to_csv(self, records: List[JobRecord]) -> None:
        # The database already holds the records; a failed backup is not a failed run
        try:
            append_records(self.results_csv_path, records)
        except OSError as e:
            logger.error(
                f"CSV backup failed: {e}",
                extra={
                    "event": "pipeline.csv_backup.failed",
                    "path": str(self.results_csv_path),
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )

    def _finalize_failed_run(self, stats: RunStats) -> None:
        """Record a failed run without letting a reporting error mask the original one."""
        try:
            self.reporter.finalize(stats)
        except Exception as report_error:
            logger.error(
                f"Failed to record failed run: {report_error}",
                extra={
                    "event": "pipeline.run.report_failed",
                    "error_type": type(report_error).__name__,
                },
                exc_info=True,
            )
