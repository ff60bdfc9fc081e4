"""Run history reporting."""

import logging

from sponsor_scanner.domain.models import RunStats
from sponsor_scanner.logging import get_logger
from sponsor_scanner.persistence.store import JobStore

logger = get_logger(__name__, component="reporter")


class RunReporter:
    """Writes the end-of-run row to the run history and logs a summary."""

    def __init__(self, store: JobStore):
        self.store = store

    def finalize(self, stats: RunStats) -> None:
        """Persist the final statistics of a run. Stats are not modified.

        Raises:
            PersistenceError: If the run history row cannot be written
        """
        log_id = self.store.append_run_log(stats)

        level = logging.INFO if stats.succeeded else logging.WARNING
        logger.log(
            level,
            f"Run finished with status {stats.status.value}",
            extra={
                "event": "run.reported",
                "run_log_id": log_id,
                "status": stats.status.value,
                "jobs_scraped": stats.jobs_scraped,
                "jobs_filtered": stats.jobs_filtered,
                "jobs_inserted": stats.jobs_inserted,
                "jobs_duplicated": stats.jobs_duplicated,
                "api_calls_made": stats.api_calls_made,
                "error_message": stats.error_message,
            },
        )
