"""JobStore: the storage operations the scanner needs, one transaction each.

Each public method opens its own session scope on the Database handle, so
every call either applies fully or not at all.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Sequence, Set, Tuple, Union

from sqlalchemy.exc import SQLAlchemyError

from sponsor_scanner.domain.models import JobRecord, RunLogEntry, RunStats
from sponsor_scanner.export.csv_writer import write_records
from sponsor_scanner.logging import get_logger
from sponsor_scanner.utils.timestamps import utc_now

from .database import Database
from .exceptions import PersistenceError
from .repositories import JobRepository, RunLogRepository, SponsorCompanyRepository

logger = get_logger(__name__, component="persistence")

RECENT_WINDOW = timedelta(hours=24)
RECENT_RUNS_LIMIT = 10


@dataclass
class ScrapingSummary:
    """Aggregate view over stored jobs and run history."""

    total_jobs: int = 0
    jobs_last_24h: int = 0
    distinct_companies: int = 0
    sponsor_companies: int = 0
    recent_runs: List[RunLogEntry] = field(default_factory=list)


class JobStore:
    """Facade over the repositories, bound to one Database handle."""

    def __init__(self, database: Database, clock: Callable[[], datetime] = utc_now):
        self.database = database
        self.clock = clock

    def ensure_schema(self) -> None:
        self.database.ensure_schema()

    def insert_companies(self, names: Iterable[str]) -> int:
        """Store reference company names, ignoring ones already present.

        Returns:
            Number of newly stored names
        """
        with _translate_errors("insert companies"):
            with self.database.session() as session:
                inserted = SponsorCompanyRepository(session).insert_many(names)

        logger.info(
            "Stored sponsor companies",
            extra={"event": "persistence.companies.inserted", "inserted": inserted},
        )
        return inserted

    def load_reference_names(self) -> Set[str]:
        """All stored sponsor names in light-normalized form."""
        with _translate_errors("load reference names"):
            with self.database.session() as session:
                return SponsorCompanyRepository(session).get_normalized_names()

    def insert_job_batch(self, pairs: Sequence[Tuple[str, JobRecord]]) -> Tuple[int, int]:
        """Insert (fingerprint, record) pairs whose fingerprint is not yet stored.

        The whole batch is one transaction: on any failure nothing is kept.

        Returns:
            (inserted, duplicated)

        Raises:
            PersistenceError: If the batch could not be applied
        """
        if not pairs:
            return 0, 0

        inserted = duplicated = 0
        with _translate_errors("insert job batch"):
            with self.database.session() as session:
                repo = JobRepository(session)
                for job_hash, record in pairs:
                    if repo.insert_if_absent(job_hash, record):
                        inserted += 1
                    else:
                        duplicated += 1

        return inserted, duplicated

    def append_run_log(self, stats: RunStats) -> int:
        """Append one run history row stamped with the current time.

        Returns:
            Row id of the new entry
        """
        with _translate_errors("append run log"):
            with self.database.session() as session:
                return RunLogRepository(session).append(stats, self.clock())

    def read_back(self, limit: int = 50) -> List[JobRecord]:
        """Most recently scraped jobs, newest first."""
        with _translate_errors("read jobs"):
            with self.database.session() as session:
                return JobRepository(session).get_recent(limit)

    def get_scraping_stats(self) -> ScrapingSummary:
        with _translate_errors("read statistics"):
            with self.database.session() as session:
                jobs = JobRepository(session)
                return ScrapingSummary(
                    total_jobs=jobs.count(),
                    jobs_last_24h=jobs.count_scraped_since(self.clock() - RECENT_WINDOW),
                    distinct_companies=jobs.count_distinct_companies(),
                    sponsor_companies=SponsorCompanyRepository(session).count(),
                    recent_runs=RunLogRepository(session).get_recent(RECENT_RUNS_LIMIT),
                )

    def export_to_csv(self, path: Union[str, Path]) -> int:
        """Write every stored job to a CSV file, newest first.

        Returns:
            Number of exported rows
        """
        with _translate_errors("export jobs"):
            with self.database.session() as session:
                count = write_records(path, JobRepository(session).iter_all())

        logger.info(
            "Exported jobs",
            extra={"event": "persistence.jobs.exported", "path": str(path), "rows": count},
        )
        return count


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    # Repositories translate their own errors; this catches commit failures
    try:
        yield
    except SQLAlchemyError as e:
        raise PersistenceError(f"Failed to {operation}: {e}") from e
