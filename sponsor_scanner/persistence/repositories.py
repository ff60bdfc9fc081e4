"""Data access layer (repositories) for persistence operations.

Repositories work on a caller-owned session and never commit; the session
scope (``Database.session()``) decides whether a unit of work is kept.
SQLAlchemy errors are translated to PersistenceError subclasses.
"""

import logging
from datetime import datetime
from typing import Iterable, Iterator, List, Set

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from sponsor_scanner.domain.models import JobRecord, RunLogEntry, RunStats
from sponsor_scanner.matching.normalizer import normalize_company_name
from sponsor_scanner.utils.timestamps import format_timestamp, utc_now

from .exceptions import DataIntegrityError, PersistenceError
from .schema import JobModel, RunLogModel, SponsorCompanyModel

logger = logging.getLogger(__name__)


class JobRepository:
    """Repository for the jobs table."""

    def __init__(self, session: Session):
        self.session = session

    def exists(self, job_hash: str) -> bool:
        """Check whether a job with this fingerprint is stored (or pending)."""
        try:
            return self.session.get(JobModel, job_hash) is not None
        except SQLAlchemyError as e:
            logger.error(f"Error checking job {job_hash}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to look up job: {e}") from e

    def insert_if_absent(self, job_hash: str, record: JobRecord) -> bool:
        """Insert the record unless its fingerprint is already present.

        Rows added earlier in the same session count as present, so a batch
        containing the same fingerprint twice inserts it once.

        Returns:
            True if inserted, False if it was a duplicate

        Raises:
            DataIntegrityError: On a constraint violation
            PersistenceError: On any other database error
        """
        if self.exists(job_hash):
            return False

        try:
            self.session.add(JobModel.from_domain(job_hash, record))
            self.session.flush()
            return True
        except IntegrityError as e:
            logger.error(f"Integrity error inserting job {job_hash}: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to insert job due to constraint violation: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error inserting job {job_hash}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to insert job: {e}") from e

    def get_recent(self, limit: int = 50) -> List[JobRecord]:
        """Most recently scraped jobs, newest first."""
        try:
            stmt = (
                select(JobModel)
                .order_by(JobModel.scraped_at.desc(), JobModel.created_at.desc())
                .limit(limit)
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving recent jobs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve recent jobs: {e}") from e

    def iter_all(self) -> Iterator[JobRecord]:
        """All stored jobs, newest scraped_at first."""
        try:
            stmt = select(JobModel).order_by(JobModel.scraped_at.desc(), JobModel.created_at.desc())
            for model in self.session.execute(stmt).scalars():
                yield model.to_domain()
        except SQLAlchemyError as e:
            logger.error(f"Error reading jobs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to read jobs: {e}") from e

    def count(self) -> int:
        return self._scalar(select(func.count()).select_from(JobModel))

    def count_scraped_since(self, since: datetime) -> int:
        """Count jobs scraped at or after ``since``."""
        stmt = (
            select(func.count())
            .select_from(JobModel)
            .where(JobModel.scraped_at >= format_timestamp(since))
        )
        return self._scalar(stmt)

    def count_distinct_companies(self) -> int:
        return self._scalar(select(func.count(func.distinct(JobModel.company_name))))

    def _scalar(self, stmt) -> int:
        try:
            return int(self.session.execute(stmt).scalar_one())
        except SQLAlchemyError as e:
            logger.error(f"Error running job count query: {e}", exc_info=True)
            raise PersistenceError(f"Failed to count jobs: {e}") from e


class SponsorCompanyRepository:
    """Repository for the h1b_companies reference table."""

    def __init__(self, session: Session):
        self.session = session

    def insert_many(self, names: Iterable[str]) -> int:
        """Insert company names, skipping ones already stored.

        Returns:
            Number of rows actually inserted

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            existing = set(self.session.execute(select(SponsorCompanyModel.company_name)).scalars())
            created_at = format_timestamp(utc_now())
            inserted = 0

            for name in names:
                company_name = (name or "").strip()
                if not company_name or company_name in existing:
                    continue

                self.session.add(
                    SponsorCompanyModel(
                        company_name=company_name,
                        normalized_name=normalize_company_name(company_name),
                        created_at=created_at,
                    )
                )
                existing.add(company_name)
                inserted += 1

            self.session.flush()
            return inserted

        except IntegrityError as e:
            logger.error(f"Integrity error inserting sponsor companies: {e}", exc_info=True)
            raise DataIntegrityError(f"Failed to insert companies: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Error inserting sponsor companies: {e}", exc_info=True)
            raise PersistenceError(f"Failed to insert companies: {e}") from e

    def get_normalized_names(self) -> Set[str]:
        """All stored names in light-normalized form."""
        try:
            stmt = select(SponsorCompanyModel.normalized_name)
            return {name for name in self.session.execute(stmt).scalars() if name}
        except SQLAlchemyError as e:
            logger.error(f"Error reading sponsor companies: {e}", exc_info=True)
            raise PersistenceError(f"Failed to read companies: {e}") from e

    def count(self) -> int:
        try:
            stmt = select(func.count()).select_from(SponsorCompanyModel)
            return int(self.session.execute(stmt).scalar_one())
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to count companies: {e}") from e


class RunLogRepository:
    """Repository for the scraping_logs run history table."""

    def __init__(self, session: Session):
        self.session = session

    def append(self, stats: RunStats, run_timestamp: datetime) -> int:
        """Append one run row and return its id."""
        try:
            model = RunLogModel.from_stats(stats, run_timestamp)
            self.session.add(model)
            self.session.flush()
            return model.id
        except SQLAlchemyError as e:
            logger.error(f"Error appending run log: {e}", exc_info=True)
            raise PersistenceError(f"Failed to append run log: {e}") from e

    def get_recent(self, limit: int = 10) -> List[RunLogEntry]:
        """Most recent runs, newest first."""
        try:
            stmt = (
                select(RunLogModel)
                .order_by(RunLogModel.run_timestamp.desc(), RunLogModel.id.desc())
                .limit(limit)
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving run logs: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve run logs: {e}") from e
