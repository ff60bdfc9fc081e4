"""Database schema definition and ORM models.

Timestamps are stored as ISO 8601 strings (``YYYY-MM-DDTHH:MM:SS.ffffffZ``),
which sort chronologically as plain text.
"""

import logging

from sqlalchemy import Column, Index, Integer, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from sponsor_scanner.domain.models import JobRecord, RunLogEntry, RunStats, RunStatus, WorkSetting
from sponsor_scanner.utils.timestamps import format_timestamp, parse_timestamp, utc_now

logger = logging.getLogger(__name__)

Base = declarative_base()


class JobModel(Base):
    """ORM model for the jobs table, keyed by the job fingerprint."""

    __tablename__ = "jobs"

    job_hash = Column(String(32), primary_key=True, nullable=False)

    company_name = Column(Text, nullable=False)
    job_title = Column(Text, nullable=False)
    posting_time = Column(Text, nullable=False, default="")
    job_location = Column(Text, nullable=False, default="")
    job_type = Column(Text, nullable=False, default="")
    job_description = Column(Text, nullable=False, default="")
    work_setting = Column(String(20), nullable=False, default=WorkSetting.NOT_SPECIFIED.value)
    ats_apply_link = Column(Text, nullable=False, default="")

    scraped_at = Column(String(50), nullable=False)
    created_at = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_jobs_scraped_at", "scraped_at"),
        Index("idx_jobs_company_name", "company_name"),
    )

    def to_domain(self) -> JobRecord:
        return JobRecord(
            company_name=self.company_name,
            job_title=self.job_title,
            posting_time=self.posting_time,
            job_location=self.job_location,
            job_type=self.job_type,
            job_description=self.job_description,
            work_setting=WorkSetting(self.work_setting),
            ats_apply_link=self.ats_apply_link,
            scraped_at=parse_timestamp(self.scraped_at),
        )

    @classmethod
    def from_domain(cls, job_hash: str, record: JobRecord) -> "JobModel":
        return cls(
            job_hash=job_hash,
            company_name=record.company_name,
            job_title=record.job_title,
            posting_time=record.posting_time,
            job_location=record.job_location,
            job_type=record.job_type,
            job_description=record.job_description,
            work_setting=record.work_setting.value,
            ats_apply_link=record.ats_apply_link,
            scraped_at=format_timestamp(record.scraped_at),
            created_at=format_timestamp(utc_now()),
        )


class SponsorCompanyModel(Base):
    """ORM model for the h1b_companies reference table."""

    __tablename__ = "h1b_companies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_name = Column(Text, nullable=False, unique=True)
    normalized_name = Column(Text, nullable=False)
    created_at = Column(String(50), nullable=False)


class RunLogModel(Base):
    """ORM model for the scraping_logs run history table."""

    __tablename__ = "scraping_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    run_timestamp = Column(String(50), nullable=False)

    jobs_scraped = Column(Integer, nullable=False, default=0)
    jobs_filtered = Column(Integer, nullable=False, default=0)
    jobs_inserted = Column(Integer, nullable=False, default=0)
    jobs_duplicated = Column(Integer, nullable=False, default=0)
    api_calls_made = Column(Integer, nullable=False, default=0)

    status = Column(String(20), nullable=False, default=RunStatus.SUCCESS.value)
    error_message = Column(Text, nullable=True)

    __table_args__ = (Index("idx_scraping_logs_run_timestamp", "run_timestamp"),)

    def to_domain(self) -> RunLogEntry:
        return RunLogEntry(
            id=self.id,
            run_timestamp=parse_timestamp(self.run_timestamp),
            jobs_scraped=self.jobs_scraped,
            jobs_filtered=self.jobs_filtered,
            jobs_inserted=self.jobs_inserted,
            jobs_duplicated=self.jobs_duplicated,
            api_calls_made=self.api_calls_made,
            status=RunStatus(self.status),
            error_message=self.error_message,
        )

    @classmethod
    def from_stats(cls, stats: RunStats, run_timestamp) -> "RunLogModel":
        return cls(
            run_timestamp=format_timestamp(run_timestamp),
            jobs_scraped=stats.jobs_scraped,
            jobs_filtered=stats.jobs_filtered,
            jobs_inserted=stats.jobs_inserted,
            jobs_duplicated=stats.jobs_duplicated,
            api_calls_made=stats.api_calls_made,
            status=stats.status.value,
            error_message=stats.error_message,
        )


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent)."""
    Base.metadata.create_all(engine, checkfirst=True)

    tables = inspect(engine).get_table_names()
    logger.debug(f"Database schema ready. Tables: {', '.join(tables)}")
