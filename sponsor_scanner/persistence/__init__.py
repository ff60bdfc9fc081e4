"""Persistence layer for database operations using SQLite.

Public API:
    # Database handle
    - Database(database_url).connect() / .session() / .close()
    - init_database(database_url) -> Database

    # Store facade used by the pipeline
    - JobStore: job batches, reference names, run history, stats, export
    - ScrapingSummary: aggregate statistics

    # Repository classes (operate on a caller-owned session)
    - JobRepository, SponsorCompanyRepository, RunLogRepository

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Database connection/initialization failures
    - DataIntegrityError: Constraint violations

Example usage:
    >>> from sponsor_scanner.persistence import JobStore, init_database
    >>> database = init_database("sqlite:///./data/h1b_jobs.db")
    >>> store = JobStore(database)
    >>> store.read_back(limit=10)
    >>> database.close()
"""

from .database import Database, init_database
from .exceptions import DatabaseConnectionError, DataIntegrityError, PersistenceError
from .repositories import JobRepository, RunLogRepository, SponsorCompanyRepository
from .store import JobStore, ScrapingSummary

__all__ = [
    # Database
    "Database",
    "init_database",
    # Store
    "JobStore",
    "ScrapingSummary",
    # Repositories
    "JobRepository",
    "SponsorCompanyRepository",
    "RunLogRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "DataIntegrityError",
]
