"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError so callers can treat
any storage failure uniformly.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors.

    A failed batch is always rolled back in full before this is raised.
    """

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when the database cannot be opened, validated, or used.

    Examples:
    - Invalid database URL
    - Database file or directory not accessible
    - Handle used before connect() or after close()
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised when a database constraint is violated.

    Examples:
    - Primary key violation on jobs.job_hash
    - Unique constraint violation on h1b_companies.company_name
    """

    pass
