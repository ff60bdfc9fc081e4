"""Database connection and session management.

The ``Database`` handle owns the SQLAlchemy engine and session factory. It is
created by the caller, passed explicitly to the store, and closed by the
caller on every exit path.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from sponsor_scanner.logging import get_logger

from .exceptions import DatabaseConnectionError
from .schema import create_schema

logger = get_logger(__name__, component="database")


class Database:
    """Handle to one SQLite database.

    Example:
        >>> database = Database("sqlite:///./data/h1b_jobs.db").connect()
        >>> with database.session() as session:
        ...     JobRepository(session).count()
        >>> database.close()
    """

    def __init__(self, database_url: str):
        if not database_url or not isinstance(database_url, str):
            raise DatabaseConnectionError("Database URL must be a non-empty string")

        self.database_url = database_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise DatabaseConnectionError("Database not connected. Call connect() first")
        return self._engine

    def connect(self) -> "Database":
        """Create the engine, validate the connection and ensure the schema.

        Returns:
            self, for chaining

        Raises:
            DatabaseConnectionError: If the database cannot be opened
        """
        if self._engine is not None:
            return self

        logger.info(
            "Initializing database",
            extra={"event": "database.initializing", "database_url": self.database_url},
        )

        try:
            url = make_url(self.database_url)
        except ArgumentError as e:
            raise DatabaseConnectionError(f"Invalid database URL: {self.database_url}") from e

        is_sqlite = url.get_backend_name() == "sqlite"
        if is_sqlite:
            _ensure_parent_directory(url.database)

        try:
            engine = create_engine(
                url,
                echo=False,
                pool_pre_ping=True,
                connect_args={"check_same_thread": False, "timeout": 30} if is_sqlite else {},
            )
            if is_sqlite:
                _configure_sqlite(engine)

            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()

            create_schema(engine)
        except SQLAlchemyError as e:
            logger.error(
                "Failed to initialize database",
                extra={"event": "database.init_failed", "error_type": type(e).__name__},
                exc_info=True,
            )
            raise DatabaseConnectionError(f"Failed to initialize database: {e}") from e

        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine,
            autoflush=True,
            expire_on_commit=False,
        )

        logger.info(
            "Database initialized",
            extra={"event": "database.initialized", "database_url": self.database_url},
        )
        return self

    def ensure_schema(self) -> None:
        """Create missing tables (idempotent)."""
        try:
            create_schema(self.engine)
        except SQLAlchemyError as e:
            raise DatabaseConnectionError(f"Failed to create schema: {e}") from e

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide a session that commits on success and rolls back on error.

        Raises:
            DatabaseConnectionError: If the database is not connected
        """
        if self._session_factory is None:
            raise DatabaseConnectionError("Database not connected. Call connect() first")

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.warning(
                "Database session rolled back",
                extra={
                    "event": "database.session.rolled_back",
                    "error_type": type(e).__name__,
                },
            )
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Dispose the engine. Safe to call more than once."""
        if self._engine is None:
            return

        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Database connections closed", extra={"event": "database.closed"})


def init_database(database_url: str) -> Database:
    """Create and connect a Database handle."""
    return Database(database_url).connect()


def _ensure_parent_directory(database: Optional[str]) -> None:
    if not database or database == ":memory:":
        return

    parent = Path(database).parent
    if not parent.exists():
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DatabaseConnectionError(f"Cannot create database directory {parent}: {e}") from e
        logger.info(
            "Created database directory",
            extra={"event": "database.directory.created", "path": str(parent)},
        )


def _configure_sqlite(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()
