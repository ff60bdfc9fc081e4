"""Fingerprint-based deduplication of job records."""

from typing import Sequence

from sponsor_scanner.domain.models import JobRecord
from sponsor_scanner.logging import get_logger
from sponsor_scanner.persistence.store import JobStore
from sponsor_scanner.utils.hashing import fingerprint_record

from .models import DedupResult

logger = get_logger(__name__, component="dedup")


class Deduplicator:
    """Stores records whose fingerprint has not been seen before.

    The fingerprint (see ``utils.hashing``) is the storage primary key, so
    re-submitting a record any number of times stores it once.
    """

    def __init__(self, store: JobStore):
        self.store = store

    def insert_all(self, records: Sequence[JobRecord]) -> DedupResult:
        """Insert a batch atomically.

        Raises:
            PersistenceError: If storage fails; nothing from the batch is kept
        """
        if not records:
            return DedupResult()

        pairs = [(fingerprint_record(record), record) for record in records]
        inserted, duplicated = self.store.insert_job_batch(pairs)
        result = DedupResult(inserted=inserted, duplicated=duplicated)

        logger.info(
            f"Stored {inserted} new jobs ({duplicated} duplicates)",
            extra={
                "event": "dedup.batch.completed",
                "batch_size": len(records),
                "inserted": inserted,
                "duplicated": duplicated,
            },
        )
        return result
