"""Job record builder for converting SearchResultItem to JobRecord.

The builder is the single place where a raw provider item turns into the
persisted shape. Filtering happens before it (sponsor matching) and
deduplication after it.
"""

from datetime import datetime
from typing import Callable, Iterable, List

from sponsor_scanner.domain.models import JobRecord, SearchResultItem
from sponsor_scanner.logging import get_logger
from sponsor_scanner.utils.timestamps import utc_now

from .heuristics import (
    extract_job_type,
    extract_posting_time,
    extract_work_setting,
    select_apply_link,
)

logger = get_logger(__name__, component="normalization")


class JobRecordBuilder:
    """Builds JobRecord instances from search provider items.

    Responsibilities:
    - Copy the textual fields, defaulting missing ones to ''
    - Derive posting time, job type, work setting and apply link
    - Stamp scraped_at from the injected clock
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        """Initialize JobRecordBuilder.

        Args:
            clock: Returns the current UTC time; injectable for tests
        """
        self.clock = clock

    def build(self, item: SearchResultItem) -> JobRecord:
        """Build a JobRecord from one search result item.

        Args:
            item: Raw posting from the search provider

        Returns:
            Immutable JobRecord
        """
        job_type = item.detected_extensions.schedule_type or extract_job_type(item.extensions)

        record = JobRecord(
            company_name=item.company_name,
            job_title=item.title,
            posting_time=extract_posting_time(item.detected_extensions, item.extensions),
            job_location=item.location,
            job_type=job_type,
            job_description=item.description,
            work_setting=extract_work_setting(item.description, item.extensions),
            ats_apply_link=select_apply_link(item.apply_options),
            scraped_at=self.clock(),
        )

        logger.debug(
            "Built job record",
            extra={
                "event": "normalization.record.built",
                "company_name": record.company_name,
                "job_title": record.job_title,
                "work_setting": record.work_setting.value,
            },
        )

        return record

    def build_all(self, items: Iterable[SearchResultItem]) -> List[JobRecord]:
        """Build records for several items, preserving order."""
        return [self.build(item) for item in items]
