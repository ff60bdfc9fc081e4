"""Paginated fetch, filter and transform stage of a run."""

import time
from typing import Callable, List, Optional, Tuple

from sponsor_scanner.domain.models import JobRecord, RunStats, SearchPage
from sponsor_scanner.logging import get_logger
from sponsor_scanner.logging.context import log_context
from sponsor_scanner.matching.engine import CompanyMatcher
from sponsor_scanner.normalization.service import JobRecordBuilder

logger = get_logger(__name__, component="fetch")

PAGE_SIZE = 10
MAX_PAGES = 3

FetchPage = Callable[[int], SearchPage]


class FetchPipeline:
    """Walks the result pages and keeps postings from sponsor companies.

    Pages are requested strictly one after another, at offsets 0, 10, 20.
    The walk stops early at the first empty page.
    """

    def __init__(
        self,
        matcher: CompanyMatcher,
        builder: JobRecordBuilder,
        page_delay_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.matcher = matcher
        self.builder = builder
        self.page_delay_seconds = page_delay_seconds
        self.sleep = sleep

    def run(
        self, fetch_page: FetchPage, stats: Optional[RunStats] = None
    ) -> Tuple[List[JobRecord], RunStats]:
        """Fetch up to MAX_PAGES pages and build records for sponsor postings.

        Args:
            fetch_page: Returns the SearchPage starting at the given offset
            stats: Run-owned statistics to update (created if omitted)

        Returns:
            (records in fetch order, stats)

        Raises:
            Whatever ``fetch_page`` raises. Stats are marked failed first and
            no further pages are requested.
        """
        stats = stats if stats is not None else RunStats()
        records: List[JobRecord] = []

        for page_number in range(1, MAX_PAGES + 1):
            offset = (page_number - 1) * PAGE_SIZE

            with log_context(page=page_number, offset=offset):
                stats.api_calls_made += 1
                try:
                    page = fetch_page(offset)
                except Exception as e:
                    stats.mark_failed(e)
                    logger.error(
                        f"Fetching page {page_number} failed: {e}",
                        extra={"event": "fetch.page.failed", "error_type": type(e).__name__},
                    )
                    raise

                if not page.results:
                    logger.info("No more jobs found", extra={"event": "fetch.page.empty"})
                    break

                stats.jobs_scraped += len(page.results)
                sponsors = [item for item in page.results if self.matcher.is_sponsor(item.company_name)]
                stats.jobs_filtered += len(sponsors)
                records.extend(self.builder.build_all(sponsors))

                logger.info(
                    f"Processed {len(page.results)} jobs from page {page_number}",
                    extra={
                        "event": "fetch.page.fetched",
                        "result_count": len(page.results),
                        "sponsor_count": len(sponsors),
                    },
                )

            if page_number < MAX_PAGES and self.page_delay_seconds > 0:
                self.sleep(self.page_delay_seconds)

        logger.info(
            "Fetch completed",
            extra={
                "event": "fetch.completed",
                "api_calls_made": stats.api_calls_made,
                "jobs_scraped": stats.jobs_scraped,
                "jobs_filtered": stats.jobs_filtered,
            },
        )
        return records, stats
