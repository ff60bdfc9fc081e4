"""Tests for the paginated fetch stage."""

from unittest.mock import Mock

import pytest

from sponsor_scanner.adapters.exceptions import AdapterHTTPError
from sponsor_scanner.domain.models import RunStats, RunStatus
from sponsor_scanner.matching import CompanyMatcher
from sponsor_scanner.normalization import JobRecordBuilder
from sponsor_scanner.pipeline.fetch import MAX_PAGES, PAGE_SIZE, FetchPipeline
from tests.helpers import FIXED_NOW, ScriptedSearchProvider, make_item


def full_page(sponsors=("Google", "Acme Corp", "Initech"), size=PAGE_SIZE):
    """A page of ``size`` items of which the given names are sponsors."""
    items = [make_item(name, title=f"Engineer {i}") for i, name in enumerate(sponsors)]
    items += [make_item(f"Globex {i}") for i in range(size - len(items))]
    return items


@pytest.fixture
def sleep():
    return Mock()


@pytest.fixture
def fetch_pipeline(reference_set, sleep):
    return FetchPipeline(
        matcher=CompanyMatcher(reference_set),
        builder=JobRecordBuilder(clock=lambda: FIXED_NOW),
        page_delay_seconds=1.0,
        sleep=sleep,
    )


class TestFetchPipeline:
    """Tests for FetchPipeline.run."""

    def test_constants(self):
        """Test paging constants."""
        assert PAGE_SIZE == 10
        assert MAX_PAGES == 3

    def test_stops_at_empty_page(self, fetch_pipeline, sleep):
        """Test a full page followed by an empty page."""
        provider = ScriptedSearchProvider([full_page(), []])

        records, stats = fetch_pipeline.run(provider.fetch_page)

        assert provider.offsets == [0, 10]
        assert stats.api_calls_made == 2
        assert stats.jobs_scraped == 10
        assert stats.jobs_filtered == 3
        assert stats.status == RunStatus.SUCCESS
        assert [r.company_name for r in records] == ["Google", "Acme Corp", "Initech"]
        sleep.assert_called_once_with(1.0)

    def test_stops_after_max_pages(self, fetch_pipeline, sleep):
        """Test at most three pages are requested."""
        provider = ScriptedSearchProvider([full_page(), full_page(), full_page(), full_page()])

        records, stats = fetch_pipeline.run(provider.fetch_page)

        assert provider.offsets == [0, 10, 20]
        assert stats.api_calls_made == 3
        assert stats.jobs_scraped == 30
        assert stats.jobs_filtered == 9
        assert len(records) == 9
        assert sleep.call_count == 2

    def test_short_page_continues(self, fetch_pipeline):
        """Test a partially filled page does not end the walk."""
        provider = ScriptedSearchProvider([full_page(size=4), []])

        records, stats = fetch_pipeline.run(provider.fetch_page)

        assert provider.offsets == [0, 10]
        assert stats.jobs_scraped == 4

    def test_first_page_empty(self, fetch_pipeline, sleep):
        """Test an empty first page ends the run with no records."""
        provider = ScriptedSearchProvider([[]])

        records, stats = fetch_pipeline.run(provider.fetch_page)

        assert records == []
        assert stats.api_calls_made == 1
        assert stats.jobs_scraped == 0
        sleep.assert_not_called()

    def test_no_sponsors(self, fetch_pipeline):
        """Test pages without sponsors still count as scraped."""
        provider = ScriptedSearchProvider([full_page(sponsors=()), []])

        records, stats = fetch_pipeline.run(provider.fetch_page)

        assert records == []
        assert stats.jobs_scraped == 10
        assert stats.jobs_filtered == 0

    def test_failure_mid_run(self, fetch_pipeline, sleep):
        """Test a failing page marks the stats failed and stops paging."""
        error = AdapterHTTPError("HTTP 500: Server Error", status_code=500, url="https://serpapi.com/search.json")
        provider = ScriptedSearchProvider([full_page(), error, full_page()])
        stats = RunStats()

        with pytest.raises(AdapterHTTPError):
            fetch_pipeline.run(provider.fetch_page, stats)

        assert provider.offsets == [0, 10]
        assert stats.api_calls_made == 2
        assert stats.jobs_scraped == 10
        assert stats.jobs_filtered == 3
        assert stats.status == RunStatus.ERROR
        assert "HTTP 500" in stats.error_message
        sleep.assert_called_once()

    def test_failure_on_first_page(self, fetch_pipeline, sleep):
        """Test a failing first page counts one call and never sleeps."""
        provider = ScriptedSearchProvider([TimeoutError("timed out")])
        stats = RunStats()

        with pytest.raises(TimeoutError):
            fetch_pipeline.run(provider.fetch_page, stats)

        assert stats.api_calls_made == 1
        assert stats.status == RunStatus.ERROR
        sleep.assert_not_called()

    def test_zero_delay_never_sleeps(self, reference_set, sleep):
        """Test a zero page delay skips sleeping entirely."""
        pipeline = FetchPipeline(
            CompanyMatcher(reference_set),
            JobRecordBuilder(clock=lambda: FIXED_NOW),
            page_delay_seconds=0,
            sleep=sleep,
        )
        provider = ScriptedSearchProvider([full_page(), full_page(), full_page()])

        pipeline.run(provider.fetch_page)

        sleep.assert_not_called()

    def test_creates_stats_when_omitted(self, fetch_pipeline):
        """Test run returns fresh stats when none are passed."""
        _, stats = fetch_pipeline.run(ScriptedSearchProvider([]).fetch_page)
        assert isinstance(stats, RunStats)
        assert stats.api_calls_made == 1
