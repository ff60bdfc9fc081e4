"""SerpAPI Google Jobs adapter implementation."""

from typing import Any, Dict

from pydantic import ValidationError

from sponsor_scanner.config.models import SearchConfig
from sponsor_scanner.domain.models import SearchPage, SearchResultItem
from sponsor_scanner.logging import get_logger

from .base import DEFAULT_USER_AGENT, BaseAdapter
from .exceptions import AdapterConfigurationError, AdapterResponseError

logger = get_logger(__name__, component="adapter")

# SerpAPI reports an exhausted result set as an error inside a 200 response
NO_RESULTS_MARKER = "hasn't returned any results"


class SerpApiAdapter(BaseAdapter):
    """Adapter for the SerpAPI Google Jobs engine.

    API Details:
        Endpoint: https://serpapi.com/search.json
        Method: GET
        Authentication: api_key query parameter
        Pagination: ``start`` offset, 10 results per page
        Response: JSON object with a 'jobs_results' array
    """

    ADAPTER_NAME = "serpapi"
    API_URL = "https://serpapi.com/search.json"
    ENGINE = "google_jobs"

    def __init__(
        self,
        api_key: str,
        search: SearchConfig,
        timeout: int = 30,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        if not api_key or not api_key.strip():
            raise AdapterConfigurationError("SerpAPI key is required")

        super().__init__(timeout=timeout, user_agent=user_agent)
        self._api_key = api_key.strip()
        self.search = search

    def build_params(self, offset: int) -> Dict[str, Any]:
        """Query parameters for the page starting at ``offset``."""
        params: Dict[str, Any] = {
            "engine": self.ENGINE,
            "q": self.search.query,
            "hl": self.search.language,
            "api_key": self._api_key,
            "start": offset,
        }
        if self.search.location:
            params["location"] = self.search.location
        return params

    def fetch_page(self, offset: int) -> SearchPage:
        """Fetch one page of Google Jobs results.

        Args:
            offset: Zero-based index of the first result

        Returns:
            SearchPage with the page's results (empty when exhausted)

        Raises:
            AdapterError: On transport failures, invalid payloads, or
                provider-reported errors
        """
        logger.info(
            "Fetching jobs from SerpAPI",
            extra={
                "event": "adapter.page.requested",
                "adapter": self.ADAPTER_NAME,
                "query": self.search.query,
                "offset": offset,
            },
        )

        data = self._make_request(self.API_URL, params=self.build_params(offset))
        page = self.parse_response(data)

        logger.info(
            "Fetched SerpAPI page",
            extra={
                "event": "adapter.page.fetched",
                "adapter": self.ADAPTER_NAME,
                "offset": offset,
                "result_count": len(page.results),
            },
        )
        return page

    @staticmethod
    def parse_response(data: Any) -> SearchPage:
        """Convert a decoded SerpAPI payload into a SearchPage.

        Raises:
            AdapterResponseError: If the payload is not an object, reports an
                error, or does not validate
        """
        if not isinstance(data, dict):
            raise AdapterResponseError(
                f"Expected JSON object response, got {type(data).__name__}"
            )

        error = data.get("error")
        if error:
            if NO_RESULTS_MARKER in str(error):
                logger.info(
                    "SerpAPI reported no results",
                    extra={"event": "adapter.page.no_results"},
                )
                return SearchPage()
            raise AdapterResponseError(f"SerpAPI error: {error}")

        jobs_data = data.get("jobs_results") or []
        if not isinstance(jobs_data, list):
            raise AdapterResponseError(
                f"Expected 'jobs_results' field to be array, got {type(jobs_data).__name__}"
            )

        total = None
        search_information = data.get("search_information")
        if isinstance(search_information, dict):
            total = search_information.get("total_results")

        try:
            results = [SearchResultItem.model_validate(job) for job in jobs_data]
            return SearchPage(results=results, total_available=total)
        except ValidationError as e:
            raise AdapterResponseError(f"Invalid SerpAPI payload: {e}") from e
