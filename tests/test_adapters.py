"""Unit tests for the SerpAPI search adapter."""

import json
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import requests

from sponsor_scanner.adapters import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
    SerpApiAdapter,
    get_adapter,
)
from sponsor_scanner.adapters.base import BaseAdapter
from sponsor_scanner.config.models import AdvancedConfig, AppConfig, SearchConfig

FIXTURES = Path(__file__).parent / "fixtures" / "serpapi_responses"


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def search_config():
    """Create search config."""
    return SearchConfig(query="Data Engineer", language="en")


@pytest.fixture
def adapter(search_config):
    """Create SerpAPI adapter."""
    adapter = SerpApiAdapter(api_key="test-key", search=search_config, timeout=30)
    yield adapter
    adapter.close()


@pytest.fixture
def jobs_page_response():
    """Load recorded Google Jobs page response."""
    with open(FIXTURES / "google_jobs_page.json") as f:
        return json.load(f)


@pytest.fixture
def no_results_response():
    """Load SerpAPI 'no results' response."""
    with open(FIXTURES / "google_jobs_no_results.json") as f:
        return json.load(f)


def mock_response(status_code=200, payload=None, reason="OK"):
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


# ============================================================================
# Base Adapter Tests
# ============================================================================


class TestBaseAdapter:
    """Tests for BaseAdapter abstract class."""

    def test_cannot_instantiate_abstract_class(self):
        """Test that BaseAdapter cannot be instantiated directly."""
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            BaseAdapter(timeout=30)

    @pytest.mark.parametrize("timeout", [4, 301])
    def test_timeout_out_of_range(self, search_config, timeout):
        """Test timeouts outside 5-300 seconds are rejected."""
        with pytest.raises(AdapterConfigurationError, match="Timeout"):
            SerpApiAdapter(api_key="k", search=search_config, timeout=timeout)

    def test_empty_user_agent(self, search_config):
        """Test an empty user agent is rejected."""
        with pytest.raises(AdapterConfigurationError):
            SerpApiAdapter(api_key="k", search=search_config, user_agent="  ")

    def test_user_agent_header(self, search_config):
        """Test the session sends the configured user agent."""
        adapter = SerpApiAdapter(api_key="k", search=search_config, user_agent="Scanner/2.0")
        assert adapter._session.headers["User-Agent"] == "Scanner/2.0"

    def test_timeout_becomes_adapter_timeout(self, adapter):
        """Test request timeouts are translated."""
        with patch.object(adapter._session, "request", side_effect=requests.exceptions.Timeout()):
            with pytest.raises(AdapterTimeoutError) as exc_info:
                adapter._make_request("https://example.com")

        assert exc_info.value.url == "https://example.com"

    def test_connection_error_becomes_http_error(self, adapter):
        """Test connection failures become AdapterHTTPError with status 0."""
        error = requests.exceptions.ConnectionError("refused")
        with patch.object(adapter._session, "request", side_effect=error):
            with pytest.raises(AdapterHTTPError) as exc_info:
                adapter._make_request("https://example.com")

        assert exc_info.value.status_code == 0

    @pytest.mark.parametrize("status_code,reason", [(401, "Unauthorized"), (429, "Too Many Requests"), (500, "Server Error")])
    def test_http_error_status(self, adapter, status_code, reason):
        """Test 4xx/5xx responses raise AdapterHTTPError."""
        response = mock_response(status_code=status_code, reason=reason)
        with patch.object(adapter._session, "request", return_value=response):
            with pytest.raises(AdapterHTTPError, match=f"HTTP {status_code}") as exc_info:
                adapter._make_request("https://example.com")

        assert exc_info.value.status_code == status_code

    def test_invalid_json(self, adapter):
        """Test an undecodable body raises AdapterResponseError."""
        response = mock_response(payload=ValueError("Expecting value"))
        with patch.object(adapter._session, "request", return_value=response):
            with pytest.raises(AdapterResponseError, match="JSON"):
                adapter._make_request("https://example.com")

    def test_all_errors_are_adapter_errors(self):
        """Test the exception hierarchy."""
        for cls in (AdapterHTTPError, AdapterTimeoutError, AdapterResponseError, AdapterConfigurationError):
            assert issubclass(cls, AdapterError)


# ============================================================================
# SerpAPI Adapter Tests
# ============================================================================


class TestSerpApiAdapter:
    """Tests for SerpApiAdapter."""

    def test_requires_api_key(self, search_config):
        """Test a missing API key is a configuration error."""
        with pytest.raises(AdapterConfigurationError, match="key"):
            SerpApiAdapter(api_key="", search=search_config)
        with pytest.raises(AdapterConfigurationError):
            SerpApiAdapter(api_key=None, search=search_config)

    def test_build_params(self, adapter):
        """Test the query parameters sent to SerpAPI."""
        assert adapter.build_params(20) == {
            "engine": "google_jobs",
            "q": "Data Engineer",
            "hl": "en",
            "api_key": "test-key",
            "start": 20,
        }

    def test_build_params_with_location(self):
        """Test location is only sent when configured."""
        adapter = SerpApiAdapter(
            api_key="test-key",
            search=SearchConfig(query="Data Engineer", location="Austin, TX"),
        )
        assert adapter.build_params(0)["location"] == "Austin, TX"

    def test_fetch_page(self, adapter, jobs_page_response):
        """Test fetching and parsing a page."""
        response = mock_response(payload=jobs_page_response)
        with patch.object(adapter._session, "request", return_value=response) as request:
            page = adapter.fetch_page(10)

        kwargs = request.call_args.kwargs
        assert kwargs["url"] == SerpApiAdapter.API_URL
        assert kwargs["params"]["start"] == 10
        assert kwargs["timeout"] == 30

        assert page.total_available == 120
        assert [item.company_name for item in page.results] == ["Google LLC", "Globex", "Initech"]
        first = page.results[0]
        assert first.detected_extensions.schedule_type == "Full-time"
        assert first.apply_options[1].link == "https://careers.google.com/jobs/results/1"
        assert page.results[2].apply_options == []

    def test_no_results_is_empty_page(self, adapter, no_results_response):
        """Test the provider's 'no results' error ends pagination quietly."""
        with patch.object(adapter, "_make_request", return_value=no_results_response):
            page = adapter.fetch_page(30)

        assert page.results == []

    def test_provider_error(self, adapter):
        """Test other provider errors raise AdapterResponseError."""
        payload = {"error": "Invalid API key. Your API key should be here: https://serpapi.com/manage-api-key"}
        with patch.object(adapter, "_make_request", return_value=payload):
            with pytest.raises(AdapterResponseError, match="SerpAPI error: Invalid API key"):
                adapter.fetch_page(0)

    def test_http_error_propagates(self, adapter):
        """Test HTTP errors are not swallowed."""
        error = AdapterHTTPError("HTTP 500: Server Error", status_code=500, url=SerpApiAdapter.API_URL)
        with patch.object(adapter, "_make_request", side_effect=error):
            with pytest.raises(AdapterHTTPError):
                adapter.fetch_page(0)


class TestParseResponse:
    """Tests for SerpApiAdapter.parse_response."""

    def test_not_an_object(self):
        """Test a non-object payload is rejected."""
        with pytest.raises(AdapterResponseError, match="Expected JSON object"):
            SerpApiAdapter.parse_response(["not", "a", "dict"])

    def test_missing_jobs_results(self):
        """Test a payload without jobs_results is an empty page."""
        page = SerpApiAdapter.parse_response({"search_metadata": {}})
        assert page.results == []
        assert page.total_available is None

    def test_jobs_results_not_a_list(self):
        """Test a malformed jobs_results field is rejected."""
        with pytest.raises(AdapterResponseError, match="array"):
            SerpApiAdapter.parse_response({"jobs_results": {"title": "x"}})

    def test_invalid_item(self):
        """Test an item that fails validation is rejected."""
        with pytest.raises(AdapterResponseError, match="Invalid SerpAPI payload"):
            SerpApiAdapter.parse_response({"jobs_results": [{"extensions": "not-a-list"}]})


class TestGetAdapter:
    """Tests for get_adapter factory."""

    def test_builds_serpapi_adapter(self):
        """Test the factory wires config into the adapter."""
        config = AppConfig(
            search=SearchConfig(query="Analytics Engineer"),
            advanced=AdvancedConfig(http_request_timeout=45, user_agent="Scanner/2.0"),
        )

        adapter = get_adapter(config, "secret")

        assert isinstance(adapter, SerpApiAdapter)
        assert adapter.timeout == 45
        assert adapter.user_agent == "Scanner/2.0"
        assert adapter.build_params(0)["q"] == "Analytics Engineer"
        assert adapter.build_params(0)["api_key"] == "secret"

    def test_missing_key(self):
        """Test a missing key surfaces as a configuration error."""
        with pytest.raises(AdapterConfigurationError):
            get_adapter(AppConfig(), "")
