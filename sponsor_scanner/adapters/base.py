"""Shared HTTP plumbing for search providers.

A provider subclass only knows how to build its query and read its payload.
Everything transport-related (session reuse, timeouts, status handling, JSON
decoding) lives here and surfaces as ``AdapterError`` subclasses.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

import requests

from sponsor_scanner.domain.models import SearchPage
from sponsor_scanner.logging import get_logger

from .exceptions import (
    AdapterConfigurationError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)

logger = get_logger(__name__, component="adapter")

DEFAULT_USER_AGENT = "SponsorJobScanner/1.0"
MIN_TIMEOUT_SECONDS = 5
MAX_TIMEOUT_SECONDS = 300


class BaseAdapter(ABC):
    """A search provider reachable over HTTP.

    Attributes:
        timeout: Seconds to wait for each request
        user_agent: Sent with every request
    """

    def __init__(self, timeout: int = 30, user_agent: str = DEFAULT_USER_AGENT) -> None:
        """
        Raises:
            AdapterConfigurationError: If timeout is outside 5-300 seconds or
                user_agent is blank
        """
        if not MIN_TIMEOUT_SECONDS <= timeout <= MAX_TIMEOUT_SECONDS:
            raise AdapterConfigurationError(
                f"Timeout must be between {MIN_TIMEOUT_SECONDS} and {MAX_TIMEOUT_SECONDS} "
                f"seconds, got: {timeout}"
            )
        user_agent = (user_agent or "").strip()
        if not user_agent:
            raise AdapterConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent
        self._session = requests.Session()
        self._session.headers["User-Agent"] = user_agent

    @abstractmethod
    def fetch_page(self, offset: int) -> SearchPage:
        """Return the page of results that starts at ``offset``.

        An empty page means the provider has nothing more.

        Raises:
            AdapterHTTPError: Non-2xx status or no response at all
            AdapterTimeoutError: The request exceeded ``timeout``
            AdapterResponseError: The payload was unusable
        """

    def close(self) -> None:
        self._session.close()

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Send one request and return its decoded JSON body.

        ``params`` may hold credentials, so only the URL is ever logged.
        """
        logger.debug(
            f"{method} {url}",
            extra={"event": "adapter.http.request", "method": method, "url": url},
        )

        response = self._send(method, url, params)
        self._check_status(response, url)
        body = self._decode_json(response, url)

        logger.debug(
            f"{method} {url} -> {response.status_code}",
            extra={"event": "adapter.http.response", "url": url, "status_code": response.status_code},
        )
        return body

    def _send(self, method: str, url: str, params: Optional[Mapping[str, Any]]) -> requests.Response:
        try:
            return self._session.request(method=method, url=url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"No response from {url} within {self.timeout}s",
                extra={"event": "adapter.http.timeout", "url": url, "timeout": self.timeout},
            )
            raise AdapterTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds", url=url
            ) from e
        except requests.exceptions.RequestException as e:
            # Connection refused, DNS failure, TLS error, ...
            logger.error(
                f"Could not reach {url}: {type(e).__name__}",
                extra={"event": "adapter.http.unreachable", "url": url, "error_type": type(e).__name__},
            )
            raise AdapterHTTPError(
                f"Request to {url} failed: {type(e).__name__}", status_code=0, url=url
            ) from e

    @staticmethod
    def _check_status(response: requests.Response, url: str) -> None:
        status = response.status_code
        if status < 400:
            return

        # Server-side trouble is usually transient; client errors mean a bad key or query
        logger.log(
            logging.WARNING if status >= 500 else logging.ERROR,
            f"{url} answered {status}",
            extra={"event": "adapter.http.error_status", "url": url, "status_code": status},
        )
        raise AdapterHTTPError(f"HTTP {status}: {response.reason}", status_code=status, url=url)

    @staticmethod
    def _decode_json(response: requests.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.error(
                f"Body from {url} is not JSON",
                extra={"event": "adapter.http.invalid_json", "url": url},
            )
            raise AdapterResponseError(f"Failed to parse JSON response from {url}: {e}") from e
