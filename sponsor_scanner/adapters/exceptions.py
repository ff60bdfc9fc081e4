"""Custom exceptions for search provider adapters."""


class AdapterError(Exception):
    """Base exception for all adapter errors.

    Any adapter error aborts the remaining pages of the current run. Nothing
    is retried.
    """

    pass


class AdapterHTTPError(AdapterError):
    """HTTP request failed with a 4xx/5xx status or a connection error.

    ``status_code`` is 0 when no response was received.
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class AdapterTimeoutError(AdapterError):
    """HTTP request did not complete within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class AdapterResponseError(AdapterError):
    """Response could not be parsed or validated.

    Covers invalid JSON, a payload that does not match the expected shape,
    and error messages reported by the provider inside a 200 response.
    """

    pass


class AdapterConfigurationError(AdapterError):
    """Invalid adapter configuration (missing API key, bad timeout, ...)."""

    pass
