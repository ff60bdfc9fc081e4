"""Search provider adapters.

Use the factory function to instantiate the configured adapter:
    from sponsor_scanner.adapters.factory import get_adapter
    adapter = get_adapter(app_config, api_key)
    page = adapter.fetch_page(0)

Exception handling:
    from sponsor_scanner.adapters.exceptions import AdapterError, AdapterHTTPError, AdapterTimeoutError, AdapterResponseError
"""

from .base import BaseAdapter
from .exceptions import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)
from .factory import get_adapter
from .serpapi import SerpApiAdapter

__all__ = [
    "BaseAdapter",
    "get_adapter",
    "SerpApiAdapter",
    "AdapterError",
    "AdapterHTTPError",
    "AdapterTimeoutError",
    "AdapterResponseError",
    "AdapterConfigurationError",
]
