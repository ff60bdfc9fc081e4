"""Factory function for instantiating the search provider adapter."""

import logging

from sponsor_scanner.config.models import AppConfig

from .base import BaseAdapter
from .exceptions import AdapterConfigurationError
from .serpapi import SerpApiAdapter

logger = logging.getLogger(__name__)


def get_adapter(app_config: AppConfig, api_key: str) -> BaseAdapter:
    """Instantiate the search adapter from application configuration.

    Args:
        app_config: Application configuration (search + advanced settings)
        api_key: Search provider API key

    Returns:
        Configured adapter

    Raises:
        AdapterConfigurationError: If the adapter cannot be created
    """
    advanced = app_config.advanced

    logger.debug(
        "Creating adapter instance",
        extra={
            "adapter_class": SerpApiAdapter.__name__,
            "query": app_config.search.query,
            "timeout": advanced.http_request_timeout,
        },
    )

    try:
        return SerpApiAdapter(
            api_key=api_key,
            search=app_config.search,
            timeout=advanced.http_request_timeout,
            user_agent=advanced.user_agent,
        )
    except AdapterConfigurationError:
        raise
    except (TypeError, ValueError) as e:
        raise AdapterConfigurationError(f"Failed to create search adapter: {e}") from e
