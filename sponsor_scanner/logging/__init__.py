"""Structured logging for the scanner: component loggers, formatters, context."""

import logging
from typing import Optional, Union


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that tags records with a component without dropping call extras."""

    def process(self, msg, kwargs):
        # Fields passed on the call win over the adapter defaults
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Get a logger, optionally tagged with a default ``component`` field.

    Args:
        name: Logger name (typically __name__)
        component: Component identifier injected into every record

    Example:
        >>> logger = get_logger(__name__, component="fetch")
        >>> logger.info("Page fetched", extra={"event": "fetch.page.fetched"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger
