"""Scoped logging context built on contextvars.

Fields pushed here (run_id, page, offset, ...) are attached to every log
record emitted inside the scope by ``ContextualFilter``.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Dict, Iterator

_log_context: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the active context fields."""
    return dict(_log_context.get())


def push_log_context(**fields: Any) -> Token:
    """Merge ``fields`` into the active context.

    Returns:
        Token to hand back to ``pop_log_context``
    """
    return _log_context.set({**_log_context.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the context that was active before the matching push."""
    _log_context.reset(token)


def clear_log_context() -> None:
    """Drop all context fields (test helper)."""
    _log_context.set({})


@contextmanager
def log_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """Add ``fields`` to the logging context for the duration of a block.

    Example:
        >>> with log_context(run_id="abc123"):
        ...     logger.info("Run started")  # record carries run_id
    """
    token = push_log_context(**fields)
    try:
        yield get_log_context()
    finally:
        pop_log_context(token)
