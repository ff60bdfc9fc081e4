"""Periodic execution of the scan pipeline in daemon mode."""

from .service import SchedulerService

__all__ = [
    "SchedulerService",
]
