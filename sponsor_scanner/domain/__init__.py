"""Domain models for the Sponsor Job Scanner."""

from .models import (
    ApplyOption,
    DetectedExtensions,
    JobRecord,
    RunLogEntry,
    RunStats,
    RunStatus,
    SearchPage,
    SearchResultItem,
    WorkSetting,
)

__all__ = [
    "ApplyOption",
    "DetectedExtensions",
    "JobRecord",
    "RunLogEntry",
    "RunStats",
    "RunStatus",
    "SearchPage",
    "SearchResultItem",
    "WorkSetting",
]
