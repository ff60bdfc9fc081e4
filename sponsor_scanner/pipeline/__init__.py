"""Pipeline orchestration: paginated fetch, filtering, persistence and run reporting."""

from .fetch import MAX_PAGES, PAGE_SIZE, FetchPipeline
from .models import PipelineRunResult
from .reporter import RunReporter
from .runner import ScanPipeline

__all__ = [
    "ScanPipeline",
    "FetchPipeline",
    "RunReporter",
    "PipelineRunResult",
    "PAGE_SIZE",
    "MAX_PAGES",
]
