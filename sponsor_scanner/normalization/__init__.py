"""Conversion of raw search results into persisted job records.

This module provides:
- JobRecordBuilder: Service to convert SearchResultItem to JobRecord
- Heuristics for work setting, job type, posting time and apply link
"""

from .heuristics import (
    extract_job_type,
    extract_posting_time,
    extract_work_setting,
    select_apply_link,
)
from .service import JobRecordBuilder

__all__ = [
    "JobRecordBuilder",
    "extract_work_setting",
    "extract_job_type",
    "extract_posting_time",
    "select_apply_link",
]
