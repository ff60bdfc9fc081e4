"""Core domain models for search results, job records, and run statistics.

This module defines the data structures used throughout the application:
- SearchResultItem: one raw posting as returned by the search provider
- SearchPage: one page of search results
- JobRecord: a filtered posting in the shape we persist and export
- RunStats: counters and terminal status for one pipeline run
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class WorkSetting(str, Enum):
    """Work arrangement derived from posting text."""

    REMOTE = "Remote"
    ONSITE = "Onsite"
    HYBRID = "Hybrid"
    NOT_SPECIFIED = "Not Specified"


class RunStatus(str, Enum):
    """Terminal status of a pipeline run."""

    SUCCESS = "success"
    ERROR = "error"


class ApplyOption(BaseModel):
    """One application option (title + link) attached to a posting."""

    title: str = Field("", description="Display title of the apply option")
    link: str = Field("", description="Apply URL")

    @field_validator("title", "link", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        """Coerce missing values to empty strings."""
        return "" if v is None else v


class DetectedExtensions(BaseModel):
    """Structured fields the search provider extracted from the posting."""

    posted_at: Optional[str] = Field(None, description="Relative posting time, e.g. '3 days ago'")
    schedule_type: Optional[str] = Field(None, description="Schedule type, e.g. 'Full-time'")


class SearchResultItem(BaseModel):
    """Raw posting from the search provider before filtering.

    Only the fields the scanner consumes are modelled. Unknown fields in the
    provider payload are ignored. Null values default to empty.
    """

    company_name: str = Field("", description="Company name as listed")
    title: str = Field("", description="Job title")
    location: str = Field("", description="Job location")
    description: str = Field("", description="Full job description text")
    detected_extensions: DetectedExtensions = Field(default_factory=DetectedExtensions)
    extensions: List[str] = Field(default_factory=list, description="Free-text extension labels")
    apply_options: List[ApplyOption] = Field(default_factory=list)

    @field_validator("company_name", "title", "location", "description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        """Coerce missing text fields to empty strings."""
        return "" if v is None else v

    @field_validator("detected_extensions", mode="before")
    @classmethod
    def default_extensions(cls, v):
        """Treat a null detected_extensions object as empty."""
        return {} if v is None else v

    @field_validator("extensions", "apply_options", mode="before")
    @classmethod
    def none_to_list(cls, v):
        """Treat null lists as empty."""
        return [] if v is None else v

    model_config = {"extra": "ignore", "json_schema_extra": {"example": {
        "company_name": "Example Corp",
        "title": "Data Engineer",
        "location": "Austin, TX",
        "description": "Hybrid role, two days a week in the office...",
        "detected_extensions": {"posted_at": "2 days ago", "schedule_type": "Full-time"},
        "extensions": ["2 days ago", "Full-time"],
        "apply_options": [{"title": "Example Careers", "link": "https://example.com/careers/123"}],
    }}}


class SearchPage(BaseModel):
    """One page of results from the search provider."""

    results: List[SearchResultItem] = Field(default_factory=list)
    total_available: Optional[int] = Field(None, description="Total results reported by the provider")


class JobRecord(BaseModel):
    """Filtered job posting in its persisted shape.

    A JobRecord is built once from a SearchResultItem and never updated; it is
    either inserted or discarded as a duplicate. Text fields are always
    strings (never None) because downstream consumers assume presence.
    """

    company_name: str = Field("", description="Company name as scraped")
    job_title: str = Field("", description="Job title")
    posting_time: str = Field("", description="Free-text posting time from the provider")
    job_location: str = Field("", description="Job location")
    job_type: str = Field("", description="Schedule label such as 'Full-time', or empty")
    job_description: str = Field("", description="Full description text")
    work_setting: WorkSetting = Field(WorkSetting.NOT_SPECIFIED)
    ats_apply_link: str = Field("", description="Preferred application link, or empty")
    scraped_at: datetime = Field(..., description="When the posting was scraped (UTC)")

    @field_validator(
        "company_name",
        "job_title",
        "posting_time",
        "job_location",
        "job_type",
        "job_description",
        "ats_apply_link",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        """Coerce missing text fields to empty strings."""
        return "" if v is None else v

    @field_validator("scraped_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    model_config = {"frozen": True}


class RunStats(BaseModel):
    """Counters and terminal status for one pipeline run.

    Created at the start of a run, mutated only by that run, and handed to
    the run reporter exactly once at the end.
    """

    jobs_scraped: int = 0
    jobs_filtered: int = 0
    jobs_inserted: int = 0
    jobs_duplicated: int = 0
    api_calls_made: int = 0
    status: RunStatus = RunStatus.SUCCESS
    error_message: Optional[str] = None

    def mark_failed(self, error: BaseException) -> None:
        """Record a failure on this run."""
        self.status = RunStatus.ERROR
        self.error_message = str(error) or type(error).__name__

    @property
    def succeeded(self) -> bool:
        return self.status == RunStatus.SUCCESS


class RunLogEntry(BaseModel):
    """One row of the run history (scraping_logs)."""

    id: int
    run_timestamp: datetime
    jobs_scraped: int = 0
    jobs_filtered: int = 0
    jobs_inserted: int = 0
    jobs_duplicated: int = 0
    api_calls_made: int = 0
    status: RunStatus = RunStatus.SUCCESS
    error_message: Optional[str] = None
