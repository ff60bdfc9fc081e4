"""Pydantic schema for config.yaml."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .duration import DurationParseError, parse_duration, validate_duration_range

MIN_SCAN_INTERVAL_SECONDS = 300
MAX_SCAN_INTERVAL_SECONDS = 86400


def _required_text(value: str, field_name: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError(f"{field_name} cannot be empty or whitespace-only")
    return cleaned


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    JSON = "json"
    KEY_VALUE = "key-value"


class SearchConfig(BaseModel):
    """Google Jobs query sent on every scan."""

    query: str = Field("Data Engineer", min_length=1, description="Search terms (q parameter)")
    language: str = Field("en", min_length=2, description="Result language (hl parameter)")
    location: Optional[str] = Field(None, description="Location filter; omitted when blank")

    @field_validator("query", "language")
    @classmethod
    def _clean_required(cls, v: str, info) -> str:
        return _required_text(v, info.field_name)

    @field_validator("location")
    @classmethod
    def _clean_location(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v)


class FilesConfig(BaseModel):
    """Where the sponsor list is read from and where matches are mirrored to."""

    reference_csv: str = Field(
        "h1b_companies.csv", min_length=1, description="DOL disclosure export with EMPLOYER_NAME"
    )
    results_csv: Optional[str] = Field(
        "h1b_job_results.csv", description="Append-only backup of matches; null turns it off"
    )

    @field_validator("results_csv")
    @classmethod
    def _clean_results_csv(cls, v: Optional[str]) -> Optional[str]:
        return _optional_text(v)


class LoggingConfig(BaseModel):
    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.KEY_VALUE

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Knobs most deployments leave alone."""

    http_request_timeout: int = Field(30, ge=5, le=300, description="Per-request timeout (seconds)")
    user_agent: str = Field("SponsorJobScanner/1.0", min_length=1)
    page_delay_seconds: float = Field(
        1.0, ge=0, le=60, description="Pause between result pages (seconds)"
    )

    @field_validator("user_agent")
    @classmethod
    def _clean_user_agent(cls, v: str) -> str:
        return _required_text(v, "user_agent")


class AppConfig(BaseModel):
    """Everything config.yaml can set, with defaults for every section."""

    search: SearchConfig = Field(default_factory=SearchConfig)
    files: FilesConfig = Field(default_factory=FilesConfig)
    scan_interval: str = Field("1h", description="Daemon interval, e.g. '30m', '1h', '1 hour'")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)

    # Filled from scan_interval after validation
    scan_interval_seconds: Optional[int] = None

    @field_validator("scan_interval")
    @classmethod
    def _check_scan_interval(cls, v: str) -> str:
        try:
            validate_duration_range(
                parse_duration(v),
                min_seconds=MIN_SCAN_INTERVAL_SECONDS,
                max_seconds=MAX_SCAN_INTERVAL_SECONDS,
            )
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def _derive_interval_seconds(self):
        self.scan_interval_seconds = parse_duration(self.scan_interval)
        return self
