"""Data models for pipeline execution tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sponsor_scanner.domain.models import JobRecord, RunStats


@dataclass
class PipelineRunResult:
    """
    Outcome of one ScanPipeline.run_once() call.

    Attributes:
        run_id: Identifier attached to every log record of the run
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        stats: Final run statistics (None when the run was skipped)
        records: Sponsor job records found by the run, in fetch order
        skipped: Whether the run was skipped because another one was active
        total_duration_seconds: Wall-clock duration of the run
    """

    run_id: str
    run_started_at: datetime
    run_finished_at: datetime
    stats: Optional[RunStats] = None
    records: List[JobRecord] = field(default_factory=list)
    skipped: bool = False
    total_duration_seconds: float = 0.0

    def __post_init__(self):
        if self.total_duration_seconds == 0.0:
            delta = self.run_finished_at - self.run_started_at
            self.total_duration_seconds = delta.total_seconds()
