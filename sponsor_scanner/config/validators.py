"""Soft validation: issues worth a warning but not worth refusing to start."""

import warnings
from pathlib import Path
from typing import Any, Dict, List

from .duration import DurationParseError, parse_duration

# Each run makes up to three API calls; shorter intervals burn through
# the SerpAPI monthly quota quickly.
QUOTA_FRIENDLY_INTERVAL_SECONDS = 900


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """Check a raw configuration dictionary for potential issues.

    Returns:
        List of warning messages (empty if nothing looks off)
    """
    warning_messages = []

    scan_interval = config_dict.get("scan_interval")
    if isinstance(scan_interval, str):
        try:
            seconds = parse_duration(scan_interval)
        except DurationParseError:
            # Reported as a hard error by model validation
            seconds = None
        if seconds is not None and seconds < QUOTA_FRIENDLY_INTERVAL_SECONDS:
            warning_messages.append(
                f"Short scan_interval ({scan_interval}) may exhaust the SerpAPI search quota"
            )

    files = config_dict.get("files") or {}
    if isinstance(files, dict):
        reference_csv = files.get("reference_csv", "h1b_companies.csv")
        if isinstance(reference_csv, str) and reference_csv and not Path(reference_csv).exists():
            warning_messages.append(
                f"Reference file '{reference_csv}' not found; the sponsor list must already be in the database"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit each message as a UserWarning."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
