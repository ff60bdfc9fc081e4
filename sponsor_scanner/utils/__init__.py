"""Utility functions for fingerprint hashing and time handling."""

from .hashing import compute_job_fingerprint, fingerprint_record, hash_string
from .timestamps import ensure_utc, format_timestamp, parse_timestamp, utc_now

__all__ = [
    # Hashing
    "compute_job_fingerprint",
    "fingerprint_record",
    "hash_string",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "format_timestamp",
    "parse_timestamp",
]
