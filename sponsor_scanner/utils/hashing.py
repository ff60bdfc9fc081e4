"""Hashing utilities for job fingerprints.

The fingerprint is the deduplication key for stored jobs. It must stay
byte-for-byte stable across runs and across deployments, so the field order,
the delimiter and the digest algorithm are fixed:

    md5("{company_name}-{job_title}-{job_location}-{posting_time}")

Fields are used verbatim (no case folding or trimming) and encoded as UTF-8.
"""

import hashlib
from typing import Optional

FINGERPRINT_DELIMITER = "-"


def compute_job_fingerprint(
    company_name: Optional[str],
    job_title: Optional[str],
    job_location: Optional[str],
    posting_time: Optional[str],
) -> str:
    """Compute the deduplication fingerprint for a job.

    Args:
        company_name: Company name as scraped
        job_title: Job title
        job_location: Job location
        posting_time: Free-text posting time from the search provider

    Returns:
        Hexadecimal MD5 digest (32 characters)

    Example:
        >>> len(compute_job_fingerprint("Acme", "Data Engineer", "Austin, TX", "2 days ago"))
        32
    """
    composite_key = FINGERPRINT_DELIMITER.join(
        value or "" for value in (company_name, job_title, job_location, posting_time)
    )
    return hash_string(composite_key)


def fingerprint_record(record) -> str:
    """Compute the fingerprint of a JobRecord."""
    return compute_job_fingerprint(
        record.company_name,
        record.job_title,
        record.job_location,
        record.posting_time,
    )


def hash_string(value: str) -> str:
    """Compute the MD5 hex digest of a UTF-8 string."""
    return hashlib.md5(value.encode("utf-8")).hexdigest()
