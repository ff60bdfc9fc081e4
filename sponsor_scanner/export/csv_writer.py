"""CSV export of job records.

The column set and order are fixed; downstream spreadsheets depend on them.
"""

import csv
import os
from pathlib import Path
from typing import Dict, Iterable, Union

from sponsor_scanner.domain.models import JobRecord
from sponsor_scanner.logging import get_logger
from sponsor_scanner.utils.timestamps import format_timestamp

logger = get_logger(__name__, component="export")

PathLike = Union[str, Path]

# (CSV header, JobRecord attribute)
COLUMNS = (
    ("Company Name", "company_name"),
    ("Job Title", "job_title"),
    ("Posting Time", "posting_time"),
    ("Job Location", "job_location"),
    ("Job Type", "job_type"),
    ("Job Description", "job_description"),
    ("Work Setting", "work_setting"),
    ("ATS Apply Link", "ats_apply_link"),
    ("Scraped At", "scraped_at"),
)

FIELDNAMES = [header for header, _ in COLUMNS]


def record_to_row(record: JobRecord) -> Dict[str, str]:
    """Map a JobRecord onto the CSV columns."""
    row = {}
    for header, attr in COLUMNS:
        value = getattr(record, attr)
        if attr == "work_setting":
            value = value.value
        elif attr == "scraped_at":
            value = format_timestamp(value)
        row[header] = value
    return row


def append_records(path: PathLike, records: Iterable[JobRecord]) -> int:
    """Append records, writing the header only to a new or empty file.

    Returns:
        Number of rows written
    """
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)

    write_header = not path.exists() or path.stat().st_size == 0
    written = 0

    with open(path, "a", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        if write_header:
            writer.writeheader()
        for record in records:
            writer.writerow(record_to_row(record))
            written += 1

    logger.info(
        "Appended records to CSV",
        extra={"event": "export.csv.appended", "path": str(path), "rows": written},
    )
    return written


def write_records(path: PathLike, records: Iterable[JobRecord]) -> int:
    """Replace the file with a header plus the given records.

    The file is written to a temporary sibling first and moved into place,
    so readers never see a partial export.

    Returns:
        Number of rows written
    """
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)

    tmp = path.with_name(path.name + ".tmp")
    written = 0

    try:
        with open(tmp, "w", encoding="utf-8", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
            writer.writeheader()
            for record in records:
                writer.writerow(record_to_row(record))
                written += 1
        os.replace(tmp, path)
    except BaseException:
        if tmp.exists():
            tmp.unlink()
        raise

    logger.info(
        "Exported records to CSV",
        extra={"event": "export.csv.written", "path": str(path), "rows": written},
    )
    return written
