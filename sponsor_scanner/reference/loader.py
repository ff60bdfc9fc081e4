"""Loading the H-1B sponsor reference set.

The database is the primary source. On first use it is empty, so the names
are read from the reference CSV (e.g. a DOL LCA disclosure extract) and
stored for subsequent runs.
"""

import csv
from pathlib import Path
from typing import Dict, List, Optional, Union

from sponsor_scanner.logging import get_logger
from sponsor_scanner.matching.models import ReferenceCompanySet
from sponsor_scanner.matching.normalizer import normalize_company_name

from .exceptions import ReferenceLoadError

logger = get_logger(__name__, component="reference")

# Checked in order; the first one with a non-empty value wins
NAME_COLUMN_ALIASES = ("EMPLOYER_NAME", "employer_name", "company_name", "Company Name", "name")


def _header_key(header: str) -> str:
    return "".join((header or "").split()).lower()


def _resolve_name_columns(fieldnames: List[str]) -> List[str]:
    """Actual header names matching the aliases, in alias order."""
    by_key: Dict[str, str] = {}
    for fieldname in fieldnames:
        by_key.setdefault(_header_key(fieldname), fieldname)

    columns = []
    for alias in NAME_COLUMN_ALIASES:
        column = by_key.get(_header_key(alias))
        if column is not None and column not in columns:
            columns.append(column)
    return columns


def read_reference_csv(path: Union[str, Path]) -> List[str]:
    """Read sponsor company names from a CSV file.

    Uses the first non-empty value among the known name columns, or the
    first column when none of them is present. Names are light-normalized;
    blank ones are skipped.

    Raises:
        ReferenceLoadError: If the file is missing or cannot be parsed
    """
    path = Path(path)
    names = []

    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            fieldnames = reader.fieldnames or []
            name_columns = _resolve_name_columns(fieldnames)
            fallback = fieldnames[0] if fieldnames else None

            if not name_columns:
                logger.warning(
                    "No known company name column; using first column",
                    extra={"event": "reference.csv.fallback_column", "column": fallback},
                )

            for row in reader:
                name = _row_company_name(row, name_columns or [fallback])
                if name:
                    names.append(name)

    except FileNotFoundError as e:
        raise ReferenceLoadError(f"Reference file not found: {path}") from e
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise ReferenceLoadError(f"Failed to read reference file {path}: {e}") from e

    logger.info(
        "Read reference CSV",
        extra={"event": "reference.csv.read", "path": str(path), "names": len(names)},
    )
    return names


def _row_company_name(row: Dict[str, Optional[str]], columns: List[Optional[str]]) -> str:
    for column in columns:
        if column is None:
            continue
        name = normalize_company_name(row.get(column))
        if name:
            return name
    return ""


def load_reference_set(store, csv_path: Optional[Union[str, Path]]) -> ReferenceCompanySet:
    """Load the sponsor reference set, database first, then the CSV file.

    When the database holds no names, the CSV names are stored through
    ``store.insert_companies`` so later runs skip the file.

    Args:
        store: JobStore (or anything with load_reference_names/insert_companies)
        csv_path: Reference CSV path, or None when only the database is used

    Raises:
        ReferenceLoadError: If no names could be loaded
        PersistenceError: If the database cannot be read or written
    """
    db_names = store.load_reference_names()
    if db_names:
        reference_set = ReferenceCompanySet(db_names)
        logger.info(
            "Loaded sponsor companies from database",
            extra={"event": "reference.loaded", "source": "database", "size": len(reference_set)},
        )
        return reference_set

    if csv_path is None:
        raise ReferenceLoadError("No sponsor companies in the database and no reference CSV configured")

    names = read_reference_csv(csv_path)
    reference_set = ReferenceCompanySet(names)
    if not reference_set:
        raise ReferenceLoadError(f"Reference file {csv_path} contains no company names")

    store.insert_companies(sorted(reference_set))

    logger.info(
        "Loaded sponsor companies from CSV",
        extra={"event": "reference.loaded", "source": "csv", "size": len(reference_set)},
    )
    return reference_set
