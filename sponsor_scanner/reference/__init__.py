"""Sponsor reference set loading (database first, CSV fallback)."""

from .exceptions import ReferenceLoadError
from .loader import NAME_COLUMN_ALIASES, load_reference_set, read_reference_csv

__all__ = [
    "NAME_COLUMN_ALIASES",
    "ReferenceLoadError",
    "load_reference_set",
    "read_reference_csv",
]
