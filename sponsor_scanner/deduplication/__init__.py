"""Deduplication of job records by content fingerprint."""

from .models import DedupResult
from .service import Deduplicator

__all__ = ["Deduplicator", "DedupResult"]
