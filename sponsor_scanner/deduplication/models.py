"""Data models for deduplication."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DedupResult:
    """Outcome of storing one batch of records.

    Attributes:
        inserted: Records stored for the first time
        duplicated: Records whose fingerprint was already stored (or repeated
            earlier in the same batch)
    """

    inserted: int = 0
    duplicated: int = 0

    @property
    def total(self) -> int:
        return self.inserted + self.duplicated
