"""Data models for the company matching engine."""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Iterator, Optional

from .normalizer import normalize_company_name


class ReferenceCompanySet:
    """Immutable allow-list of visa-sponsoring employers.

    Every member is stored in light-normalized form, so membership checks
    against ``normalize_company_name(raw)`` are exact.
    """

    __slots__ = ("_names",)

    def __init__(self, names: Iterable[str] = ()):
        normalized = (normalize_company_name(name) for name in names)
        self._names: FrozenSet[str] = frozenset(name for name in normalized if name)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        # Sorted so that the fuzzy scan (and thus the matched entry) is reproducible
        return iter(sorted(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __bool__(self) -> bool:
        return bool(self._names)

    def __repr__(self) -> str:
        return f"ReferenceCompanySet(size={len(self._names)})"


@dataclass(frozen=True)
class CompanyMatch:
    """Outcome of checking one company name against the reference set.

    Attributes:
        is_match: Whether the company is considered a sponsor
        rule: Which rule decided the match (exact, equal, contains, token_overlap)
        matched_entry: Reference entry that matched, if any
    """

    is_match: bool
    rule: Optional[str] = None
    matched_entry: Optional[str] = None

    def __bool__(self) -> bool:
        return self.is_match


NO_MATCH = CompanyMatch(is_match=False)
