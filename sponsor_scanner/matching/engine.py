"""Sponsor matching engine.

Decides whether a scraped company name belongs to the reference set of
visa-sponsoring employers. The checks run in order and stop at the first
hit:

1. exact: the light-normalized name is a member of the set
2. equal: heavy-cleaned forms are identical
3. contains: one heavy-cleaned form contains the other
4. token_overlap: at least 60% of the smaller token set is shared
"""

from typing import Dict, FrozenSet, Optional

from sponsor_scanner.logging import get_logger

from .models import NO_MATCH, CompanyMatch, ReferenceCompanySet
from .normalizer import clean_company_name, normalize_company_name

logger = get_logger(__name__, component="matching")

TOKEN_OVERLAP_THRESHOLD = 0.6
MIN_TOKEN_LENGTH = 3


def tokenize(cleaned_name: str) -> FrozenSet[str]:
    """Split a cleaned name into its significant tokens (longer than 2 chars)."""
    return frozenset(token for token in cleaned_name.split() if len(token) >= MIN_TOKEN_LENGTH)


def token_overlap_ratio(tokens1: FrozenSet[str], tokens2: FrozenSet[str]) -> float:
    """Share of the smaller token set that also appears in the other one.

    Returns 0.0 when either set is empty.
    """
    if not tokens1 or not tokens2:
        return 0.0

    common = tokens1 & tokens2
    return len(common) / min(len(tokens1), len(tokens2))


class CompanyMatcher:
    """Checks company names against a ReferenceCompanySet.

    Heavy-cleaned forms and token sets of reference entries are computed
    lazily and cached for the lifetime of the matcher. The reference set is
    immutable, so the cache never goes stale.
    """

    def __init__(self, reference_set: ReferenceCompanySet):
        self.reference_set = reference_set
        self._cleaned_cache: Optional[Dict[str, str]] = None
        self._token_cache: Dict[str, FrozenSet[str]] = {}

    def is_sponsor(self, company_name: Optional[str]) -> bool:
        """Return True if the company is in the sponsor reference set."""
        return self.match(company_name).is_match

    def match(self, company_name: Optional[str]) -> CompanyMatch:
        """Evaluate a company name and report which rule matched.

        Args:
            company_name: Raw company name as scraped (may be None)

        Returns:
            CompanyMatch; falsy when the company is not a sponsor
        """
        normalized = normalize_company_name(company_name)
        if not normalized:
            return NO_MATCH

        if normalized in self.reference_set:
            return self._matched("exact", normalized, company_name)

        cleaned = clean_company_name(normalized)
        tokens = tokenize(cleaned)

        for entry, entry_cleaned in self._cleaned_entries().items():
            if cleaned == entry_cleaned:
                return self._matched("equal", entry, company_name)

            # An empty cleaned form would be "contained" in every entry
            if cleaned and entry_cleaned and (cleaned in entry_cleaned or entry_cleaned in cleaned):
                return self._matched("contains", entry, company_name)

            if token_overlap_ratio(tokens, self._entry_tokens(entry, entry_cleaned)) >= TOKEN_OVERLAP_THRESHOLD:
                return self._matched("token_overlap", entry, company_name)

        return NO_MATCH

    def _cleaned_entries(self) -> Dict[str, str]:
        if self._cleaned_cache is None:
            self._cleaned_cache = {
                entry: clean_company_name(entry) for entry in self.reference_set
            }
        return self._cleaned_cache

    def _entry_tokens(self, entry: str, entry_cleaned: str) -> FrozenSet[str]:
        tokens = self._token_cache.get(entry)
        if tokens is None:
            tokens = tokenize(entry_cleaned)
            self._token_cache[entry] = tokens
        return tokens

    @staticmethod
    def _matched(rule: str, entry: str, company_name: Optional[str]) -> CompanyMatch:
        logger.debug(
            "Sponsor match",
            extra={
                "event": "matching.company.matched",
                "rule": rule,
                "company_name": company_name,
                "matched_entry": entry,
            },
        )
        return CompanyMatch(is_match=True, rule=rule, matched_entry=entry)


def is_sponsor(company_name: Optional[str], reference_set: ReferenceCompanySet) -> bool:
    """Functional form of ``CompanyMatcher(reference_set).is_sponsor(name)``.

    Example:
        >>> refs = ReferenceCompanySet(["google llc"])
        >>> is_sponsor("Google", refs)
        True
    """
    return CompanyMatcher(reference_set).is_sponsor(company_name)
