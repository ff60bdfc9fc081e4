"""Company matching against the H-1B sponsor reference set.

This module provides:
- normalize_company_name / clean_company_name: light and heavy name forms
- ReferenceCompanySet: immutable set of light-normalized sponsor names
- CompanyMatcher / is_sponsor: exact and fuzzy sponsor membership checks
"""

from .engine import CompanyMatcher, is_sponsor, token_overlap_ratio, tokenize
from .models import CompanyMatch, ReferenceCompanySet
from .normalizer import clean_company_name, normalize_company_name

__all__ = [
    "CompanyMatcher",
    "CompanyMatch",
    "ReferenceCompanySet",
    "is_sponsor",
    "normalize_company_name",
    "clean_company_name",
    "tokenize",
    "token_overlap_ratio",
]
