"""Company name normalization.

Two levels are kept distinct:

- light (``normalize_company_name``): trim, unquote, lower-case. This is the
  only form stored in the reference set and the sponsor companies table.
- heavy (``clean_company_name``): the light form with legal-entity suffixes
  and punctuation removed. Used only while fuzzy matching.
"""

import re
from typing import Optional

# Whole-word corporate suffixes; the abbreviated forms may carry a period.
LEGAL_SUFFIXES = (
    r"inc\.?",
    r"llc\.?",
    r"corp\.?",
    "corporation",
    "company",
    r"co\.?",
    r"ltd\.?",
    "limited",
    "services",
    "group",
    "technologies",
    "tech",
    "systems",
    "solutions",
)

_SUFFIX_PATTERN = re.compile(r"\b(" + "|".join(LEGAL_SUFFIXES) + r")\b")
_PUNCTUATION_PATTERN = re.compile(r"[,.]")
_WHITESPACE_PATTERN = re.compile(r"\s+")

_QUOTE_CHARS = "\"'"


def normalize_company_name(name: Optional[str]) -> str:
    """Light normalization: trim, strip surrounding quotes, lower-case.

    Args:
        name: Company name, possibly None or quoted

    Returns:
        Normalized name, or empty string for None/blank input

    Example:
        >>> normalize_company_name('  "Google LLC" ')
        'google llc'
    """
    if not name:
        return ""

    return name.strip().strip(_QUOTE_CHARS).strip().lower()


def clean_company_name(name: str) -> str:
    """Heavy normalization for fuzzy matching.

    Expects an already light-normalized (lower-cased) name. Removes legal
    suffixes as whole words, deletes commas and periods, and collapses
    whitespace.

    Example:
        >>> clean_company_name("acme widgets, inc.")
        'acme widgets'
    """
    cleaned = _SUFFIX_PATTERN.sub("", name)
    cleaned = _PUNCTUATION_PATTERN.sub("", cleaned)
    cleaned = _WHITESPACE_PATTERN.sub(" ", cleaned)
    return cleaned.strip()
