"""Citation text helpers.

Pure string functions used by the resolution strategies: pulling the case
name and year out of a citation, and reducing a case name to search terms.
"""

from __future__ import annotations

import re

_CASE_NAME_RE = re.compile(r"^(.*?)\s*\[\d{4}\]", re.ASCII)
_YEAR_RE = re.compile(r"\[(\d{4})\]", re.ASCII)
_NON_ALNUM_RE = re.compile(r"[\W_]+")

# Procedural connectives, corporate suffixes and generic party terms that
# only add noise to a title search.
PARTY_STOP_WORDS: frozenset[str] = frozenset(
    {
        "v", "and", "the", "of", "for", "in", "on", "a", "an", "r", "re",
        "plc", "ltd", "limited", "inc", "llc", "llp", "council", "borough",
        "county", "city", "district", "secretary", "state", "home",
        "department", "commissioner", "others", "ors",
    }
)


def extract_case_name(citation_text: str) -> str | None:
    """Return the text preceding the first bracketed year.

    Example:
        >>> extract_case_name("Smith v Jones [2019] EWCA Civ 7")
        'Smith v Jones'
        >>> extract_case_name("[2020] UKSC 42") is None
        True
    """
    match = _CASE_NAME_RE.search(citation_text)
    if not match:
        return None
    name = match.group(1).strip()
    return name if len(name) > 2 else None


def extract_year(citation_text: str) -> str | None:
    """Return the four-digit bracketed year, e.g. '2019' for '[2019] EWCA Civ 7'."""
    match = _YEAR_RE.search(citation_text)
    return match.group(1) if match else None


def extract_party_search_terms(name: str) -> list[str]:
    """Reduce a case name to lowercase search terms.

    Words shorter than three characters and stop words are dropped.

    Example:
        >>> extract_party_search_terms("Smith v Jones Ltd")
        ['smith', 'jones']
    """
    words = (word.lower() for word in _NON_ALNUM_RE.split(name))
    return [word for word in words if len(word) >= 3 and word not in PARTY_STOP_WORDS]


__all__ = [
    "PARTY_STOP_WORDS",
    "extract_case_name",
    "extract_party_search_terms",
    "extract_year",
]
