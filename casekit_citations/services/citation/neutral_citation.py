"""Neutral citation to judgment URL construction.

UK neutral citations ("[2020] UKSC 42") map deterministically onto BAILII and
Find Case Law paths. The table is ordered; the first pattern that matches
wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class NeutralPattern:
    """One court code with its URL templates.

    Templates use ``{year}`` and ``{num}`` placeholders.
    """

    code: str
    regex: re.Pattern[str]
    bailii_template: str
    fcl_template: str


def _pattern(code: str, regex: str, bailii_path: str, fcl_path: str) -> NeutralPattern:
    return NeutralPattern(
        code=code,
        regex=re.compile(regex, re.IGNORECASE | re.ASCII),
        bailii_template=f"https://www.bailii.org/{bailii_path}/{{year}}/{{num}}.html",
        fcl_template=f"https://caselaw.nationalarchives.gov.uk/{fcl_path}/{{year}}/{{num}}",
    )


NEUTRAL_PATTERNS: tuple[NeutralPattern, ...] = (
    _pattern("UKSC", r"\[(\d{4})\]\s+UKSC\s+(\d+)", "uk/cases/UKSC", "uksc"),
    _pattern("UKHL", r"\[(\d{4})\]\s+UKHL\s+(\d+)", "uk/cases/UKHL", "ukhl"),
    _pattern("UKPC", r"\[(\d{4})\]\s+UKPC\s+(\d+)", "uk/cases/UKPC", "ukpc"),
    _pattern("EWCA Civ", r"\[(\d{4})\]\s+EWCA\s+Civ\s+(\d+)", "ew/cases/EWCA/Civ", "ewca/civ"),
    _pattern("EWCA Crim", r"\[(\d{4})\]\s+EWCA\s+Crim\s+(\d+)", "ew/cases/EWCA/Crim", "ewca/crim"),
    _pattern("EWHC", r"\[(\d{4})\]\s+EWHC\s+(\d+)", "ew/cases/EWHC", "ewhc"),
    _pattern("EWCOP", r"\[(\d{4})\]\s+EWCOP\s+(\d+)", "ew/cases/EWCOP", "ewcop"),
    _pattern("EWFC", r"\[(\d{4})\]\s+EWFC\s+(\d+)", "ew/cases/EWFC", "ewfc"),
    _pattern("UKUT", r"\[(\d{4})\]\s+UKUT\s+(\d+)", "uk/cases/UKUT", "ukut"),
    _pattern("UKFTT", r"\[(\d{4})\]\s+UKFTT\s+(\d+)", "uk/cases/UKFTT", "ukftt"),
    _pattern("UKEAT", r"\[(\d{4})\]\s+UKEAT\s+(\d+)", "uk/cases/UKEAT", "eat"),
)


@dataclass(frozen=True)
class NeutralCitationMatch:
    """Court code, year and number recognised in a citation, with both URLs."""

    code: str
    year: str
    number: str
    bailii_url: str
    fcl_url: str


def match_neutral_citation(
    citation: str, patterns: tuple[NeutralPattern, ...] = NEUTRAL_PATTERNS
) -> NeutralCitationMatch | None:
    """Match a citation against the neutral pattern table.

    Args:
        citation: Raw citation text, possibly with a case name in front
        patterns: Ordered pattern table (first match wins)

    Returns:
        NeutralCitationMatch, or None when no court code is recognised

    Example:
        >>> m = match_neutral_citation("Patel v Mirza [2016] UKSC 42")
        >>> m.bailii_url
        'https://www.bailii.org/uk/cases/UKSC/2016/42.html'
    """
    for pattern in patterns:
        found = pattern.regex.search(citation)
        if not found:
            continue
        year, number = found.group(1), found.group(2)
        return NeutralCitationMatch(
            code=pattern.code,
            year=year,
            number=number,
            bailii_url=pattern.bailii_template.format(year=year, num=number),
            fcl_url=pattern.fcl_template.format(year=year, num=number),
        )
    return None


__all__ = ["NEUTRAL_PATTERNS", "NeutralCitationMatch", "NeutralPattern", "match_neutral_citation"]
