"""Year-based confidence ranking for resolved candidates."""

from __future__ import annotations

import re

from ...models.citation import ResolvedCandidate
from ...utils.citation_text import extract_year

YEAR_MATCH_BOOST = 0.20
YEAR_MATCH_CAP = 0.95
WRONG_YEAR_FACTOR = 0.3

_URL_YEAR_RE = re.compile(r"/(\d{4})/", re.ASCII)


def boost_year_matches(
    candidates: list[ResolvedCandidate], citation: str
) -> list[ResolvedCandidate]:
    """Re-score candidates against the citation year and sort best-first.

    A URL containing ``/<year>/`` gains 0.20 (capped at 0.95). A URL carrying
    a different year segment is multiplied by 0.3. URLs without a year
    segment keep their score. The input list and its candidates are not
    modified. Without a bracketed year in the citation the candidates are
    returned in their original order.

    Args:
        candidates: Candidates to rank
        citation: Citation text, e.g. '[2019] EWCA Civ 7'

    Returns:
        New list, stably sorted by confidence descending
    """
    year = extract_year(citation)
    if year is None:
        return list(candidates)

    ranked: list[ResolvedCandidate] = []
    for candidate in candidates:
        confidence = candidate.confidence
        if f"/{year}/" in candidate.url:
            confidence = min(confidence + YEAR_MATCH_BOOST, YEAR_MATCH_CAP)
        else:
            url_year = _URL_YEAR_RE.search(candidate.url)
            if url_year and url_year.group(1) != year:
                confidence *= WRONG_YEAR_FACTOR
        ranked.append(candidate.model_copy(update={"confidence": confidence}))

    # sorted() is stable, ties keep their insertion order
    return sorted(ranked, key=lambda c: c.confidence, reverse=True)


__all__ = ["boost_year_matches"]
