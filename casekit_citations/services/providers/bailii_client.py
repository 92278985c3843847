"""BAILII client.

Wraps the three BAILII lookups used by the resolver:
    - citation finder: ``find_by_citation.cgi`` answers a recognised citation
      with a 302 whose Location is the judgment page
    - title search: ``lucy_search_1.cgi?querytitle=`` over case titles
    - full-text search: ``lucy_search_1.cgi?query=`` with boolean AND terms

Network errors, non-200 responses and unparseable pages yield no
candidates; nothing here raises on a bad response. Body parsing lives in
module-level ``extract_*`` functions so page-format changes stay local and
tests can feed canned HTML.
"""

from __future__ import annotations

import re
from urllib.parse import quote_plus

import httpx
import structlog
from bs4 import BeautifulSoup

from ...models.citation import CandidateSource, ResolutionMethod, ResolvedCandidate

logger = structlog.get_logger(__name__)

BAILII_ORIGIN = "https://www.bailii.org"
MAX_RESULTS = 5

TITLE_SEARCH_MASK = "uk/cases+ew/cases+scot/cases+nie/cases+ie/cases"
FULLTEXT_SEARCH_MASK = "uk/cases+ew/cases+scot/cases+nie/cases"

TITLED_CONFIDENCE = 0.80
UNTITLED_CONFIDENCE = 0.70
FULLTEXT_CONFIDENCE = 0.60
CITATION_FINDER_CONFIDENCE = 0.95

NAVIGATION_TEXT = frozenset({"next", "previous", "back", "home"})
MIN_TITLE_LENGTH = 5

# Case links look like href="/uk/cases/UKHL/1990/2.html"
_CASE_HREF_RE = re.compile(r"^/[a-z]{2}/cases/.+\.html$")
_TOTAL_RESULTS_RE = re.compile(r"Total results:\s*(\d+)", re.ASCII)


def _candidate(
    path: str, confidence: float, method: ResolutionMethod, title: str | None = None
) -> ResolvedCandidate:
    return ResolvedCandidate(
        url=f"{BAILII_ORIGIN}{path}",
        source=CandidateSource.BAILII.value,
        confidence=confidence,
        title=title,
        resolution_method=method.value,
    )


def resolve_location(location: str) -> str | None:
    """Turn a redirect Location header into an absolute BAILII URL.

    Returns None for anything that is neither origin-relative nor absolute.
    """
    if location.startswith("/"):
        return f"{BAILII_ORIGIN}{location}"
    if location.startswith("http"):
        return location
    return None


def _total_results(soup: BeautifulSoup) -> int:
    match = _TOTAL_RESULTS_RE.search(soup.get_text(" "))
    return int(match.group(1)) if match else 0


def _case_links(soup: BeautifulSoup) -> list:
    return soup.find_all("a", href=_CASE_HREF_RE)


def extract_title_search_candidates(body: str, limit: int = MAX_RESULTS) -> list[ResolvedCandidate]:
    """Parse a BAILII title-search results page.

    Links paired with their anchor text score 0.80. Anchor text that is
    shorter than five characters or plain navigation ("next", "home") is
    skipped. If no titled link survives, bare case links are returned at 0.70
    without titles. A page without a positive "Total results" count yields
    nothing.
    """
    soup = BeautifulSoup(body, "html.parser")
    if _total_results(soup) == 0:
        return []

    links = _case_links(soup)
    results: list[ResolvedCandidate] = []
    for a in links:
        title = a.get_text(" ", strip=True)
        if len(title) < MIN_TITLE_LENGTH or title.lower() in NAVIGATION_TEXT:
            continue
        results.append(
            _candidate(a["href"], TITLED_CONFIDENCE, ResolutionMethod.BAILII_TITLE_SEARCH, title)
        )
        if len(results) >= limit:
            return results

    if results:
        return results

    for a in links[:limit]:
        results.append(
            _candidate(a["href"], UNTITLED_CONFIDENCE, ResolutionMethod.BAILII_TITLE_SEARCH)
        )

    return results


def extract_fulltext_candidates(body: str, limit: int = MAX_RESULTS) -> list[ResolvedCandidate]:
    """Parse a BAILII full-text results page into unique case links (0.60)."""
    soup = BeautifulSoup(body, "html.parser")
    results: list[ResolvedCandidate] = []
    seen: set[str] = set()
    for a in _case_links(soup):
        path = a["href"]
        if path in seen:
            continue
        seen.add(path)
        results.append(
            _candidate(path, FULLTEXT_CONFIDENCE, ResolutionMethod.BAILII_FULLTEXT_SEARCH)
        )
        if len(results) >= limit:
            break
    return results


def _plus_join(terms: list[str], separator: str) -> str:
    return separator.join(quote_plus(term) for term in terms)


class BailiiClient:
    """Async client for BAILII's citation finder and search CGI endpoints.

    Args:
        client: Redirect-following HTTP client used for searches
        probe_client: Redirect-capturing HTTP client used by the citation
            finder; required only for ``find_by_citation``

    Example:
        >>> async with build_client(True) as follow, build_client(False) as probe:
        ...     bailii = BailiiClient(follow, probe_client=probe)
        ...     found = await bailii.find_by_citation("[2016] UKSC 42")
    """

    def __init__(
        self, client: httpx.AsyncClient, probe_client: httpx.AsyncClient | None = None
    ) -> None:
        self._client = client
        self._probe_client = probe_client

    async def _fetch_text(self, url: str, operation: str) -> str | None:
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            logger.warning("bailii_request_failed", operation=operation, error=str(e))
            return None
        if response.status_code != 200:
            logger.warning("bailii_non_200", operation=operation, status=response.status_code)
            return None
        return response.text

    async def find_by_citation(self, citation: str) -> ResolvedCandidate | None:
        """Ask BAILII's citation finder for the canonical judgment URL.

        Returns:
            Candidate at 0.95 when BAILII redirects, otherwise None
        """
        if self._probe_client is None:
            raise ValueError("find_by_citation needs a redirect-capturing probe_client")

        url = f"{BAILII_ORIGIN}/cgi-bin/find_by_citation.cgi"
        try:
            response = await self._probe_client.get(url, params={"citation": citation})
        except httpx.HTTPError as e:
            logger.warning("bailii_citation_finder_failed", citation=citation, error=str(e))
            return None

        if response.status_code not in (301, 302):
            logger.info("bailii_citation_not_recognised", status=response.status_code)
            return None

        location = response.headers.get("location")
        if not location:
            return None

        full_url = resolve_location(location)
        if full_url is None:
            logger.info("bailii_unusable_location", location=location)
            return None

        return ResolvedCandidate(
            url=full_url,
            source=CandidateSource.BAILII.value,
            confidence=CITATION_FINDER_CONFIDENCE,
            resolution_method=ResolutionMethod.BAILII_CITATION_FINDER.value,
        )

    async def search_by_title(
        self, party_names: str, mask_path: str = TITLE_SEARCH_MASK
    ) -> list[ResolvedCandidate]:
        """Search BAILII case titles for the given party names.

        Args:
            party_names: Whitespace-separated search words
            mask_path: BAILII collections to search

        Returns:
            Up to five candidates, best-effort; empty on any failure
        """
        terms = party_names.split()
        if not terms:
            return []
        url = (
            f"{BAILII_ORIGIN}/cgi-bin/lucy_search_1.cgi"
            f"?querytitle={_plus_join(terms, '+')}&mask_path={mask_path}"
        )
        body = await self._fetch_text(url, "title_search")
        if body is None:
            return []
        results = extract_title_search_candidates(body)
        logger.info("bailii_title_search_complete", terms=terms, count=len(results))
        return results

    async def search_fulltext(
        self, query_terms: str, mask_path: str = FULLTEXT_SEARCH_MASK
    ) -> list[ResolvedCandidate]:
        """Boolean AND full-text search across BAILII judgments.

        Args:
            query_terms: Whitespace-separated terms, all of which must match
            mask_path: BAILII collections to search

        Returns:
            Up to five unique candidates at 0.60; empty on any failure
        """
        terms = query_terms.split()
        if not terms:
            return []
        url = (
            f"{BAILII_ORIGIN}/cgi-bin/lucy_search_1.cgi"
            f"?query={_plus_join(terms, '+AND+')}&mask_path={mask_path}"
            "&method=boolean&sort=rank"
        )
        body = await self._fetch_text(url, "fulltext_search")
        if body is None:
            return []
        results = extract_fulltext_candidates(body)
        logger.info("bailii_fulltext_search_complete", terms=terms, count=len(results))
        return results


__all__ = [
    "BAILII_ORIGIN",
    "BailiiClient",
    "extract_fulltext_candidates",
    "extract_title_search_candidates",
    "resolve_location",
]
