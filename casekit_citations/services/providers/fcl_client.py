"""Find Case Law (The National Archives) Atom feed search client."""

from __future__ import annotations

import httpx
import structlog
from bs4 import BeautifulSoup

from ...models.citation import CandidateSource, ResolutionMethod, ResolvedCandidate

logger = structlog.get_logger(__name__)

FCL_ORIGIN = "https://caselaw.nationalarchives.gov.uk"
MAX_RESULTS = 5
ATOM_CONFIDENCE = 0.75


def _on_fcl(url: str) -> bool:
    return url.startswith(f"{FCL_ORIGIN}/")


def _entry_url(entry) -> str | None:
    for link in entry.find_all("link", href=True):
        href = link["href"].strip()
        if _on_fcl(href):
            return href
    entry_id = entry.find("id")
    if entry_id is not None:
        text = entry_id.get_text(strip=True)
        if _on_fcl(text):
            return text
    return None


def extract_atom_candidates(body: str, limit: int = MAX_RESULTS) -> list[ResolvedCandidate]:
    """Parse an Atom feed into judgment candidates.

    Each ``<entry>`` contributes its title and a judgment URL, taken from a
    ``<link href>`` on the Find Case Law host or, failing that, from
    ``<id>``. Entries with neither are skipped.
    """
    soup = BeautifulSoup(body, "xml")
    results: list[ResolvedCandidate] = []
    for entry in soup.find_all("entry"):
        url = _entry_url(entry)
        if url is None:
            continue

        title_tag = entry.find("title")
        title = title_tag.get_text(strip=True) if title_tag is not None else None

        results.append(
            ResolvedCandidate(
                url=url,
                source=CandidateSource.FIND_CASE_LAW.value,
                confidence=ATOM_CONFIDENCE,
                title=title or None,
                resolution_method=ResolutionMethod.FCL_ATOM_SEARCH.value,
            )
        )
        if len(results) >= limit:
            break

    return results


class FindCaseLawClient:
    """Async client for the Find Case Law Atom search feed.

    Example:
        >>> async with build_client(True) as http:
        ...     results = await FindCaseLawClient(http).search("patel mirza")
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def search(self, query: str) -> list[ResolvedCandidate]:
        """Search Find Case Law and return up to five candidates at 0.75."""
        if not query.strip():
            return []

        try:
            response = await self._client.get(
                f"{FCL_ORIGIN}/atom.xml", params={"query": query, "per_page": MAX_RESULTS}
            )
        except httpx.HTTPError as e:
            logger.warning("fcl_search_failed", query=query, error=str(e))
            return []

        if response.status_code != 200:
            logger.warning("fcl_search_non_200", query=query, status=response.status_code)
            return []

        results = extract_atom_candidates(response.text)
        logger.info("fcl_search_complete", query=query, count=len(results))
        return results


__all__ = ["FCL_ORIGIN", "FindCaseLawClient", "extract_atom_candidates"]
