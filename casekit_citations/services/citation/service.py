"""Citation service: the operations exposed to the rest of CaseKit.

Each operation opens its own HTTP clients and closes them on exit, so calls
for different citations share no state and may run concurrently. Within one
call everything is sequential.
"""

from __future__ import annotations

import httpx
import structlog

from ...core.domain_gate import ensure_domain_allowed, is_domain_allowed
from ...core.exceptions import DomainNotAllowedError, JudgmentFetchError
from ...core.pacing import Pacer, RequestPacer
from ...models.citation import (
    CitationResolution,
    FetchedJudgment,
    ResolvedCandidate,
    UrlCheckResult,
    VerifiedCitation,
)
from ...utils.citation_extractor import extract_citations
from ..http_client import build_client
from ..providers.bailii_client import BailiiClient
from ..providers.fcl_client import FindCaseLawClient
from .content_validator import check_url, extract_page_title
from .resolver import CitationResolver

logger = structlog.get_logger(__name__)


class CitationService:
    """Entry point for citation checking, resolution and judgment fetching.

    Args:
        pacer: Awaitable run between outbound requests (defaults to the
            configured RequestPacer)
        transport: Optional httpx transport for every client this service
            builds; tests pass an ``httpx.MockTransport``

    Example:
        >>> service = CitationService()
        >>> resolution = await service.resolve_citation("[2020] UKSC 42")
        >>> [c.url for c in resolution.candidates]
        ['https://www.bailii.org/uk/cases/UKSC/2020/42.html', ...]
    """

    def __init__(
        self, pacer: Pacer | None = None, transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        self._pace: Pacer = pacer or RequestPacer()
        self._transport = transport

    def _client(self, follow_redirects: bool = True, gated: bool = False) -> httpx.AsyncClient:
        return build_client(follow_redirects, transport=self._transport, gated=gated)

    async def check_urls_exist(self, urls: list[str]) -> list[UrlCheckResult]:
        """Validate each URL in turn.

        URLs outside the allowlist come back as ``exists=False`` with status
        403 and are never requested. A URL whose redirects leave the allowlist
        also reads 403. Requests are paced.
        """
        results: list[UrlCheckResult] = []
        requested = 0
        async with self._client(gated=True) as client:
            for url in urls:
                if not is_domain_allowed(url):
                    logger.info("url_check_blocked", url=url)
                    results.append(UrlCheckResult(url=url, exists=False, status_code=403))
                    continue

                if requested:
                    await self._pace()
                requested += 1
                try:
                    results.append(await check_url(client, url))
                except DomainNotAllowedError as e:
                    logger.warning("url_check_redirect_blocked", url=url, target=e.url)
                    results.append(UrlCheckResult(url=url, exists=False, status_code=403))

        logger.info(
            "url_check_batch_complete",
            total=len(urls),
            existing=sum(1 for r in results if r.exists),
        )
        return results

    async def resolve_citation(
        self, citation: str, case_name: str | None = None
    ) -> CitationResolution:
        """Run the full five-strategy cascade for one citation."""
        async with self._client(True) as follow, self._client(False) as probe:
            resolver = CitationResolver(
                bailii=BailiiClient(follow, probe_client=probe),
                fcl=FindCaseLawClient(follow),
                page_client=follow,
                pacer=self._pace,
            )
            return await resolver.resolve(citation, case_name)

    async def search_by_title(self, query: str) -> list[ResolvedCandidate]:
        """Ad-hoc BAILII title search by party names."""
        async with self._client() as client:
            return await BailiiClient(client).search_by_title(query)

    async def search_full_text(self, query: str) -> list[ResolvedCandidate]:
        """Ad-hoc Find Case Law search."""
        async with self._client() as client:
            return await FindCaseLawClient(client).search(query)

    async def fetch_judgment(self, url: str) -> FetchedJudgment:
        """Fetch a judgment page (HTML or XML) from an allowlisted publisher.

        Raises:
            DomainNotAllowedError: URL host, or a host it redirects to, is not
                allowlisted
            JudgmentFetchError: Request or body read failed
        """
        ensure_domain_allowed(url)

        async with self._client(gated=True) as client:
            try:
                response = await client.get(url)
            except httpx.HTTPError as e:
                logger.error("judgment_fetch_failed", url=url, error=str(e))
                raise JudgmentFetchError(f"Failed to fetch judgment: {e}") from e

        body = response.text
        return FetchedJudgment(
            url=url,
            title=extract_page_title(body),
            content_type=response.headers.get("content-type", "text/html"),
            content=body,
            ok=response.is_success,
        )

    async def audit_citations(self, text: str) -> list[VerifiedCitation]:
        """Extract every citation from text and resolve each one in turn.

        A citation whose resolution raises is marked ``error`` and the audit
        moves on to the next one.
        """
        audited: list[VerifiedCitation] = []
        for extracted in extract_citations(text):
            if audited:
                await self._pace()
            item = VerifiedCitation(**extracted.model_dump(), status="resolving")
            try:
                resolution = await self.resolve_citation(extracted.citation, extracted.case_name)
            except Exception as e:
                logger.error("citation_audit_failed", citation=extracted.citation, error=str(e))
                audited.append(item.model_copy(update={"status": "error", "error": str(e)}))
                continue

            status = "verified" if resolution.status == "resolved" else "not_found"
            audited.append(
                item.model_copy(update={"status": status, "resolution": resolution})
            )

        logger.info("citation_audit_complete", total=len(audited))
        return audited


__all__ = ["CitationService"]
