"""Citation endpoints: resolve, check, search, fetch and audit."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from casekit_citations.api.v1.schemas import (
    AuditCitationsRequest,
    CheckUrlsRequest,
    FetchJudgmentRequest,
    ResolveCitationRequest,
)
from casekit_citations.core.exceptions import (
    ClientBuildError,
    DomainNotAllowedError,
    JudgmentFetchError,
)
from casekit_citations.models.citation import (
    CitationResolution,
    FetchedJudgment,
    ResolvedCandidate,
    UrlCheckResult,
    VerifiedCitation,
)
from casekit_citations.services.citation.service import CitationService

router = APIRouter(prefix="/v1/citations", tags=["citations"])


def get_citation_service() -> CitationService:
    """Dependency providing the citation service (overridden in tests)."""
    return CitationService()


def _client_error(e: ClientBuildError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e),
    )


@router.post("/resolve", response_model=CitationResolution)
async def resolve_citation(
    request: ResolveCitationRequest,
    service: CitationService = Depends(get_citation_service),
) -> CitationResolution:
    """Resolve a citation to verified judgment URLs."""
    try:
        return await service.resolve_citation(request.citation, request.case_name)
    except ClientBuildError as e:
        raise _client_error(e) from e


@router.post("/check", response_model=list[UrlCheckResult])
async def check_urls(
    request: CheckUrlsRequest,
    service: CitationService = Depends(get_citation_service),
) -> list[UrlCheckResult]:
    """Check that each URL exists and carries real judgment content."""
    try:
        return await service.check_urls_exist(request.urls)
    except ClientBuildError as e:
        raise _client_error(e) from e


@router.get("/search/title", response_model=list[ResolvedCandidate])
async def search_by_title(
    query: str = Query(..., min_length=1, max_length=500),
    service: CitationService = Depends(get_citation_service),
) -> list[ResolvedCandidate]:
    """Search BAILII case titles."""
    try:
        return await service.search_by_title(query)
    except ClientBuildError as e:
        raise _client_error(e) from e


@router.get("/search/full-text", response_model=list[ResolvedCandidate])
async def search_full_text(
    query: str = Query(..., min_length=1, max_length=500),
    service: CitationService = Depends(get_citation_service),
) -> list[ResolvedCandidate]:
    """Search Find Case Law."""
    try:
        return await service.search_full_text(query)
    except ClientBuildError as e:
        raise _client_error(e) from e


@router.post("/fetch", response_model=FetchedJudgment)
async def fetch_judgment(
    request: FetchJudgmentRequest,
    service: CitationService = Depends(get_citation_service),
) -> FetchedJudgment:
    """Fetch a judgment page from an allowlisted publisher."""
    try:
        return await service.fetch_judgment(request.url)
    except DomainNotAllowedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        ) from e
    except JudgmentFetchError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        ) from e
    except ClientBuildError as e:
        raise _client_error(e) from e


@router.post("/audit", response_model=list[VerifiedCitation])
async def audit_citations(
    request: AuditCitationsRequest,
    service: CitationService = Depends(get_citation_service),
) -> list[VerifiedCitation]:
    """Extract citations from document text and resolve each one."""
    return await service.audit_citations(request.text)
