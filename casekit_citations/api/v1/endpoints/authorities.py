"""Authority endpoints for a case."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from casekit_citations.core.exceptions import AuthorityStoreError, InvalidCasePathError
from casekit_citations.models.authority import Authority
from casekit_citations.repositories.authority_repository import AuthorityRepository

router = APIRouter(prefix="/v1/cases", tags=["authorities"])


def get_authority_repository() -> AuthorityRepository:
    """Dependency providing the authority repository (overridden in tests)."""
    return AuthorityRepository()


def _storage_error(e: Exception) -> HTTPException:
    if isinstance(e, InvalidCasePathError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e),
    )


@router.get("/{case_id}/authorities", response_model=list[Authority])
def list_authorities(
    case_id: str,
    repo: AuthorityRepository = Depends(get_authority_repository),
) -> list[Authority]:
    """List the authorities saved for a case."""
    try:
        return repo.load_authorities(case_id)
    except (AuthorityStoreError, InvalidCasePathError) as e:
        raise _storage_error(e) from e


@router.post("/{case_id}/authorities", response_model=list[Authority])
def save_authority(
    case_id: str,
    authority: Authority,
    repo: AuthorityRepository = Depends(get_authority_repository),
) -> list[Authority]:
    """Insert or replace an authority by id."""
    try:
        return repo.save_authority(case_id, authority)
    except (AuthorityStoreError, InvalidCasePathError) as e:
        raise _storage_error(e) from e


@router.delete("/{case_id}/authorities/{authority_id}", response_model=list[Authority])
def remove_authority(
    case_id: str,
    authority_id: str,
    repo: AuthorityRepository = Depends(get_authority_repository),
) -> list[Authority]:
    """Delete an authority by id."""
    try:
        return repo.remove_authority(case_id, authority_id)
    except (AuthorityStoreError, InvalidCasePathError) as e:
        raise _storage_error(e) from e
