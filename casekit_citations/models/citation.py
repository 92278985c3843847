"""Citation resolution models shared by providers, resolver and API.

Fields serialise with camelCase aliases so the JSON shape matches what the
desktop front end consumes. Either the field name or the alias is accepted on
input.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CandidateSource(str, Enum):
    """Publisher a candidate URL belongs to."""

    BAILII = "bailii"
    FIND_CASE_LAW = "find_case_law"


class ResolutionMethod(str, Enum):
    """Strategy that produced a candidate."""

    NEUTRAL_CITATION_BAILII = "neutral_citation_bailii"
    NEUTRAL_CITATION_FCL = "neutral_citation_fcl"
    BAILII_CITATION_FINDER = "bailii_citation_finder"
    BAILII_TITLE_SEARCH = "bailii_title_search"
    FCL_ATOM_SEARCH = "fcl_atom_search"
    BAILII_FULLTEXT_SEARCH = "bailii_fulltext_search"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)


class UrlCheckResult(_CamelModel):
    """Outcome of validating one URL.

    ``exists=False`` does not imply a network failure: a reachable page that
    reads as "not found" also yields ``exists=False`` with status 404.
    """

    url: str = Field(..., description="URL that was checked")
    exists: bool = Field(..., description="Page exists and carries real content")
    status_code: int = Field(
        ...,
        alias="statusCode",
        description="HTTP status; 0 on network failure, 403 when the domain is blocked",
    )
    title: str | None = Field(default=None, description="Page <title>, when found")


class ResolvedCandidate(_CamelModel):
    """Candidate judgment URL for a citation."""

    url: str = Field(..., description="Candidate judgment URL")
    source: str = Field(..., description="Provider identifier (bailii, find_case_law)")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Heuristic score (0.0-1.0)")
    title: str | None = Field(default=None, description="Judgment title, when known")
    resolution_method: str = Field(
        ..., alias="resolutionMethod", description="Strategy that produced the candidate"
    )


class CitationResolution(_CamelModel):
    """Complete output of one resolution call."""

    citation: str
    case_name: str | None = Field(default=None, alias="caseName")
    candidates: list[ResolvedCandidate] = Field(default_factory=list)
    status: Literal["resolved", "unresolvable"]
    attempts_log: list[str] = Field(default_factory=list, alias="attemptsLog")


class FetchedJudgment(_CamelModel):
    """Raw judgment page fetched from an allowlisted publisher."""

    url: str
    title: str | None = None
    content_type: str = Field(default="text/html", alias="contentType")
    content: str
    ok: bool


class ExtractedCitation(_CamelModel):
    """Citation found in free text, before any network lookup."""

    citation: str
    case_name: str | None = Field(default=None, alias="caseName")
    is_neutral: bool = Field(..., alias="isNeutral")
    source_text: str | None = Field(default=None, alias="sourceText")


VerificationStatus = Literal["pending", "resolving", "verified", "not_found", "error"]


class VerifiedCitation(ExtractedCitation):
    """Extracted citation together with its resolution outcome."""

    status: VerificationStatus = "pending"
    resolution: CitationResolution | None = None
    error: str | None = None


__all__ = [
    "CandidateSource",
    "CitationResolution",
    "ExtractedCitation",
    "FetchedJudgment",
    "ResolutionMethod",
    "ResolvedCandidate",
    "UrlCheckResult",
    "VerificationStatus",
    "VerifiedCitation",
]
