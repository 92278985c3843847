"""API request schemas for the citation endpoints.

Responses reuse the domain models in ``casekit_citations.models``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResolveCitationRequest(BaseModel):
    """Request model for /v1/citations/resolve.

    Attributes:
        citation: Citation text (1-1000 chars)
        case_name: Optional case name hint
    """

    model_config = ConfigDict(populate_by_name=True)

    citation: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Citation text",
        examples=["Patel v Mirza [2016] UKSC 42"],
    )
    case_name: str | None = Field(
        None, alias="caseName", max_length=500, description="Optional case name hint"
    )

    @field_validator("citation")
    @classmethod
    def citation_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("citation must not be blank")
        return value.strip()


class CheckUrlsRequest(BaseModel):
    """Request model for /v1/citations/check."""

    urls: list[str] = Field(..., max_length=100, description="URLs to validate")


class FetchJudgmentRequest(BaseModel):
    """Request model for /v1/citations/fetch."""

    url: str = Field(..., min_length=1, description="Judgment URL on an allowlisted host")


class AuditCitationsRequest(BaseModel):
    """Request model for /v1/citations/audit."""

    text: str = Field(..., min_length=1, max_length=500_000, description="Document text")
