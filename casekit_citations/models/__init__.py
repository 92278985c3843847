"""Data models for citation resolution and authorities."""

from .authority import Authority
from .citation import (
    CandidateSource,
    CitationResolution,
    ExtractedCitation,
    FetchedJudgment,
    ResolutionMethod,
    ResolvedCandidate,
    UrlCheckResult,
    VerifiedCitation,
)

__all__ = [
    "Authority",
    "CandidateSource",
    "CitationResolution",
    "ExtractedCitation",
    "FetchedJudgment",
    "ResolutionMethod",
    "ResolvedCandidate",
    "UrlCheckResult",
    "VerifiedCitation",
]
