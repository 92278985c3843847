"""Exception types raised by the citation engine.

Strategy-level failures (network errors, unparseable provider pages) are never
raised; they degrade to empty result sets. The exceptions below are the ones a
caller has to handle.
"""

from __future__ import annotations


class CaseKitCitationError(Exception):
    """Base class for citation engine errors."""


class ClientBuildError(CaseKitCitationError):
    """HTTP client could not be constructed."""


class DomainNotAllowedError(CaseKitCitationError, PermissionError):
    """URL host is outside the legal-publisher allowlist."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(
            "URL domain not allowed. Only BAILII, Find Case Law and legislation.gov.uk "
            f"URLs are permitted: {url}"
        )


class JudgmentFetchError(CaseKitCitationError):
    """Judgment page could not be fetched or read."""


class AuthorityStoreError(CaseKitCitationError):
    """Authorities file could not be read, parsed or written."""


class InvalidCasePathError(CaseKitCitationError, ValueError):
    """Case identifier cannot be turned into a safe directory path."""


__all__ = [
    "AuthorityStoreError",
    "CaseKitCitationError",
    "ClientBuildError",
    "DomainNotAllowedError",
    "InvalidCasePathError",
    "JudgmentFetchError",
]
