"""Outbound domain allowlist.

Every URL that reaches the engine from a user or a document is checked here
before any request is made, and again on every redirect hop of a gated
request (see ``gate_request``). Hosts match exactly or as a subdomain of an
allowlisted host; lookalikes such as ``bailii.org.evil.com`` do not match.
"""

from __future__ import annotations

import httpx
import structlog

from .exceptions import DomainNotAllowedError

logger = structlog.get_logger(__name__)

ALLOWED_DOMAINS: tuple[str, ...] = (
    "www.bailii.org",
    "bailii.org",
    "caselaw.nationalarchives.gov.uk",
    "legislation.gov.uk",
    "www.legislation.gov.uk",
)


def _host_of(url: str) -> str | None:
    # Parsed exactly as the outbound request will be
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return None
    if parsed.scheme not in ("http", "https"):
        return None
    return parsed.host or None


def is_domain_allowed(url: str) -> bool:
    """Check whether a URL's host is on the allowlist.

    Args:
        url: Full URL (e.g. 'https://www.bailii.org/uk/cases/UKSC/2020/42.html')

    Returns:
        True for allowlisted hosts and their subdomains, False otherwise
        (including malformed URLs)

    Example:
        >>> is_domain_allowed("https://caselaw.nationalarchives.gov.uk/uksc/2020/42")
        True
        >>> is_domain_allowed("https://bailii.org.evil.com/")
        False
    """
    if not url or not isinstance(url, str):
        return False

    host = _host_of(url)
    if not host:
        return False

    return any(host == domain or host.endswith(f".{domain}") for domain in ALLOWED_DOMAINS)


def ensure_domain_allowed(url: str) -> None:
    """Raise DomainNotAllowedError unless the URL passes the gate."""
    if not is_domain_allowed(url):
        logger.warning("domain_not_allowed", url=url)
        raise DomainNotAllowedError(url)


async def gate_request(request: httpx.Request) -> None:
    """httpx request hook applying the gate to every outgoing request, redirects included."""
    ensure_domain_allowed(str(request.url))


__all__ = ["ALLOWED_DOMAINS", "ensure_domain_allowed", "gate_request", "is_domain_allowed"]
