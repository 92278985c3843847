"""Judgment page content validation.

Both publishers answer HTTP 200 for pages that are really "not found" shells,
so a status code alone says little. A fetched page only counts as existing
when it passes the publisher-specific checks below.
"""

from __future__ import annotations

from urllib.parse import urlparse

import httpx
import structlog
from bs4 import BeautifulSoup

from ...models.citation import UrlCheckResult

logger = structlog.get_logger(__name__)

BAILII_ERROR_PHRASES: tuple[str, ...] = (
    "page not found",
    "error 404",
    "no case found",
    "citation not found",
    "this page does not exist",
)
LEGAL_INDICATORS: tuple[str, ...] = (
    "judgment",
    "court",
    "justice",
    "appeal",
    "claimant",
    "defendant",
    "respondent",
    "appellant",
    "held",
    "ordered",
    "lordship",
    "honour",
    "tribunal",
)
XML_JUDGMENT_MARKERS: tuple[str, ...] = ("<akomantoso", "<frbrwork")

BAILII_ERROR_WINDOW = 1000
BAILII_MIN_LENGTH = 3000
BAILII_MIN_INDICATORS = 3
FCL_ERROR_WINDOW = 2000
FCL_MIN_LENGTH = 5000
TITLE_WINDOW = 5000


def _host(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def is_bailii_url(url: str) -> bool:
    host = _host(url)
    return host == "bailii.org" or host.endswith(".bailii.org")


def is_fcl_url(url: str) -> bool:
    return _host(url) == "caselaw.nationalarchives.gov.uk"


def validate_bailii_has_content(html: str) -> bool:
    """Check that a BAILII page is a real judgment rather than an error shell.

    Rejects pages with an error phrase near the top, pages under 3000
    characters, and pages with fewer than three distinct legal keywords.
    """
    lower = html.lower()

    head = lower[:BAILII_ERROR_WINDOW]
    if any(phrase in head for phrase in BAILII_ERROR_PHRASES):
        return False

    if len(html) < BAILII_MIN_LENGTH:
        return False

    matches = sum(1 for indicator in LEGAL_INDICATORS if indicator in lower)
    return matches >= BAILII_MIN_INDICATORS


def validate_xml_judgment(body: str) -> bool:
    """Require a legal-document schema root (Akoma Ntoso / FRBR) in XML bodies."""
    lower = body.lower()
    return any(marker in lower for marker in XML_JUDGMENT_MARKERS)


def validate_fcl_page(html: str) -> bool:
    """Reject Find Case Law 'page not found' pages and near-empty bodies."""
    head = html[:FCL_ERROR_WINDOW].lower()
    return "page not found" not in head and len(html) >= FCL_MIN_LENGTH


def extract_page_title(body: str) -> str | None:
    """Extract the <title> text from the first 5000 characters of a page.

    Runs of whitespace inside the title, line breaks included, collapse to a
    single space.
    """
    soup = BeautifulSoup(body[:TITLE_WINDOW], "html.parser")
    if soup.title is None:
        return None
    title = " ".join(soup.title.get_text().split())
    return title or None


def classify_page(url: str, body: str) -> bool:
    """Apply the publisher-specific content checks for ``url``."""
    if is_bailii_url(url) and not validate_bailii_has_content(body):
        return False

    is_xml = url.lower().endswith(".xml")
    if is_xml and not validate_xml_judgment(body):
        return False

    if is_fcl_url(url) and not is_xml and not validate_fcl_page(body):
        return False

    return True


async def check_url(client: httpx.AsyncClient, url: str) -> UrlCheckResult:
    """Fetch a URL and decide whether it holds real judgment content.

    Args:
        client: Redirect-following HTTP client
        url: URL to check (callers gate user-supplied URLs beforehand)

    Returns:
        UrlCheckResult; status_code is 0 on network failure (including a
        failed body read) and 404 when a 200 page fails content validation
    """
    try:
        response = await client.get(url)
    except httpx.HTTPError as e:
        logger.warning("url_check_network_error", url=url, error=str(e))
        return UrlCheckResult(url=url, exists=False, status_code=0)

    if response.status_code != 200:
        logger.info("url_check_non_200", url=url, status=response.status_code)
        return UrlCheckResult(url=url, exists=False, status_code=response.status_code)

    body = response.text
    if not classify_page(url, body):
        logger.info("url_check_content_rejected", url=url, length=len(body))
        return UrlCheckResult(url=url, exists=False, status_code=404)

    return UrlCheckResult(url=url, exists=True, status_code=200, title=extract_page_title(body))


__all__ = [
    "check_url",
    "classify_page",
    "extract_page_title",
    "is_bailii_url",
    "is_fcl_url",
    "validate_bailii_has_content",
    "validate_fcl_page",
    "validate_xml_judgment",
]
