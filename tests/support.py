"""Canned publisher pages and mock HTTP helpers shared by the tests."""

from __future__ import annotations

from collections.abc import Callable

import httpx

LEGAL_PARAGRAPH = (
    "<p>This is the judgment of the Court of Appeal. The appellant appealed against "
    "the order of the judge below. The respondent resisted the appeal. Lord Justice "
    "Smith held that the claimant was entitled to restitution and the defendant "
    "ordered to repay. Their lordship agreed.</p>\n"
)


def bailii_judgment_page(title: str = "Patel v Mirza [2016] UKSC 42 (20 July 2016)") -> str:
    """A BAILII page that passes content validation."""
    body = LEGAL_PARAGRAPH * 20
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


def fcl_judgment_page(title: str = "Patel v Mirza - Find Case Law") -> str:
    """A Find Case Law page that passes content validation."""
    body = LEGAL_PARAGRAPH * 25
    return f"<html><head><title>{title}</title></head><body>{body}</body></html>"


def bailii_not_found_page() -> str:
    return "<html><head><title>BAILII</title></head><body><h1>Page not found</h1></body></html>"


def atom_feed(*entries: tuple[str, str]) -> str:
    """Build an Atom feed from (title, url) pairs."""
    items = "".join(
        f"<entry><title>{title}</title>"
        f'<link rel="alternate" href="{url}"/>'
        f"<id>{url}</id></entry>"
        for title, url in entries
    )
    return f'<?xml version="1.0"?><feed xmlns="http://www.w3.org/2005/Atom">{items}</feed>'


Handler = Callable[[httpx.Request], httpx.Response]


def make_client(handler: Handler, *, follow_redirects: bool = True) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(
        transport=httpx.MockTransport(handler), follow_redirects=follow_redirects
    )
