"""HTTP client factory for outbound publisher requests.

Two configurations are used: one that follows redirects (page fetches and
searches) and one that captures them (BAILII's citation finder answers with
a 302 whose Location is the judgment URL).
"""

from __future__ import annotations

import httpx
import structlog

from ..core.config import settings
from ..core.domain_gate import gate_request
from ..core.exceptions import ClientBuildError

logger = structlog.get_logger(__name__)


def build_client(
    follow_redirects: bool,
    *,
    timeout: float | None = None,
    user_agent: str | None = None,
    max_redirects: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    gated: bool = False,
) -> httpx.AsyncClient:
    """Create an async HTTP client.

    Args:
        follow_redirects: Follow up to ``max_redirects`` redirects when True,
            return 3xx responses untouched when False
        timeout: Request timeout in seconds (defaults to settings.HTTP_TIMEOUT_SECONDS)
        user_agent: User-Agent header (defaults to settings.HTTP_USER_AGENT)
        max_redirects: Redirect limit (defaults to settings.HTTP_MAX_REDIRECTS)
        transport: Optional transport, used by tests to serve canned responses
        gated: Run the domain gate on every request the client sends,
            redirect hops included

    Returns:
        Configured httpx.AsyncClient; callers close it (``async with``)

    Raises:
        ClientBuildError: If the client cannot be constructed
    """
    try:
        return httpx.AsyncClient(
            follow_redirects=follow_redirects,
            max_redirects=settings.HTTP_MAX_REDIRECTS if max_redirects is None else max_redirects,
            timeout=settings.HTTP_TIMEOUT_SECONDS if timeout is None else timeout,
            headers={"User-Agent": user_agent or settings.HTTP_USER_AGENT},
            transport=transport,
            event_hooks={"request": [gate_request]} if gated else None,
        )
    except Exception as e:
        logger.error("http_client_build_failed", follow_redirects=follow_redirects, error=str(e))
        raise ClientBuildError(f"Failed to create HTTP client: {e}") from e


__all__ = ["build_client"]
