"""Pytest configuration for tests.

No test touches the network: HTTP is served by ``httpx.MockTransport`` (see
``support.py``) and pacing is replaced with a no-op.
"""

from __future__ import annotations

import pytest

from casekit_citations.core.pacing import no_pacing


@pytest.fixture
def pacer():
    """No-op pacer for fast tests."""
    return no_pacing


class CountingPacer:
    """Pacer that records how many times it was awaited."""

    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> None:
        self.calls += 1


@pytest.fixture
def counting_pacer() -> CountingPacer:
    return CountingPacer()
