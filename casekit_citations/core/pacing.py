"""Request pacing shared by every outbound call.

The engine keeps a conservative request rate against both publishers: a fixed
pause separates every two network calls. The pacer is passed into the
resolver and the batch URL checker so tests can swap in ``no_pacing``.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from .config import settings

Pacer = Callable[[], Awaitable[None]]


class RequestPacer:
    """Async callable that sleeps for a fixed interval.

    Example:
        >>> pace = RequestPacer(interval=0.2)
        >>> await pace()  # sleeps 200ms
    """

    def __init__(self, interval: float | None = None) -> None:
        self.interval = settings.request_pacing_seconds if interval is None else interval
        self.pauses = 0

    async def __call__(self) -> None:
        self.pauses += 1
        if self.interval > 0:
            await asyncio.sleep(self.interval)


async def no_pacing() -> None:
    """Pacer that never waits."""
    return None


__all__ = ["Pacer", "RequestPacer", "no_pacing"]
