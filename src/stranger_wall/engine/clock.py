"""
Clock abstraction used by the FrameDriver for every wait.

AsyncioClock sleeps for real; tests pass a clock that only records delays.
"""

import asyncio
from typing import Optional, Protocol

from stranger_wall.lifecycle.cancellation import CancellationToken


class IClock(Protocol):
    async def sleep(self, seconds: float, token: Optional[CancellationToken] = None) -> None:
        ...


class AsyncioClock:
    """
    Real-time clock on the running event loop.

    With a token, the sleep ends early once the token is set, so a long
    pause does not hold up shutdown. Short ramp steps simply finish.
    """

    async def sleep(self, seconds: float, token: Optional[CancellationToken] = None) -> None:
        if seconds <= 0:
            # still yield so signal callbacks get a chance to run between steps
            await asyncio.sleep(0)
            return

        if token is None:
            await asyncio.sleep(seconds)
            return

        try:
            await asyncio.wait_for(token.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
