"""
Cancellation token for the animation loop.

Set from the shutdown path, checked by the FrameDriver at every step
boundary. Everything runs on the event loop thread, so setting the token
can never interleave with a render call.
"""

import asyncio
from typing import Optional


class AnimationCancelled(Exception):
    """Raised by the driver when the token is set between steps."""


class CancellationToken:
    def __init__(self):
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise AnimationCancelled(self.reason)

    async def wait(self) -> None:
        await self._event.wait()
