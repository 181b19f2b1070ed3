from __future__ import annotations
import asyncio
from typing import List

from stranger_wall.lifecycle.cancellation import CancellationToken
from stranger_wall.lifecycle.shutdown_protocol import IShutdownHandler
from stranger_wall.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class AnimationShutdownHandler(IShutdownHandler):
    """
    Stops the animation loop before the LEDs are cleared.

    Sets the cancellation token, so the driver stops at the next step
    boundary, and waits for the animation tasks to return. Tasks still
    running after `grace` seconds (e.g. idle on an empty queue) are
    cancelled outright.

    Priority: 130 (runs first)
    """

    def __init__(self, token: CancellationToken, tasks: List[asyncio.Task], grace: float = 1.0):
        self.token = token
        self.tasks = tasks
        self.grace = grace

    @property
    def shutdown_priority(self) -> int:
        return 130

    async def shutdown(self) -> None:
        log.info("Stopping animations...")
        self.token.cancel("shutdown")

        pending = [t for t in self.tasks if not t.done()]
        if not pending:
            return

        _, still_running = await asyncio.wait(pending, timeout=self.grace)
        for task in still_running:
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
            log.debug("Animation tasks cancelled", count=len(still_running))
