"""
PresentationService - serializes incoming messages onto the wall

Messages are queued as they arrive and presented strictly one at a time,
in arrival order. A new message never interrupts the one on the wall.
"""

from __future__ import annotations
import asyncio
from typing import Callable, Optional

from stranger_wall.controllers.presentation_controller import PresentationController
from stranger_wall.lifecycle.cancellation import AnimationCancelled, CancellationToken
from stranger_wall.models.enums import EventType
from stranger_wall.models.events import Message, MessageReceivedEvent
from stranger_wall.services.event_bus import EventBus
from stranger_wall.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.ANIMATION)


class PresentationService:
    def __init__(
        self,
        controller: PresentationController,
        event_bus: EventBus,
        token: Optional[CancellationToken] = None,
        echo: Callable[[str], None] = print,
    ):
        self.controller = controller
        self.token = token or CancellationToken()
        self.echo = echo
        self.queue: "asyncio.Queue[Message]" = asyncio.Queue()
        self.presented = 0
        self.failed = 0
        self.current: Optional[Message] = None

        event_bus.subscribe(EventType.MESSAGE_RECEIVED, self.on_message_received)

    async def on_message_received(self, event: MessageReceivedEvent) -> None:
        message = event.message
        if message is None:
            return
        self.echo(f"Message received: {message.text}")
        self.queue.put_nowait(message)
        log.debug("Message queued", key=message.key, pending=self.queue.qsize())

    async def next_message(self) -> Optional[Message]:
        """Next queued message, or None once the token is cancelled."""
        if self.token.cancelled:
            return None

        getter = asyncio.ensure_future(self.queue.get())
        stopper = asyncio.ensure_future(self.token.wait())
        try:
            await asyncio.wait({getter, stopper}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stopper.cancel()
            if not getter.done():
                getter.cancel()

        # a message already taken off the queue is still presented (and cancelled there)
        if getter.done() and not getter.cancelled():
            return getter.result()
        return None

    async def run(self) -> None:
        """
        Present queued messages until cancelled.

        Returns when the token is cancelled, whether idle or mid-message.
        A failing presentation (e.g. a render error) is logged and the next
        message is taken.
        """
        while True:
            message = await self.next_message()
            if message is None:
                log.debug("Presentation service stopping while idle", pending=self.queue.qsize())
                return

            self.current = message
            try:
                await self.controller.present(message.text)
                self.presented += 1
            except AnimationCancelled:
                log.debug("Presentation service stopping", pending=self.queue.qsize())
                return
            except Exception as ex:
                self.failed += 1
                log.error(
                    "Message presentation failed",
                    key=message.key,
                    error=str(ex),
                    error_type=type(ex).__name__,
                )
            finally:
                self.current = None
                self.queue.task_done()
