"""
Shutdown coordinator that orchestrates graceful shutdown of all components.

Manages signal handlers, watches the long-running tasks and runs the
registered shutdown handlers in priority order.
"""

import asyncio
import signal
from typing import Dict, List, Optional

from stranger_wall.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class ShutdownCoordinator:
    """
    Coordinates graceful shutdown of multiple components.

    Shutdown starts on SIGINT/SIGTERM, on request_shutdown(), or when any
    watched task finishes (the self-test completing, the message feed
    failing).

    Example:
        coordinator = ShutdownCoordinator()
        coordinator.register(AnimationShutdownHandler(token, [consumer_task]))
        coordinator.register(LEDShutdownHandler(strip))
        coordinator.watch(feed_task, "Firebase feed")

        coordinator.setup_signal_handlers(asyncio.get_running_loop())
        await coordinator.wait_for_shutdown()
        await coordinator.shutdown_all()
    """

    def __init__(self, timeout_per_handler: float = 5.0, total_timeout: float = 15.0):
        """
        Args:
            timeout_per_handler: Timeout for each individual handler (seconds)
            total_timeout: Total timeout for entire shutdown sequence (seconds)
        """
        self._handlers: List = []
        self._watched: Dict[asyncio.Task, str] = {}
        self._shutdown_event = asyncio.Event()
        self._timeout_per_handler = timeout_per_handler
        self._total_timeout = total_timeout
        self.reason: Optional[str] = None
        self.failure: Optional[BaseException] = None

    def register(self, handler) -> None:
        """
        Register a shutdown handler.

        Handler must have:
        - shutdown_priority property (int)
        - async shutdown() method
        """
        if not hasattr(handler, "shutdown_priority"):
            raise ValueError(f"Handler {handler} missing shutdown_priority property")
        if not hasattr(handler, "shutdown"):
            raise ValueError(f"Handler {handler} missing shutdown() method")

        self._handlers.append(handler)
        log.debug(f"Registered shutdown handler: {handler.__class__.__name__}")

    def watch(self, task: asyncio.Task, description: str) -> None:
        """Trigger shutdown when `task` finishes, for whatever reason."""
        self._watched[task] = description

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Install SIGINT (Ctrl+C) and SIGTERM handlers on the running loop."""
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: self.request_shutdown(s.name))
        log.debug("Signal handlers installed (SIGINT, SIGTERM)")

    def request_shutdown(self, reason: str) -> None:
        if not self._shutdown_event.is_set():
            self.reason = reason
            log.info(f"{reason} received → triggering shutdown")
            self._shutdown_event.set()

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_event.is_set()

    async def wait_for_shutdown(self) -> None:
        """Wait for a shutdown request or for any watched task to finish."""
        waiter = asyncio.ensure_future(self._shutdown_event.wait())
        try:
            done, _ = await asyncio.wait(
                [waiter, *self._watched],
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            if not waiter.done():
                waiter.cancel()

        for task in done:
            if task is waiter:
                continue
            self._record_task_end(task)
            break

    def _record_task_end(self, task: asyncio.Task) -> None:
        description = self._watched.get(task, task.get_name())
        if task.cancelled():
            self.request_shutdown(f"{description} cancelled")
            return

        error = task.exception()
        if error is not None:
            self.failure = error
            log.error(f"{description} failed", error=str(error), error_type=type(error).__name__)
            self.request_shutdown(f"{description} failed")
        else:
            self.request_shutdown(f"{description} finished")

    async def shutdown_all(self) -> None:
        """
        Execute graceful shutdown of all handlers in priority order.

        Handlers are called in descending priority order (highest first).
        A failing or slow handler is logged and the sequence continues.
        """
        log.info("Initiating graceful shutdown sequence...", reason=self.reason or "UNKNOWN")

        sorted_handlers = sorted(
            self._handlers, key=lambda h: h.shutdown_priority, reverse=True
        )

        loop = asyncio.get_running_loop()
        start_time = loop.time()

        for handler in sorted_handlers:
            handler_name = handler.__class__.__name__

            elapsed = loop.time() - start_time
            if elapsed > self._total_timeout:
                log.error(f"Total shutdown timeout exceeded ({elapsed:.1f}s > {self._total_timeout}s)")
                break

            try:
                log.debug(f"Shutting down {handler_name} (priority={handler.shutdown_priority})...")
                await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
                log.debug(f"✓ {handler_name} shutdown complete")
            except asyncio.TimeoutError:
                log.error(f"{handler_name} shutdown timeout ({self._timeout_per_handler}s)")
            except Exception as e:
                log.error(f"Error shutting down {handler_name}", error=str(e), error_type=type(e).__name__)

        log.info("✓ Shutdown sequence complete")
