from __future__ import annotations

from stranger_wall.engine.strip import Strip
from stranger_wall.lifecycle.shutdown_protocol import IShutdownHandler
from stranger_wall.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class LEDShutdownHandler(IShutdownHandler):
    """
    Shutdown handler for LED hardware.

    Blanks the strand and releases the hardware handle so no pixel is left
    lit after exit. Runs AFTER the animation stops, so no step can render
    over the blank frame.

    Priority: 100 (runs second, after animations stop)
    """

    def __init__(self, strip: Strip):
        self.strip = strip

    @property
    def shutdown_priority(self) -> int:
        return 100

    async def shutdown(self) -> None:
        log.info("Clearing LEDs...")
        try:
            self.strip.release()
        except Exception as e:
            log.error("Error clearing LEDs", error=str(e), error_type=type(e).__name__)
            raise
        log.info("All LEDs cleared")
