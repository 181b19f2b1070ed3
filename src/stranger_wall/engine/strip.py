"""
Strip - frame buffer and brightness for the wall strand

Owned by the PresentationController and lent to the FrameDriver for the
duration of a phase. The sink only ever sees full-frame snapshots.
"""

from __future__ import annotations
from typing import List

from stranger_wall.hardware.led.strip_interface import IFrameSink
from stranger_wall.models.frame import AnimationFrame
from stranger_wall.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HARDWARE)


class Strip:
    """
    N packed colors plus one strip-wide brightness (0-255).

    Allocated once at startup, never resized. Pixel writes outside [0, N)
    raise IndexError instead of reaching the hardware buffer.
    """

    def __init__(self, sink: IFrameSink, led_count: int, brightness: int = 0):
        if led_count <= 0:
            raise ValueError(f"led_count must be positive, got {led_count}")
        self.sink = sink
        self.led_count = led_count
        self.pixels: List[int] = [0] * led_count
        self.brightness = self._clamp(brightness)
        self.frames_rendered = 0

    # ------------------------------------------------------------
    # Buffer
    # ------------------------------------------------------------

    def set_pixel(self, index: int, color: int) -> None:
        self._check_index(index)
        self.pixels[index] = color & 0xFFFFFF

    def clear_pixel(self, index: int) -> None:
        self.set_pixel(index, 0)

    def fill(self, color: int) -> None:
        self.pixels[:] = [color & 0xFFFFFF] * self.led_count

    def blank(self) -> None:
        self.fill(0)

    def set_brightness(self, brightness: int) -> None:
        self.brightness = self._clamp(brightness)

    def snapshot(self) -> AnimationFrame:
        return AnimationFrame(tuple(self.pixels), self.brightness)

    @property
    def is_blank(self) -> bool:
        return not any(self.pixels)

    # ------------------------------------------------------------
    # Hardware
    # ------------------------------------------------------------

    def open(self) -> None:
        """Initialize the sink for this strip's length."""
        self.sink.init(self.led_count)

    def render(self) -> AnimationFrame:
        """Push the current buffer and brightness to the sink."""
        frame = self.snapshot()
        self.sink.set_brightness(frame.brightness)
        self.sink.render(frame.pixels)
        self.frames_rendered += 1
        return frame

    def release(self) -> None:
        """Blank, render and release the hardware handle."""
        self.blank()
        self.render()
        self.sink.reset()

    def hard_reset(self) -> None:
        """Blank, render, release and re-initialize, ready for the next render."""
        self.release()
        self.sink.init(self.led_count)
        log.debug("Strip reset", leds=self.led_count)

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.led_count:
            raise IndexError(f"Pixel index {index} out of range (0..{self.led_count - 1})")

    @staticmethod
    def _clamp(brightness: int) -> int:
        return max(0, min(255, int(brightness)))

    def __len__(self) -> int:
        return self.led_count

    def __repr__(self) -> str:
        return f"<Strip leds={self.led_count} brightness={self.brightness} lit={len(self.snapshot().lit)}>"
