from __future__ import annotations
from typing import List, Sequence, Tuple

from stranger_wall.hardware.led.strip_interface import IFrameSink
from stranger_wall.models.frame import AnimationFrame


class VirtualSink(IFrameSink):
    """
    In-memory sink for development machines and tests.

    Every rendered frame is kept (with the brightness in effect at the
    time) and every call is appended to `calls` as (name, arg).
    """

    def __init__(self, brightness: int = 0):
        self._led_count = 0
        self._brightness = brightness
        self._open = False
        self.frames: List[AnimationFrame] = []
        self.calls: List[Tuple[str, object]] = []

    @property
    def led_count(self) -> int:
        return self._led_count

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def brightness(self) -> int:
        return self._brightness

    @property
    def last_frame(self) -> AnimationFrame:
        return self.frames[-1]

    def init(self, led_count: int) -> None:
        self._led_count = led_count
        self._open = True
        self.calls.append(("init", led_count))

    def render(self, pixels: Sequence[int]) -> None:
        if not self._open:
            raise RuntimeError("VirtualSink used before init() or after reset()")
        frame = tuple(pixels[:self._led_count])
        frame += (0,) * (self._led_count - len(frame))
        self.frames.append(AnimationFrame(frame, self._brightness))
        self.calls.append(("render", frame))

    def set_brightness(self, brightness: int) -> None:
        self._brightness = brightness
        self.calls.append(("set_brightness", brightness))

    def reset(self) -> None:
        if self._open:
            self.frames.append(AnimationFrame((0,) * self._led_count, self._brightness))
        self._open = False
        self.calls.append(("reset", None))
