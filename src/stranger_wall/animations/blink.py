"""
Blink Animation

Triangular brightness ramp applied to the whole strip: up to full
brightness, a short dwell at the top, back down to dark. Which pixels are
lit is up to the caller; the ramp only changes brightness.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterator

from stranger_wall.models.frame import AnimationStep


@dataclass(frozen=True)
class BlinkParams:
    """
    Ramp parameters. Defaults give 83 steps of 25 ms (about 2.08 s).

    - increment: brightness change per step
    - minimum / maximum: clamp range (0-255)
    - interval: seconds between steps
    - dwell_steps: extra steps held at maximum before ramping down
    """
    increment: int = 7
    minimum: int = 0
    maximum: int = 255
    interval: float = 1 / 40
    dwell_steps: int = 10

    def __post_init__(self):
        if self.increment <= 0:
            raise ValueError(f"increment must be positive, got {self.increment}")
        if not 0 <= self.minimum < self.maximum <= 255:
            raise ValueError(f"need 0 <= minimum < maximum <= 255, got {self.minimum}..{self.maximum}")
        if self.interval < 0:
            raise ValueError(f"interval must not be negative, got {self.interval}")
        if self.dwell_steps < 0:
            raise ValueError(f"dwell_steps must not be negative, got {self.dwell_steps}")


class BlinkAnimation:
    """
    Brightness ramp as a step generator.

    Each call to steps() starts a fresh ramp, so one instance can be
    replayed for every letter.

    Example:
        blink = BlinkAnimation()
        blink.total_steps                           # 83
        [s.brightness for s in blink.steps()][:3]   # [7, 14, 21]
    """

    def __init__(self, params: BlinkParams = BlinkParams()):
        self.params = params

    @property
    def total_steps(self) -> int:
        p = self.params
        return math.ceil(p.dwell_steps + ((p.maximum - p.minimum) / p.increment) * 2)

    @property
    def duration(self) -> float:
        return self.total_steps * self.params.interval

    def brightness_levels(self) -> Iterator[int]:
        p = self.params
        total = self.total_steps
        brightness = p.minimum
        ascending = True
        dwell = 0

        for step in range(total):
            if ascending:
                target = brightness + p.increment
                if target > p.maximum:
                    brightness = p.maximum
                    dwell += 1
                    if dwell > p.dwell_steps:
                        ascending = False
                        dwell = 0
                else:
                    brightness = target
            else:
                target = brightness - p.increment
                if target < p.minimum:
                    brightness = p.minimum
                    ascending = True
                else:
                    brightness = target

            # the step count stops the descent just short of the floor
            if step == total - 1:
                brightness = p.minimum

            yield brightness

    def steps(self) -> Iterator[AnimationStep]:
        interval = self.params.interval
        for brightness in self.brightness_levels():
            yield AnimationStep.ramp(brightness, interval)
