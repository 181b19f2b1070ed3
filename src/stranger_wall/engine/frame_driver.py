"""
FrameDriver - consumes animation steps and turns them into hardware frames.

Animations are plain generators of AnimationStep; they know nothing about
time or hardware. The driver owns both:

    for step in steps:
        token checked      -> AnimationCancelled if set
        clock.sleep(delay)
        step applied to the Strip (and rendered when the step renders)

A step whose wait has started is always completed, so cancellation takes
effect at the next step boundary.
"""

from __future__ import annotations
from typing import Iterable, Optional

from stranger_wall.engine.clock import AsyncioClock, IClock
from stranger_wall.engine.strip import Strip
from stranger_wall.lifecycle.cancellation import CancellationToken
from stranger_wall.models.enums import StepKind
from stranger_wall.models.frame import AnimationStep


class FrameDriver:
    def __init__(
        self,
        strip: Strip,
        clock: Optional[IClock] = None,
        token: Optional[CancellationToken] = None,
    ):
        self.strip = strip
        self.clock = clock or AsyncioClock()
        self.token = token or CancellationToken()

    async def play(self, steps: Iterable[AnimationStep]) -> int:
        """
        Play every step in order. Returns the number of steps played.

        Raises:
            AnimationCancelled: token set before a step started
        """
        played = 0
        for step in steps:
            self.token.raise_if_cancelled()
            await self.clock.sleep(step.delay, self.token)
            self.apply(step)
            played += 1
        return played

    def apply(self, step: AnimationStep) -> None:
        strip = self.strip
        kind = step.kind

        if kind is StepKind.PAUSE:
            return
        if kind is StepKind.CLEAR:
            strip.clear_pixel(step.index)
            return
        if kind is StepKind.RESET:
            strip.hard_reset()
            return

        if kind is StepKind.LIGHT:
            strip.set_pixel(step.index, step.color)
        elif kind is StepKind.FILL:
            strip.fill(step.color)
        elif kind is StepKind.BLANK:
            strip.blank()

        if step.brightness is not None:
            strip.set_brightness(step.brightness)
        strip.render()
