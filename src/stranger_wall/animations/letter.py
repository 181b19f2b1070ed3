"""
Letter Animation

Lights the pixel for one letter in its wheel color, then blinks the strip.
Clearing the pixel afterwards is the sequencer's job.
"""

from __future__ import annotations
from typing import Iterator

from stranger_wall.animations.blink import BlinkAnimation
from stranger_wall.models.frame import AnimationStep
from stranger_wall.utils.colors import letter_color


class LetterAnimation:
    def __init__(self, blink: BlinkAnimation):
        self.blink = blink

    @staticmethod
    def color_for(index: int) -> int:
        return letter_color(index)

    def steps(self, index: int) -> Iterator[AnimationStep]:
        # first render happens dark; the ramp brings the letter up
        yield AnimationStep.light(index, self.color_for(index), brightness=self.blink.params.minimum)
        yield from self.blink.steps()
