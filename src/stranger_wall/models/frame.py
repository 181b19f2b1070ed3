"""
Frame and step models

AnimationStep  - one instruction produced by an animation generator
AnimationFrame - full-strip snapshot handed to the frame sink
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from stranger_wall.models.enums import StepKind


@dataclass(frozen=True)
class AnimationStep:
    """
    Single unit of work for the FrameDriver.

    The driver waits `delay` seconds and then applies the step:
    - LIGHT: pixel `index` := `color`, render
    - FILL:  every pixel := `color`, render
    - RAMP:  strip brightness := `brightness`, render
    - CLEAR: pixel `index` := 0 (buffer only)
    - PAUSE: nothing
    - BLANK: every pixel := 0, render
    - RESET: blank, render, release + re-init the sink

    `brightness` on LIGHT/FILL is applied before the render when set.
    """
    kind: StepKind
    delay: float = 0.0
    index: Optional[int] = None
    color: int = 0
    brightness: Optional[int] = None

    @property
    def renders(self) -> bool:
        return self.kind not in (StepKind.CLEAR, StepKind.PAUSE)

    # === CONSTRUCTORS ===

    @classmethod
    def light(cls, index: int, color: int, brightness: Optional[int] = None) -> 'AnimationStep':
        return cls(StepKind.LIGHT, index=index, color=color, brightness=brightness)

    @classmethod
    def fill(cls, color: int, brightness: Optional[int] = None) -> 'AnimationStep':
        return cls(StepKind.FILL, color=color, brightness=brightness)

    @classmethod
    def ramp(cls, brightness: int, delay: float) -> 'AnimationStep':
        return cls(StepKind.RAMP, delay=delay, brightness=brightness)

    @classmethod
    def clear(cls, index: int) -> 'AnimationStep':
        return cls(StepKind.CLEAR, index=index)

    @classmethod
    def pause(cls, seconds: float) -> 'AnimationStep':
        return cls(StepKind.PAUSE, delay=seconds)

    @classmethod
    def blank(cls) -> 'AnimationStep':
        return cls(StepKind.BLANK)

    @classmethod
    def reset(cls) -> 'AnimationStep':
        return cls(StepKind.RESET)


@dataclass(frozen=True)
class AnimationFrame:
    """Snapshot of every pixel (packed 0xRRGGBB) plus strip brightness."""
    pixels: Tuple[int, ...]
    brightness: int

    @property
    def lit(self) -> Tuple[int, ...]:
        """Indices of pixels that are not black."""
        return tuple(i for i, color in enumerate(self.pixels) if color)
