# hardware/led/strip_interface.py
"""
IFrameSink Protocol
===================
Hardware abstraction for the wall strand.
Minimal contract for any physical driver (WS281x, virtual, ...).
"""

from __future__ import annotations
from typing import Protocol, Sequence


class IFrameSink(Protocol):
    """
    Protocol defining the LED strand hardware interface.

    All implementations must provide:
    - init: allocate/open the strand for led_count pixels
    - render: push a full frame of packed 0xRRGGBB colors
    - set_brightness: global brightness scalar, applied on next render
    - reset: blank the strand and release the hardware (init again to resume)

    All calls are synchronous and made from the animation loop only.
    """

    @property
    def led_count(self) -> int:
        """Total number of addressable pixels."""
        ...

    def init(self, led_count: int) -> None:
        ...

    def render(self, pixels: Sequence[int]) -> None:
        """Push an entire frame to hardware."""
        ...

    def set_brightness(self, brightness: int) -> None:
        """0-255, multiplicative; takes effect with the next render."""
        ...

    def reset(self) -> None:
        """Turn off all LEDs and release the hardware handle."""
        ...
