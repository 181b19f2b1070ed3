"""
Engine - strip buffer, clock and the driver loop
"""

from .strip import Strip
from .clock import AsyncioClock, IClock
from .frame_driver import FrameDriver

__all__ = ['Strip', 'AsyncioClock', 'IClock', 'FrameDriver']
