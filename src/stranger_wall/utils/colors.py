"""
Color conversion utilities

Pure functions over 24-bit packed colors (0xRRGGBB), the format the
frame sink accepts.
"""

from typing import Tuple

WHEEL_SIZE = 256
LETTER_HUE_SPACING = 202


def rgb_to_int(r: int, g: int, b: int) -> int:
    """
    Pack RGB (0-255 each) into a single 24-bit integer.

    Each channel is masked to 8 bits, so out-of-range values wrap
    instead of bleeding into the neighbouring channel.
    """
    return ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)


def int_to_rgb(color: int) -> Tuple[int, int, int]:
    """Unpack a 24-bit integer into (r, g, b)."""
    return (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


def colorwheel(position: int) -> int:
    """
    Map a wheel position to a packed color on a continuous hue cycle.

    The position is inverted and split into three 85-wide bands; in each
    band two channels ramp linearly in steps of 3 and the third is 0.
    Any integer is accepted, it is reduced modulo 256 first.

    Example:
        colorwheel(0)    # 0xFF0000, red
        colorwheel(85)   # 0x00FF00, green
        colorwheel(170)  # 0x0000FF, blue
    """
    pos = 255 - (position % WHEEL_SIZE)

    if pos < 85:
        return rgb_to_int(255 - pos * 3, 0, pos * 3)
    elif pos < 170:
        pos -= 85
        return rgb_to_int(0, pos * 3, 255 - pos * 3)
    else:
        pos -= 170
        return rgb_to_int(pos * 3, 255 - pos * 3, 0)


def letter_color(index: int) -> int:
    """Wheel color for the letter at pixel `index`; neighbours get distinct hues."""
    return colorwheel((index * LETTER_HUE_SPACING) % WHEEL_SIZE)
