"""
Utility functions for the wall
"""

from .colors import (
    rgb_to_int,
    int_to_rgb,
    colorwheel,
    letter_color,
)

__all__ = [
    'rgb_to_int',
    'int_to_rgb',
    'colorwheel',
    'letter_color',
]
