"""
Animations - step generators played by the FrameDriver
"""

from .blink import BlinkAnimation, BlinkParams
from .letter import LetterAnimation
from .word import WordSequencer, ALPHABET, SPACE_PAUSE_SECONDS

__all__ = [
    'BlinkAnimation',
    'BlinkParams',
    'LetterAnimation',
    'WordSequencer',
    'ALPHABET',
    'SPACE_PAUSE_SECONDS',
]
