"""
Word Sequencer

Walks a string left to right and emits the steps that spell it out on the
wall, one letter at a time:

- mapped letter  -> letter animation, then the pixel is cleared (no render;
                    the next letter's first render shows it dark)
- space          -> 1 s pause, no hardware change
- anything else  -> skipped, no render and no delay
"""

from __future__ import annotations
from typing import Iterator

from stranger_wall.animations.letter import LetterAnimation
from stranger_wall.models.enums import LetterKind
from stranger_wall.models.frame import AnimationStep
from stranger_wall.models.letter import LetterMap
from stranger_wall.utils.logger import LogCategory, get_category_logger

log = get_category_logger(LogCategory.ANIMATION)

SPACE_PAUSE_SECONDS = 1.0
ALPHABET = "abcdefghijklmnopqrstuvwxyz"


class WordSequencer:
    def __init__(
        self,
        letters: LetterMap,
        letter_animation: LetterAnimation,
        space_pause: float = SPACE_PAUSE_SECONDS,
    ):
        self.letters = letters
        self.letter_animation = letter_animation
        self.space_pause = space_pause

    def steps(self, word: str) -> Iterator[AnimationStep]:
        for character in word:
            resolution = self.letters.resolve(character)

            if resolution.kind is LetterKind.MAPPED:
                log.debug("Animating letter", letter=resolution.character, index=resolution.index)
                yield from self.letter_animation.steps(resolution.index)
                yield AnimationStep.clear(resolution.index)
            elif resolution.kind is LetterKind.SPACE:
                yield AnimationStep.pause(self.space_pause)
            else:
                log.debug("Skipping unmapped character", character=repr(character))
