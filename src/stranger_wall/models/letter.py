"""
Letter map - character to pixel position lookup

Loaded once from configuration and never changed afterwards.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from stranger_wall.models.enums import LetterKind

SPACE = " "


@dataclass(frozen=True)
class LetterResolution:
    """
    Tagged result of resolving one character.

    MAPPED carries the pixel index; SPACE and UNMAPPED carry none.
    Unmapped characters (punctuation, digits, letters missing from the
    wall) are skipped by the sequencer without error or delay.
    """
    kind: LetterKind
    character: str
    index: Optional[int] = None

    @classmethod
    def mapped(cls, character: str, index: int) -> 'LetterResolution':
        return cls(LetterKind.MAPPED, character, index)

    @classmethod
    def space(cls) -> 'LetterResolution':
        return cls(LetterKind.SPACE, SPACE)

    @classmethod
    def unmapped(cls, character: str) -> 'LetterResolution':
        return cls(LetterKind.UNMAPPED, character)

    @property
    def is_mapped(self) -> bool:
        return self.kind is LetterKind.MAPPED


@dataclass(frozen=True)
class LetterMap:
    """
    Immutable mapping from uppercase character to pixel index.

    Example:
        letters = LetterMap.from_dict({"A": 0, "B": 1})
        letters.resolve("a")   # LetterResolution(MAPPED, "A", 0)
        letters.resolve(" ")   # LetterResolution(SPACE, " ")
        letters.resolve("!")   # LetterResolution(UNMAPPED, "!")
    """
    positions: Mapping[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Dict[str, int]) -> 'LetterMap':
        """
        Build from a config dict. Keys are upper-cased; they must be single
        characters and values must be integers.
        """
        positions: Dict[str, int] = {}
        for key, value in raw.items():
            if not isinstance(key, str) or len(key) != 1:
                raise ValueError(f"Letter map key must be a single character: {key!r}")
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Letter map position for {key!r} must be an integer: {value!r}")
            positions[key.upper()] = value
        return cls(MappingProxyType(positions))

    def resolve(self, character: str) -> LetterResolution:
        letter = character.upper()
        index = self.positions.get(letter)
        if index is not None:
            return LetterResolution.mapped(letter, index)
        if character == SPACE:
            return LetterResolution.space()
        return LetterResolution.unmapped(character)

    def out_of_range(self, led_count: int) -> List[Tuple[str, int]]:
        """Entries whose index falls outside [0, led_count)."""
        return sorted(
            (letter, index)
            for letter, index in self.positions.items()
            if not 0 <= index < led_count
        )

    def __len__(self) -> int:
        return len(self.positions)

