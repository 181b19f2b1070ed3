"""
Configuration models

Pure data containers populated by ConfigManager from the YAML/JSON file.
No loading logic lives here.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from stranger_wall.models.letter import LetterMap


@dataclass(frozen=True)
class StripHardwareConfig:
    """rpi_ws281x settings for the wall strand."""
    gpio_pin: int = 18
    frequency_hz: int = 800_000
    dma_channel: int = 10
    invert: bool = False
    channel: int = 0  # PWM channel (0 or 1)
    color_order: str = "GRB"  # WS2811/WS2812 typical


@dataclass(frozen=True)
class WallConfig:
    """Everything read from the config file, validated."""
    number_of_leds: int
    letter_map: LetterMap
    message_source_endpoint: str = ""
    message_path: str = "messages"
    hardware: StripHardwareConfig = field(default_factory=StripHardwareConfig)
