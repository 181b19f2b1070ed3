"""
Models package - data models for the wall
"""

from .enums import RunMode, PresentationPhase, LetterKind, StepKind, LogLevel, LogCategory, EventType
from .letter import LetterMap, LetterResolution
from .frame import AnimationStep, AnimationFrame
from .config import WallConfig, StripHardwareConfig
from .events import Message, Event, MessageReceivedEvent

__all__ = [
    'RunMode',
    'PresentationPhase',
    'LetterKind',
    'StepKind',
    'LogLevel',
    'LogCategory',
    'EventType',
    'LetterMap',
    'LetterResolution',
    'AnimationStep',
    'AnimationFrame',
    'WallConfig',
    'StripHardwareConfig',
    'Message',
    'Event',
    'MessageReceivedEvent',
]
