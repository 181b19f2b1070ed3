"""
Enums for the wall presentation state machine
"""

from enum import Enum, auto


class RunMode(Enum):
    """Operating modes selected on the command line"""
    NORMAL = auto()   # Display letters, no informational output
    DEBUG = auto()    # Same as NORMAL plus phase-by-phase logging
    TEST = auto()     # Strand test: walk the alphabet, then exit


class PresentationPhase(Enum):
    """
    Presentation state machine

    IDLE → WARNING → RESET → PAUSE → SEQUENCING → IDLE
    """
    IDLE = auto()
    WARNING = auto()     # Whole strip flashed with the alert color
    RESET = auto()       # Strip blanked and hardware re-initialized
    PAUSE = auto()       # Dark gap between warning and message
    SEQUENCING = auto()  # Letters lit one at a time


class LetterKind(Enum):
    """Outcome of resolving a character against the letter map"""
    MAPPED = auto()
    SPACE = auto()
    UNMAPPED = auto()


class StepKind(Enum):
    """What the frame driver does with an animation step"""
    LIGHT = auto()   # Set one pixel, render
    FILL = auto()    # Set every pixel, render
    RAMP = auto()    # Change strip brightness, render
    CLEAR = auto()   # Zero one pixel in the buffer, no render
    PAUSE = auto()   # Wait only, no hardware change
    BLANK = auto()   # Zero every pixel, render
    RESET = auto()   # Blank, render, release and re-init the sink


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    HARDWARE = auto()    # LED sink init/render/reset
    ANIMATION = auto()   # Letters, ramps, phases
    TRANSPORT = auto()   # Message feed
    EVENT = auto()       # Event bus events and handling
    SYSTEM = auto()      # Startup, shutdown, errors
    SHUTDOWN = auto()


class EventType(Enum):
    """Event bus event types"""
    MESSAGE_RECEIVED = auto()
