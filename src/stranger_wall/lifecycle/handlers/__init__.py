"""
Shutdown handlers, called in priority order by ShutdownCoordinator.
"""

from .animation_shutdown_handler import AnimationShutdownHandler
from .led_shutdown_handler import LEDShutdownHandler
from .task_cancellation_handler import TaskCancellationHandler

__all__ = [
    "AnimationShutdownHandler",
    "LEDShutdownHandler",
    "TaskCancellationHandler",
]
