"""
Lifecycle subsystem
-------------------

Exports the public API for:
- graceful shutdown
- animation cancellation

Shutdown handlers live in lifecycle.handlers.
"""

from .cancellation import AnimationCancelled, CancellationToken
from .shutdown_coordinator import ShutdownCoordinator
from .shutdown_protocol import IShutdownHandler

__all__ = [
    "AnimationCancelled",
    "CancellationToken",
    "ShutdownCoordinator",
    "IShutdownHandler",
]
