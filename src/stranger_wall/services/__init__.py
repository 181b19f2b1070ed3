"""Services layer"""

from .event_bus import EventBus, log_middleware
from .message_source import FirebaseMessageSource, IMessageSource, TransportError, publish_messages
from .presentation_service import PresentationService

__all__ = [
    "EventBus",
    "log_middleware",
    "FirebaseMessageSource",
    "IMessageSource",
    "TransportError",
    "publish_messages",
    "PresentationService",
]
