"""
Event models for the event bus

Message  - one text arrival from the feed
Event    - base event carried by EventBus
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from stranger_wall.models.enums import EventType


@dataclass(frozen=True)
class Message:
    """
    Text arrival from the message feed.

    Only `text` drives the animation; `timestamp` (ms since epoch, as written
    by the publisher) and `key` are kept for ordering and de-duplication.
    """
    text: str
    timestamp: int = 0
    key: Optional[str] = None


@dataclass
class Event:
    """Base event"""
    type: EventType
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


@dataclass
class MessageReceivedEvent(Event):
    """A new message arrived from the transport."""
    type: EventType = field(default=EventType.MESSAGE_RECEIVED, init=False)
    message: Optional[Message] = None

    def __post_init__(self):
        if self.message is not None:
            self.data = {"key": self.message.key, "length": len(self.message.text)}
