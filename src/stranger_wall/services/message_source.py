"""
Message sources - where the wall's text comes from

FirebaseMessageSource follows a Firebase Realtime Database list over the
REST streaming API (server-sent events). The query is ordered by the
`timestamp` child and starts at process start, so only messages written
after the wall came up are delivered. Without a `timestamp` index in the
database rules Firebase rejects that query; the source then streams the
whole list and drops children older than the start time itself.

Stream protocol (one event per blank-line separated block):

    event: put
    data: {"path": "/", "data": {"-Nk1": {"message": "hi", "timestamp": 1}}}

    event: put
    data: {"path": "/-Nk2", "data": {"message": "run", "timestamp": 2}}

    event: keep-alive
    data: null

`cancel` and `auth_revoked` end the stream. There is no reconnect; a
closed or failed stream raises TransportError.
"""

from __future__ import annotations
import json
import time
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol, Set

from aiohttp import ClientError, ClientSession, ClientTimeout

from stranger_wall.models.events import Message, MessageReceivedEvent
from stranger_wall.services.event_bus import EventBus
from stranger_wall.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TRANSPORT)


class TransportError(Exception):
    """The message feed failed or closed. Fatal; no reconnect."""


class IMessageSource(Protocol):
    def messages(self) -> AsyncIterator[Message]:
        ...


# ---------------------------------------------------------------------------
# Server-sent events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ServerSentEvent:
    event: str
    data: str


class SSEParser:
    """Line-at-a-time server-sent event parser."""

    def __init__(self):
        self._event: Optional[str] = None
        self._data: List[str] = []

    def feed(self, line: str) -> Optional[ServerSentEvent]:
        """Feed one line; returns an event when a blank line completes it."""
        line = line.rstrip("\r\n")

        if not line:
            if self._event is None and not self._data:
                return None
            event = ServerSentEvent(self._event or "message", "\n".join(self._data))
            self._event = None
            self._data = []
            return event

        if line.startswith(":"):
            return None

        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]

        if name == "event":
            self._event = value
        elif name == "data":
            self._data.append(value)
        return None


# ---------------------------------------------------------------------------
# Firebase
# ---------------------------------------------------------------------------

class FirebaseMessageSource:
    """
    Streams new messages from `{endpoint}/{path}`.

    Each child is expected to look like {"message": str, "timestamp": int}.
    Children are yielded in timestamp order, each key at most once.

    Example:
        source = FirebaseMessageSource("https://wall.firebaseio.com")
        async for message in source.messages():
            print(message.text)
    """

    def __init__(
        self,
        endpoint: str,
        path: str = "messages",
        start_at_ms: Optional[int] = None,
        connect_timeout: float = 30.0,
    ):
        if not endpoint:
            raise ValueError("Firebase endpoint is empty")
        self.endpoint = endpoint.rstrip("/")
        self.path = path.strip("/")
        self.start_at_ms = int(time.time() * 1000) if start_at_ms is None else start_at_ms
        self.connect_timeout = connect_timeout
        self._seen: Set[str] = set()

    @property
    def url(self) -> str:
        return f"{self.endpoint}/{self.path}.json"

    @property
    def query(self) -> Dict[str, str]:
        # Firebase wants the orderBy value JSON-quoted
        return {"orderBy": '"timestamp"', "startAt": str(self.start_at_ms)}

    async def messages(self) -> AsyncIterator[Message]:
        timeout = ClientTimeout(total=None, sock_connect=self.connect_timeout)
        headers = {"Accept": "text/event-stream"}

        log.info("Initializing the Firebase connection", url=self.url, start_at=self.start_at_ms)
        try:
            async with ClientSession(timeout=timeout) as session:
                # the ordered query needs `.indexOn: timestamp` in the database rules;
                # without it Firebase answers 400 and the whole list is streamed instead
                for params in (self.query, None):
                    async with session.get(self.url, params=params, headers=headers) as response:
                        if response.status == 400 and params is not None:
                            body = await response.text()
                            log.warn(
                                "Firebase refused the timestamp query, streaming unfiltered",
                                hint=f'add ".indexOn": "timestamp" to the rules for /{self.path}',
                                detail=body[:200],
                            )
                            continue
                        if response.status != 200:
                            body = await response.text()
                            raise TransportError(f"Firebase stream refused: HTTP {response.status} {body[:200]}")

                        log.info("Firebase connection established", filtered=params is not None)
                        parser = SSEParser()
                        async for raw in response.content:
                            event = parser.feed(self._decode(raw))
                            if event is None:
                                continue
                            for message in self.handle_event(event):
                                yield message
                    break
        except ClientError as ex:
            raise TransportError(f"Firebase stream failed: {ex}") from ex

        raise TransportError("Firebase stream closed by server")

    @staticmethod
    def _decode(raw: bytes) -> str:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as ex:
            raise TransportError(f"Firebase stream sent undecodable bytes: {ex}") from ex

    def handle_event(self, event: ServerSentEvent) -> List[Message]:
        """
        Turn one stream event into zero or more new messages.

        Raises:
            TransportError: the server cancelled the stream
        """
        if event.event == "keep-alive":
            return []
        if event.event in ("cancel", "auth_revoked"):
            raise TransportError(f"Firebase stream {event.event}: {event.data}")
        if event.event not in ("put", "patch"):
            log.debug("Ignoring stream event", event=event.event)
            return []

        try:
            payload = json.loads(event.data)
        except json.JSONDecodeError as ex:
            log.warn("Malformed stream payload", event=event.event, error=str(ex))
            return []
        if not isinstance(payload, dict):
            return []

        segments = [s for s in str(payload.get("path", "/")).split("/") if s]
        data = payload.get("data")

        if not segments:
            children = data if isinstance(data, dict) else {}
        elif len(segments) == 1:
            children = {segments[0]: data}
        else:
            # a field inside an existing child changed
            return []

        messages = []
        for key, record in children.items():
            message = self._to_message(key, record)
            if message is not None:
                messages.append(message)
        messages.sort(key=lambda m: m.timestamp)
        return messages

    def _to_message(self, key: str, record: Any) -> Optional[Message]:
        if key in self._seen or not isinstance(record, dict):
            return None

        text = record.get("message")
        timestamp = record.get("timestamp", 0)
        if not isinstance(text, str):
            log.debug("Child without message text", key=key)
            return None
        if not isinstance(timestamp, (int, float)) or timestamp < self.start_at_ms:
            return None

        self._seen.add(key)
        return Message(text=text, timestamp=int(timestamp), key=key)


async def publish_messages(source: IMessageSource, event_bus: EventBus) -> None:
    """Forward every message from `source` onto the event bus, in arrival order."""
    async for message in source.messages():
        log.debug("Message arrived", key=message.key, timestamp=message.timestamp)
        await event_bus.publish(MessageReceivedEvent(message=message))
