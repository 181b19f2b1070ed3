"""
Tests for the server-sent event parser and the Firebase stream handling.
"""

import json

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from stranger_wall.models import EventType, Message
from stranger_wall.services import EventBus, FirebaseMessageSource, TransportError, publish_messages
from stranger_wall.services.message_source import ServerSentEvent, SSEParser

START = 1_000


def put(path, data, kind="put"):
    return ServerSentEvent(kind, json.dumps({"path": path, "data": data}))


@pytest.fixture
def source():
    return FirebaseMessageSource("https://wall.example.com/", "messages", start_at_ms=START)


# ---------------------------------------------------------------------------
# SSEParser
# ---------------------------------------------------------------------------

def test_parser_emits_on_blank_line():
    parser = SSEParser()
    assert parser.feed("event: put\n") is None
    assert parser.feed('data: {"path": "/"}\n') is None
    assert parser.feed("\n") == ServerSentEvent("put", '{"path": "/"}')


def test_parser_joins_data_lines_and_skips_comments():
    parser = SSEParser()
    for line in [": hello", "data: a", "data:b", ""]:
        event = parser.feed(line)
    assert event == ServerSentEvent("message", "a\nb")


def test_parser_ignores_empty_blocks():
    parser = SSEParser()
    assert parser.feed("\r\n") is None
    assert parser.feed("") is None


# ---------------------------------------------------------------------------
# FirebaseMessageSource
# ---------------------------------------------------------------------------

def test_url_and_query(source):
    assert source.url == "https://wall.example.com/messages.json"
    assert source.query == {"orderBy": '"timestamp"', "startAt": "1000"}


def test_empty_endpoint_rejected():
    with pytest.raises(ValueError):
        FirebaseMessageSource("")


def test_initial_put_yields_children_in_timestamp_order(source):
    event = put("/", {
        "-b": {"message": "second", "timestamp": START + 2},
        "-a": {"message": "first", "timestamp": START + 1},
    })
    assert source.handle_event(event) == [
        Message("first", START + 1, "-a"),
        Message("second", START + 2, "-b"),
    ]


def test_child_put(source):
    event = put("/-c", {"message": "run", "timestamp": START + 5})
    assert source.handle_event(event) == [Message("run", START + 5, "-c")]


def test_patch_is_handled_like_put(source):
    event = put("/", {"-d": {"message": "hi", "timestamp": START}}, kind="patch")
    assert [m.text for m in source.handle_event(event)] == ["hi"]


def test_each_key_is_delivered_once(source):
    event = put("/-e", {"message": "once", "timestamp": START})
    assert len(source.handle_event(event)) == 1
    assert source.handle_event(event) == []


def test_old_and_malformed_children_are_dropped(source):
    event = put("/", {
        "-old": {"message": "stale", "timestamp": START - 1},
        "-notext": {"timestamp": START},
        "-nodict": "just a string",
        "-ok": {"message": "", "timestamp": START},
    })
    assert source.handle_event(event) == [Message("", START, "-ok")]


def test_nested_paths_and_null_data_are_ignored(source):
    assert source.handle_event(put("/-f/message", "edited")) == []
    assert source.handle_event(put("/", None)) == []
    assert source.handle_event(put("/-g", None)) == []


def test_keep_alive_and_unknown_events(source):
    assert source.handle_event(ServerSentEvent("keep-alive", "null")) == []
    assert source.handle_event(ServerSentEvent("message", "{}")) == []


def test_bad_json_is_skipped(source):
    assert source.handle_event(ServerSentEvent("put", "{not json")) == []


@pytest.mark.parametrize("kind", ["cancel", "auth_revoked"])
def test_server_cancel_is_fatal(source, kind):
    with pytest.raises(TransportError):
        source.handle_event(ServerSentEvent(kind, "null"))


# ---------------------------------------------------------------------------
# publish_messages
# ---------------------------------------------------------------------------

class ListSource:
    def __init__(self, messages, error=None):
        self._messages = messages
        self._error = error

    async def messages(self):
        for message in self._messages:
            yield message
        if self._error:
            raise self._error


@pytest.mark.asyncio
async def test_publish_messages_in_arrival_order():
    bus = EventBus()
    received = []

    async def handler(event):
        received.append(event.message.text)

    bus.subscribe(EventType.MESSAGE_RECEIVED, handler)
    await publish_messages(ListSource([Message("one"), Message("two")]), bus)

    assert received == ["one", "two"]


@pytest.mark.asyncio
async def test_publish_messages_propagates_transport_error():
    bus = EventBus()
    with pytest.raises(TransportError):
        await publish_messages(ListSource([Message("x")], TransportError("closed")), bus)
    assert len(bus.get_event_history()) == 1


# ---------------------------------------------------------------------------
# HTTP stream
# ---------------------------------------------------------------------------

STREAM_BODY = (
    'event: put\n'
    'data: {"path": "/", "data": {"-a": {"message": "hello", "timestamp": 1000}}}\n'
    '\n'
    'event: keep-alive\n'
    'data: null\n'
    '\n'
    'event: put\n'
    'data: {"path": "/-b", "data": {"message": "run", "timestamp": 1001}}\n'
    '\n'
)


async def firebase_stream(request):
    assert request.headers["Accept"] == "text/event-stream"
    assert request.query["orderBy"] == '"timestamp"'
    assert request.query["startAt"] == str(START)

    response = web.StreamResponse(headers={"Content-Type": "text/event-stream"})
    await response.prepare(request)
    await response.write(STREAM_BODY.encode("utf-8"))
    await response.write_eof()
    return response


@pytest.mark.asyncio
async def test_stream_yields_messages_until_closed():
    app = web.Application()
    app.router.add_get("/messages.json", firebase_stream)

    received = []
    async with TestServer(app) as server:
        source = FirebaseMessageSource(str(server.make_url("/")), start_at_ms=START)
        with pytest.raises(TransportError, match="closed"):
            async for message in source.messages():
                received.append(message.text)

    assert received == ["hello", "run"]


@pytest.mark.asyncio
async def test_stream_refused():
    app = web.Application()

    async with TestServer(app) as server:
        source = FirebaseMessageSource(str(server.make_url("/")), start_at_ms=START)
        with pytest.raises(TransportError, match="HTTP 404"):
            async for _ in source.messages():
                pass


UNFILTERED_BODY = (
    'event: put\n'
    'data: {"path": "/", "data": {'
    '"-old": {"message": "history", "timestamp": 999}, '
    '"-new": {"message": "fresh", "timestamp": 1000}}}\n'
    '\n'
)


async def unindexed_stream(request):
    """Firebase without `.indexOn: timestamp` rejects ordered queries."""
    if "orderBy" in request.query:
        return web.Response(status=400, text='{"error": "Index not defined"}')

    response = web.StreamResponse(headers={"Content-Type": "text/event-stream"})
    await response.prepare(request)
    await response.write(UNFILTERED_BODY.encode("utf-8"))
    await response.write_eof()
    return response


@pytest.mark.asyncio
async def test_unindexed_list_falls_back_to_unfiltered_stream():
    app = web.Application()
    app.router.add_get("/messages.json", unindexed_stream)

    received = []
    async with TestServer(app) as server:
        source = FirebaseMessageSource(str(server.make_url("/")), start_at_ms=START)
        with pytest.raises(TransportError, match="closed"):
            async for message in source.messages():
                received.append(message.text)

    assert received == ["fresh"]


async def garbled_stream(request):
    response = web.StreamResponse(headers={"Content-Type": "text/event-stream"})
    await response.prepare(request)
    await response.write(b"data: \xff\n\n")
    await response.write_eof()
    return response


@pytest.mark.asyncio
async def test_undecodable_bytes_are_a_transport_error():
    app = web.Application()
    app.router.add_get("/messages.json", garbled_stream)

    async with TestServer(app) as server:
        source = FirebaseMessageSource(str(server.make_url("/")), start_at_ms=START)
        with pytest.raises(TransportError, match="undecodable"):
            async for _ in source.messages():
                pass
