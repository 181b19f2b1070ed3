"""
Tests for event bus functionality: publishing, priority, filtering,
middleware and handler fault isolation.
"""

import pytest

from stranger_wall.models import EventType, Message, MessageReceivedEvent
from stranger_wall.services import EventBus, log_middleware


def received(text="hello"):
    return MessageReceivedEvent(message=Message(text, 1, "-k"))


def test_event_data_describes_message():
    event = received("run")
    assert event.type is EventType.MESSAGE_RECEIVED
    assert event.data == {"key": "-k", "length": 3}


@pytest.mark.asyncio
async def test_basic_pub_sub():
    bus = EventBus()
    seen = []

    async def handler(event):
        seen.append(event.message.text)

    bus.subscribe(EventType.MESSAGE_RECEIVED, handler)
    await bus.publish(received())
    assert seen == ["hello"]


@pytest.mark.asyncio
async def test_sync_handlers_and_priority():
    bus = EventBus()
    order = []

    bus.subscribe(EventType.MESSAGE_RECEIVED, lambda e: order.append("low"), priority=0)
    bus.subscribe(EventType.MESSAGE_RECEIVED, lambda e: order.append("high"), priority=10)
    await bus.publish(received())

    assert order == ["high", "low"]


@pytest.mark.asyncio
async def test_filtering():
    bus = EventBus()
    seen = []

    bus.subscribe(
        EventType.MESSAGE_RECEIVED,
        lambda e: seen.append(e.message.text),
        filter_fn=lambda e: e.message.text.startswith("r"),
    )
    await bus.publish(received("hello"))
    await bus.publish(received("run"))
    assert seen == ["run"]


@pytest.mark.asyncio
async def test_middleware_can_block():
    bus = EventBus()
    seen = []

    bus.add_middleware(log_middleware)
    bus.add_middleware(lambda e: None if e.message.text == "" else e)
    bus.subscribe(EventType.MESSAGE_RECEIVED, lambda e: seen.append(e))

    await bus.publish(received(""))
    await bus.publish(received("x"))
    assert len(seen) == 1
    assert len(bus.get_event_history()) == 1


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_others():
    bus = EventBus()
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(EventType.MESSAGE_RECEIVED, broken, priority=5)
    bus.subscribe(EventType.MESSAGE_RECEIVED, lambda e: seen.append(e))
    await bus.publish(received())
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_history_limit():
    bus = EventBus(history_limit=2)
    for text in ("a", "b", "c"):
        await bus.publish(received(text))

    assert [e.message.text for e in bus.get_event_history()] == ["b", "c"]
    bus.clear_history()
    assert bus.get_event_history() == []
