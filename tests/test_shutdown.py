"""
Tests for ShutdownCoordinator ordering, task watching and the shutdown handlers.
"""

import asyncio
import contextlib

import pytest

from stranger_wall.engine import Strip
from stranger_wall.hardware.led import VirtualSink
from stranger_wall.lifecycle import CancellationToken, ShutdownCoordinator
from stranger_wall.models import Message, MessageReceivedEvent, PresentationPhase
from stranger_wall.services import EventBus, PresentationService
from stranger_wall.lifecycle.handlers import (
    AnimationShutdownHandler,
    LEDShutdownHandler,
    TaskCancellationHandler,
)


class RecordingHandler:
    def __init__(self, name, priority, log, fail=False, hang=False):
        self.name = name
        self._priority = priority
        self.log = log
        self.fail = fail
        self.hang = hang

    @property
    def shutdown_priority(self):
        return self._priority

    async def shutdown(self):
        self.log.append(self.name)
        if self.hang:
            await asyncio.sleep(10)
        if self.fail:
            raise RuntimeError("handler broke")


@pytest.mark.asyncio
async def test_handlers_run_by_descending_priority():
    order = []
    coordinator = ShutdownCoordinator()
    coordinator.register(RecordingHandler("tasks", 40, order))
    coordinator.register(RecordingHandler("animation", 130, order))
    coordinator.register(RecordingHandler("leds", 100, order))

    await coordinator.shutdown_all()
    assert order == ["animation", "leds", "tasks"]


@pytest.mark.asyncio
async def test_failing_and_slow_handlers_do_not_stop_sequence():
    order = []
    coordinator = ShutdownCoordinator(timeout_per_handler=0.05)
    coordinator.register(RecordingHandler("broken", 3, order, fail=True))
    coordinator.register(RecordingHandler("slow", 2, order, hang=True))
    coordinator.register(RecordingHandler("last", 1, order))

    await coordinator.shutdown_all()
    assert order == ["broken", "slow", "last"]


def test_register_rejects_incomplete_handler():
    with pytest.raises(ValueError):
        ShutdownCoordinator().register(object())


@pytest.mark.asyncio
async def test_request_shutdown_wakes_waiter():
    coordinator = ShutdownCoordinator()
    asyncio.get_running_loop().call_soon(coordinator.request_shutdown, "SIGINT")

    await asyncio.wait_for(coordinator.wait_for_shutdown(), timeout=1)
    assert coordinator.shutdown_requested
    assert coordinator.reason == "SIGINT"
    assert coordinator.failure is None


@pytest.mark.asyncio
async def test_finished_task_triggers_shutdown():
    coordinator = ShutdownCoordinator()
    task = asyncio.create_task(asyncio.sleep(0))
    coordinator.watch(task, "Strand test")

    await asyncio.wait_for(coordinator.wait_for_shutdown(), timeout=1)
    assert coordinator.reason == "Strand test finished"
    assert coordinator.failure is None


@pytest.mark.asyncio
async def test_failed_task_is_recorded():
    async def feed():
        raise ConnectionError("stream closed")

    coordinator = ShutdownCoordinator()
    coordinator.watch(asyncio.create_task(feed()), "Message feed")

    await asyncio.wait_for(coordinator.wait_for_shutdown(), timeout=1)
    assert coordinator.reason == "Message feed failed"
    assert isinstance(coordinator.failure, ConnectionError)


@pytest.mark.asyncio
async def test_animation_handler_cancels_token_and_waits():
    token = CancellationToken()

    async def animation():
        await token.wait()

    task = asyncio.create_task(animation())
    await AnimationShutdownHandler(token, [task], grace=1).shutdown()

    assert token.cancelled
    assert token.reason == "shutdown"
    assert task.done() and not task.cancelled()


@pytest.mark.asyncio
async def test_animation_handler_cancels_stragglers():
    token = CancellationToken()
    task = asyncio.create_task(asyncio.sleep(10))

    await AnimationShutdownHandler(token, [task], grace=0.01).shutdown()
    assert task.cancelled()


@pytest.mark.asyncio
async def test_led_handler_blanks_and_releases():
    sink = VirtualSink()
    strip = Strip(sink, 4)
    strip.open()
    strip.fill(0xFFFFFF)
    strip.render()

    await LEDShutdownHandler(strip).shutdown()
    assert sink.last_frame.lit == ()
    assert not sink.is_open


@pytest.mark.asyncio
async def test_led_handler_reraises_sink_errors():
    strip = Strip(VirtualSink(), 4)
    # never opened: render fails
    with pytest.raises(RuntimeError):
        await LEDShutdownHandler(strip).shutdown()


@pytest.mark.asyncio
async def test_task_cancellation_handler():
    task = asyncio.create_task(asyncio.sleep(10))
    await TaskCancellationHandler([task]).shutdown()
    assert task.cancelled()

    with contextlib.suppress(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
async def test_shutdown_mid_ramp_leaves_strip_dark_and_released(controller, clock, token, strip, sink):
    bus = EventBus()
    service = PresentationService(controller, bus, token, echo=lambda _: None)
    consumer = asyncio.create_task(service.run())
    await bus.publish(MessageReceivedEvent(message=Message("abcd")))

    # let the warning ramp get going
    while len(clock.delays) < 10:
        await asyncio.sleep(0)
    assert controller.phase is PresentationPhase.WARNING
    assert sink.last_frame.lit

    coordinator = ShutdownCoordinator()
    coordinator.register(AnimationShutdownHandler(token, [consumer]))
    coordinator.register(LEDShutdownHandler(strip))
    await coordinator.shutdown_all()

    assert consumer.done() and not consumer.cancelled()
    assert controller.phase is PresentationPhase.IDLE
    assert sink.last_frame.lit == ()
    assert not sink.is_open
    assert service.presented == 0
