import asyncio
from typing import List, Optional

import pytest

from stranger_wall.animations import BlinkAnimation, LetterAnimation, WordSequencer
from stranger_wall.controllers import PresentationController
from stranger_wall.engine import FrameDriver, Strip
from stranger_wall.hardware.led import VirtualSink
from stranger_wall.lifecycle import CancellationToken
from stranger_wall.models import LetterMap


class FakeClock:
    """
    Records every requested delay instead of sleeping.

    `cancel_after` sets the token once that many sleeps have been requested,
    to simulate Ctrl+C landing in the middle of an animation.
    """

    def __init__(self, token: Optional[CancellationToken] = None, cancel_after: Optional[int] = None):
        self.delays: List[float] = []
        self.token = token
        self.cancel_after = cancel_after

    @property
    def elapsed(self) -> float:
        return sum(self.delays)

    async def sleep(self, seconds: float, token: Optional[CancellationToken] = None) -> None:
        self.delays.append(seconds)
        if self.cancel_after is not None and len(self.delays) >= self.cancel_after and self.token:
            self.token.cancel("test")
        await asyncio.sleep(0)


@pytest.fixture
def letter_map():
    """Five letters; A sits on pixel 0 to catch falsy-index bugs."""
    return LetterMap.from_dict({"A": 0, "B": 2, "C": 4, "D": 6, "Z": 9})


@pytest.fixture
def alphabet_map():
    return LetterMap.from_dict({chr(ord("A") + i): i for i in range(26)})


@pytest.fixture
def sink():
    return VirtualSink()


@pytest.fixture
def strip(sink):
    s = Strip(sink, 10)
    s.open()
    return s


@pytest.fixture
def token():
    return CancellationToken()


@pytest.fixture
def clock(token):
    return FakeClock(token)


@pytest.fixture
def driver(strip, clock, token):
    return FrameDriver(strip, clock, token)


@pytest.fixture
def blink():
    return BlinkAnimation()


@pytest.fixture
def sequencer(letter_map, blink):
    return WordSequencer(letter_map, LetterAnimation(blink))


@pytest.fixture
def controller(strip, driver, sequencer, blink):
    return PresentationController(strip, driver, sequencer, blink)
