"""
PresentationController - top-level orchestration of one message

State machine:
    IDLE → WARNING → RESET → PAUSE → SEQUENCING → IDLE

- WARNING:    whole strip filled with the alert color and blinked once
- RESET:      strip blanked, rendered, hardware released and re-opened
- PAUSE:      1.5 s dark gap
- SEQUENCING: the message spelled out letter by letter

The self-test skips straight to SEQUENCING with the alphabet.
"""

from __future__ import annotations
from typing import Iterable

from stranger_wall.animations.blink import BlinkAnimation
from stranger_wall.animations.word import ALPHABET, WordSequencer
from stranger_wall.engine.frame_driver import FrameDriver
from stranger_wall.engine.strip import Strip
from stranger_wall.lifecycle.cancellation import AnimationCancelled
from stranger_wall.models.enums import PresentationPhase
from stranger_wall.models.frame import AnimationStep
from stranger_wall.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.ANIMATION)

WARNING_COLOR = 0xFFCC22
WARNING_PAUSE_SECONDS = 1.5


class PresentationController:
    """
    Drives the strip through the presentation phases.

    Example:
        controller = PresentationController(strip, driver, sequencer, blink)
        await controller.present("run")
        await controller.run_self_test()
    """

    def __init__(
        self,
        strip: Strip,
        driver: FrameDriver,
        sequencer: WordSequencer,
        blink: BlinkAnimation,
        warning_color: int = WARNING_COLOR,
        warning_pause: float = WARNING_PAUSE_SECONDS,
    ):
        self.strip = strip
        self.driver = driver
        self.sequencer = sequencer
        self.blink = blink
        self.warning_color = warning_color
        self.warning_pause = warning_pause
        self._phase = PresentationPhase.IDLE

    @property
    def phase(self) -> PresentationPhase:
        return self._phase

    # ------------------------------------------------------------
    # Step builders
    # ------------------------------------------------------------

    def warning_steps(self) -> Iterable[AnimationStep]:
        yield AnimationStep.fill(self.warning_color, brightness=self.blink.params.minimum)
        yield from self.blink.steps()

    # ------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------

    async def present(self, text: str) -> None:
        """
        Warned presentation of one message.

        Raises:
            AnimationCancelled: shutdown requested mid-presentation
        """
        try:
            await self._run_phase(PresentationPhase.WARNING, self.warning_steps())
            log.info("Heads up display complete")
            await self._run_phase(PresentationPhase.RESET, [AnimationStep.reset()])
            await self._run_phase(PresentationPhase.PAUSE, [AnimationStep.pause(self.warning_pause)])
            await self._run_phase(PresentationPhase.SEQUENCING, self._sequence_steps(text))
            log.info("Message display complete", characters=len(text))
        finally:
            self._enter(PresentationPhase.IDLE)

    async def run_self_test(self) -> None:
        """Walk the whole alphabet to check wiring and letter positions."""
        log.info("Running a strand test", string=ALPHABET)
        try:
            await self._run_phase(PresentationPhase.SEQUENCING, self._sequence_steps(ALPHABET))
            log.info("Strand test complete")
        finally:
            self._enter(PresentationPhase.IDLE)

    # ------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------

    def _sequence_steps(self, text: str) -> Iterable[AnimationStep]:
        yield from self.sequencer.steps(text)
        # the last letter was only cleared in the buffer
        yield AnimationStep.blank()

    async def _run_phase(self, phase: PresentationPhase, steps: Iterable[AnimationStep]) -> int:
        self._enter(phase)
        rendered_before = self.strip.frames_rendered
        try:
            played = await self.driver.play(steps)
        except AnimationCancelled:
            log.info("Presentation cancelled", phase=phase.name)
            raise
        log.debug(
            "Phase complete",
            phase=phase.name,
            steps=played,
            frames=self.strip.frames_rendered - rendered_before,
        )
        return played

    def _enter(self, phase: PresentationPhase) -> None:
        if phase is self._phase:
            return
        log.debug("Phase changed", from_phase=self._phase.name, to_phase=phase.name)
        self._phase = phase
