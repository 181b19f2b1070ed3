"""
main.py - Application entry point for the Stranger Wall
-------------------------------------------------------

Responsible for:
- parsing the run mode (normal / debug / test)
- loading configuration and opening the LED strand
- wiring the message feed, event bus and presentation service
- graceful shutdown on Ctrl+C, SIGTERM or a failed feed
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from stranger_wall.animations import BlinkAnimation, LetterAnimation, WordSequencer
from stranger_wall.controllers import PresentationController
from stranger_wall.engine import AsyncioClock, FrameDriver, IClock, Strip
from stranger_wall.hardware.led import IFrameSink, create_sink
from stranger_wall.lifecycle import AnimationCancelled, CancellationToken, ShutdownCoordinator
from stranger_wall.lifecycle.handlers import (
    AnimationShutdownHandler,
    LEDShutdownHandler,
    TaskCancellationHandler,
)
from stranger_wall.managers import ConfigError, ConfigManager
from stranger_wall.managers.config_manager import DEFAULT_CONFIG_PATH
from stranger_wall.models import LogCategory, LogLevel, RunMode, WallConfig
from stranger_wall.services import EventBus, FirebaseMessageSource, PresentationService, log_middleware, publish_messages
from stranger_wall.utils.logger import configure_logger, get_logger

log = get_logger().for_category(LogCategory.SYSTEM)

EXIT_BANNER = "Press <ctrl>+C to exit."


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="stranger-wall",
        description="Spell incoming messages on an addressable LED strip.",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        default="normal",
        type=str.lower,
        choices=[m.name.lower() for m in RunMode],
        help="normal: silent; debug: log every phase; test: run the strand test and exit",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"config file (YAML or JSON), default: <package>/{DEFAULT_CONFIG_PATH}",
    )
    parser.add_argument(
        "--virtual",
        action="store_true",
        help="render to an in-memory strip instead of rpi_ws281x",
    )
    parser.add_argument("--no-color", action="store_true", help="disable ANSI colors in log output")
    return parser.parse_args(argv)


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------

def build_controller(
    config: WallConfig,
    sink: IFrameSink,
    token: CancellationToken,
    clock: Optional[IClock] = None,
) -> PresentationController:
    """Strip, driver and animations for one strand. The sink is not opened here."""
    strip = Strip(sink, config.number_of_leds)
    blink = BlinkAnimation()
    driver = FrameDriver(strip, clock or AsyncioClock(), token)
    sequencer = WordSequencer(config.letter_map, LetterAnimation(blink))
    return PresentationController(strip, driver, sequencer, blink)


async def run_strand_test(controller: PresentationController) -> None:
    try:
        await controller.run_self_test()
    except AnimationCancelled:
        log.debug("Strand test interrupted")


def load_config(path: Optional[str]) -> WallConfig:
    manager = ConfigManager(Path(path).resolve()) if path else ConfigManager()
    return manager.load()


# ---------------------------------------------------------------------------
# Application Entry
# ---------------------------------------------------------------------------

async def main(argv: Optional[List[str]] = None) -> int:
    """Main async entry point. Returns the process exit status."""
    args = parse_args(argv)
    mode = RunMode[args.mode.upper()]

    configure_logger(
        LogLevel.DEBUG if mode is RunMode.DEBUG else LogLevel.WARN,
        use_colors=not args.no_color,
    )
    log.info("Starting Stranger Wall", mode=mode.name)

    try:
        config = load_config(args.config)
    except ConfigError as ex:
        log.error("Invalid configuration", error=str(ex))
        return 1

    if mode is not RunMode.TEST and not config.message_source_endpoint:
        log.error("Invalid configuration", error="message_source_endpoint is required outside test mode")
        return 1

    token = CancellationToken()
    sink = create_sink(config.hardware, virtual=args.virtual)
    controller = build_controller(config, sink, token)
    strip = controller.strip
    strip.open()

    coordinator = ShutdownCoordinator()
    coordinator.setup_signal_handlers(asyncio.get_running_loop())
    print(EXIT_BANNER, flush=True)

    if mode is RunMode.TEST:
        test_task = asyncio.create_task(run_strand_test(controller), name="strand-test")
        coordinator.watch(test_task, "Strand test")
        coordinator.register(AnimationShutdownHandler(token, [test_task]))
        background: List[asyncio.Task] = []
    else:
        event_bus = EventBus()
        event_bus.add_middleware(log_middleware)
        service = PresentationService(controller, event_bus, token)

        source = FirebaseMessageSource(config.message_source_endpoint, config.message_path)
        consumer = asyncio.create_task(service.run(), name="presentation")
        feed = asyncio.create_task(publish_messages(source, event_bus), name="message-feed")

        coordinator.watch(consumer, "Presentation service")
        coordinator.watch(feed, "Message feed")
        coordinator.register(AnimationShutdownHandler(token, [consumer]))
        background = [feed]

    coordinator.register(LEDShutdownHandler(strip))
    coordinator.register(TaskCancellationHandler(background))

    log.info("Application initialized. Waiting for exit signal...")
    await coordinator.wait_for_shutdown()
    await coordinator.shutdown_all()

    log.info("Stranger Wall shut down cleanly.", frames=strip.frames_rendered)
    return 1 if coordinator.failure is not None else 0


def run() -> None:
    """Console script entry point."""
    try:
        status = asyncio.run(main())
    except KeyboardInterrupt:
        status = 0
    sys.exit(status)


if __name__ == "__main__":
    run()
