# hardware/led/ws281x_sink.py
"""
WS281xSink - rpi_ws281x hardware driver
=======================================
Concrete implementation of IFrameSink for WS281x chips.

Features:
- Color order handled by the rpi_ws281x strip type
- init() / reset() pair so the strand can be released and re-opened
- render() writes the full frame and shows it in a single DMA push
"""

from __future__ import annotations
from typing import Optional, Sequence

from rpi_ws281x import PixelStrip, ws

from stranger_wall.hardware.led.strip_interface import IFrameSink
from stranger_wall.models.config import StripHardwareConfig
from stranger_wall.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HARDWARE)


class WS281xSink(IFrameSink):
    """
    WS281x hardware driver using rpi_ws281x library.

    The PixelStrip is created by init() and torn down by reset(); calling
    render() or set_brightness() in between is an error.
    """

    def __init__(self, config: StripHardwareConfig) -> None:
        self.config = config
        self._pixel_strip: Optional[PixelStrip] = None
        self._led_count = 0
        # dark until Strip.render() pushes the first brightness
        self._brightness = 0

    # ==================== IFrameSink API ====================

    @property
    def led_count(self) -> int:
        return self._led_count

    @property
    def is_open(self) -> bool:
        return self._pixel_strip is not None

    def init(self, led_count: int) -> None:
        if self._pixel_strip is not None:
            self.reset()

        cfg = self.config
        self._pixel_strip = PixelStrip(
            led_count,
            cfg.gpio_pin,
            cfg.frequency_hz,
            cfg.dma_channel,
            cfg.invert,
            self._brightness,
            cfg.channel,
            self._decode_color_order(cfg.color_order),
        )
        self._pixel_strip.begin()
        self._led_count = led_count

        log.debug(
            "WS281xSink initialized",
            gpio=cfg.gpio_pin,
            count=led_count,
            order=cfg.color_order,
            dma=cfg.dma_channel,
            pwm=cfg.channel,
        )

    def render(self, pixels: Sequence[int]) -> None:
        strip = self._require_strip()
        length = min(len(pixels), self._led_count)

        for i in range(length):
            strip.setPixelColor(i, int(pixels[i]) & 0xFFFFFF)
        for i in range(length, self._led_count):
            strip.setPixelColor(i, 0)

        strip.show()

    def set_brightness(self, brightness: int) -> None:
        self._brightness = max(0, min(255, int(brightness)))
        self._require_strip().setBrightness(self._brightness)

    def reset(self) -> None:
        """Blank the strand and release the DMA channel."""
        strip = self._pixel_strip
        if strip is None:
            return

        self._pixel_strip = None
        try:
            for i in range(self._led_count):
                strip.setPixelColor(i, 0)
            strip.show()
        finally:
            # PixelStrip frees the ws2811 handle in _cleanup(); older bindings only do it on GC
            cleanup = getattr(strip, "_cleanup", None)
            if cleanup is not None:
                cleanup()
            log.debug("WS281xSink released", gpio=self.config.gpio_pin)

    # ==================== Helpers ====================

    def _require_strip(self) -> PixelStrip:
        if self._pixel_strip is None:
            raise RuntimeError("WS281xSink used before init() or after reset()")
        return self._pixel_strip

    @staticmethod
    def _decode_color_order(order: str) -> int:
        """Map color order string to rpi_ws281x constant."""
        mapping = {
            "RGB": ws.WS2811_STRIP_RGB,
            "RBG": ws.WS2811_STRIP_RBG,
            "GRB": ws.WS2811_STRIP_GRB,
            "GBR": ws.WS2811_STRIP_GBR,
            "BRG": ws.WS2811_STRIP_BRG,
            "BGR": ws.WS2811_STRIP_BGR,
        }
        return mapping.get(order.upper(), ws.WS2811_STRIP_GRB)
