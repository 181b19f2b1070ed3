# hardware/led/sink_factory.py

from stranger_wall.hardware.led.strip_interface import IFrameSink
from stranger_wall.hardware.led.virtual_sink import VirtualSink
from stranger_wall.models.config import StripHardwareConfig
from stranger_wall.runtime.runtime_info import RuntimeInfo
from stranger_wall.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.HARDWARE)


def create_sink(hardware: StripHardwareConfig, *, virtual: bool = False) -> IFrameSink:
    """
    Hardware sink on a Raspberry Pi with rpi_ws281x installed, virtual otherwise.

    The returned sink is not initialized yet; Strip.open() does that.
    """
    if virtual:
        log.info("Using virtual LED sink (requested)")
        return VirtualSink()

    if RuntimeInfo.is_raspberry_pi() and RuntimeInfo.has_ws281x():
        from stranger_wall.hardware.led.ws281x_sink import WS281xSink
        return WS281xSink(hardware)

    log.warn("rpi_ws281x or Raspberry Pi not detected, using virtual LED sink")
    return VirtualSink()
