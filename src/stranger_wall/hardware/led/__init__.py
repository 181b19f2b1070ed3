from .strip_interface import IFrameSink
from .virtual_sink import VirtualSink
from .sink_factory import create_sink

__all__ = [
    "IFrameSink",
    "VirtualSink",
    "create_sink",
]
