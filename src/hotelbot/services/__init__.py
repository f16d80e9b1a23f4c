from .clock import SystemClock, TimestampRenderer
from .registry import Registry, ROOM_NUMBERS

__all__ = [
    "Registry",
    "ROOM_NUMBERS",
    "SystemClock",
    "TimestampRenderer",
]
