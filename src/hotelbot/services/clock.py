"""
Clock provider and check-in time rendering.

The registry only stores raw millisecond instants; turning them into
calendar strings happens here, at the display boundary.
"""
from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_UTC_OFFSET_HOURS = -3.0


class SystemClock:
    """Wall clock in milliseconds since the epoch that never moves backwards."""

    def __init__(self, time_source: Callable[[], int] = time.time_ns) -> None:
        self._time_source = time_source
        self._last = 0

    def __call__(self) -> int:
        now = self._time_source() // 1_000_000
        if now < self._last:
            now = self._last
        self._last = now
        return now


class TimestampRenderer:
    """Renders a millisecond instant as ISO-8601 in a fixed UTC offset."""

    def __init__(self, offset_hours: float = DEFAULT_UTC_OFFSET_HOURS):
        self.offset_hours = offset_hours
        self.tz = timezone(timedelta(hours=offset_hours))

    def __call__(self, timestamp_ms: Any) -> str:
        try:
            seconds = int(timestamp_ms) // 1000
            moment = datetime.fromtimestamp(seconds, tz=self.tz)
        except (TypeError, ValueError, OverflowError, OSError) as e:
            logger.warning(f"Could not render timestamp {timestamp_ms!r}: {e}. Using the epoch.")
            moment = datetime.fromtimestamp(0, tz=self.tz)
        return moment.isoformat()
