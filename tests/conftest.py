import os
import sys

import pytest

# Add the project src directory to PYTHONPATH for tests
CURRENT_DIR = os.path.dirname(__file__)
SRC_PATH = os.path.abspath(os.path.join(CURRENT_DIR, "..", "src"))
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from hotelbot.services import Registry, TimestampRenderer  # noqa: E402

# 2023-11-14T22:13:20Z
FIXED_NOW_MS = 1_700_000_000_000


class FakeClock:
    """Returns FIXED_NOW_MS, advancing one second per call."""

    def __init__(self, start: int = FIXED_NOW_MS):
        self.now = start

    def __call__(self) -> int:
        value = self.now
        self.now += 1000
        return value


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock):
    return Registry(clock=clock, time_renderer=TimestampRenderer(-3))
