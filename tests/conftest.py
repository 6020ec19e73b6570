"""
Pytest configuration: make sure `import pollito` and `import api` work
regardless of where pytest is invoked, and provide shared fixtures.

It prepends the project root (one directory above *tests/*) to
``sys.path`` **before** any tests are collected.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pollito.farm import FarmStore, sample_coops  # noqa: E402

START = datetime(2024, 12, 1, 8, 0)


class TickingClock:
    """Returns START, START+1min, START+2min, ... so records never tie."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(minutes=1)
        return current


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(clock):
    """In‑memory store holding the demo population."""
    return FarmStore(sample_coops(), clock=clock)
