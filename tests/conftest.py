"""
Test configuration: repo root on sys.path plus fixtures for a sample day.
"""

import sys
from pathlib import Path

import pandas as pd
import pytest

REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

DAY = pd.Timestamp("2025-11-03")


def at(hhmm: str) -> pd.Timestamp:
    """Instant on the sample day, e.g. at("08:30")."""
    h, m = hhmm.split(":")
    return DAY + pd.Timedelta(hours=int(h), minutes=int(m))


@pytest.fixture
def wake():
    return at("08:00")


@pytest.fixture
def bed():
    return at("22:00")


@pytest.fixture
def window(wake, bed):
    from timetable.models import DayWindow
    return DayWindow(wake, bed)
