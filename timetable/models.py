# timetable/models.py
import os
from dataclasses import dataclass
from numbers import Integral, Real
from typing import Any

import pandas as pd


def to_instant(value: Any) -> pd.Timestamp:
    """Coerce a datetime / ISO string / Timestamp into a pandas Timestamp."""
    ts = pd.Timestamp(value)
    if pd.isnull(ts):
        raise ValueError(f"not a valid instant: {value!r}")
    return ts


def same_awareness(a: pd.Timestamp, b: pd.Timestamp) -> bool:
    """True when both instants are tz-aware or both are naive."""
    return (a.tzinfo is None) == (b.tzinfo is None)


@dataclass
class PlannerPrefs:
    tz: str = "America/New_York"   # display only; instants are absolute
    resolution_ms: int = 1          # flooring step for proportional allocation

    @property
    def resolution(self) -> pd.Timedelta:
        return pd.Timedelta(milliseconds=self.resolution_ms)

    @classmethod
    def from_env(cls) -> "PlannerPrefs":
        tz = os.getenv("TIMETABLE_TZ", os.getenv("TZ", cls.tz))
        resolution_ms = int(os.getenv("TIMETABLE_RESOLUTION_MS", cls.resolution_ms))
        if resolution_ms <= 0:
            raise ValueError("TIMETABLE_RESOLUTION_MS must be positive")
        return cls(tz=tz, resolution_ms=resolution_ms)


@dataclass(frozen=True)
class DayWindow:
    wake: pd.Timestamp
    bed: pd.Timestamp

    def __post_init__(self):
        object.__setattr__(self, "wake", to_instant(self.wake))
        object.__setattr__(self, "bed", to_instant(self.bed))
        if not same_awareness(self.wake, self.bed):
            raise ValueError("wake and bed time must both be timezone-aware or both naive")
        if self.wake >= self.bed:
            raise ValueError("wake time must be earlier than bed time")

    @property
    def length(self) -> pd.Timedelta:
        return self.bed - self.wake


@dataclass(frozen=True)
class FixedTask:
    name: str
    start: pd.Timestamp
    end: pd.Timestamp

    def __post_init__(self):
        object.__setattr__(self, "start", to_instant(self.start))
        object.__setattr__(self, "end", to_instant(self.end))
        if not same_awareness(self.start, self.end):
            raise ValueError(f"fixed task {self.name!r} mixes timezone-aware and naive times")
        if self.end <= self.start:
            raise ValueError(f"fixed task {self.name!r} must end after it starts")


@dataclass(frozen=True)
class FlexibleTask:
    name: str
    minutes: int

    def __post_init__(self):
        if isinstance(self.minutes, bool) or not isinstance(self.minutes, Integral) or self.minutes <= 0:
            raise ValueError(f"flexible task {self.name!r} needs a positive whole number of minutes")

    @property
    def duration(self) -> pd.Timedelta:
        return pd.Timedelta(minutes=int(self.minutes))


@dataclass(frozen=True)
class ProportionalTask:
    name: str
    weight: float  # share of the remaining free time

    def __post_init__(self):
        if isinstance(self.weight, bool) or not isinstance(self.weight, Real) or self.weight <= 0:
            raise ValueError(f"proportional task {self.name!r} needs a positive weight")


@dataclass(frozen=True)
class ScheduledInterval:
    name: str
    start: pd.Timestamp
    end: pd.Timestamp

    @property
    def duration(self) -> pd.Timedelta:
        return self.end - self.start


@dataclass(frozen=True)
class Gap:
    start: pd.Timestamp
    end: pd.Timestamp
    position: str = "internal"  # "morning" | "internal" | "evening"

    @property
    def duration(self) -> pd.Timedelta:
        return self.end - self.start
