import dataclasses
import datetime as dt

import pandas as pd
import pytest

from timetable.models import (
    DayWindow,
    FixedTask,
    FlexibleTask,
    PlannerPrefs,
    ProportionalTask,
)


def test_day_window_coerces_instants():
    window = DayWindow(dt.datetime(2025, 11, 3, 8, 0), "2025-11-03 22:00")
    assert window.wake == pd.Timestamp("2025-11-03 08:00")
    assert window.bed == pd.Timestamp("2025-11-03 22:00")
    assert window.length == pd.Timedelta(hours=14)


@pytest.mark.parametrize("wake,bed", [
    ("2025-11-03 22:00", "2025-11-03 08:00"),
    ("2025-11-03 08:00", "2025-11-03 08:00"),
])
def test_day_window_requires_wake_before_bed(wake, bed):
    with pytest.raises(ValueError):
        DayWindow(wake, bed)


def test_fixed_task_must_end_after_start():
    with pytest.raises(ValueError):
        FixedTask("Lunch", "2025-11-03 13:00", "2025-11-03 12:00")


@pytest.mark.parametrize("task,field,value", [
    (FixedTask("Lunch", "2025-11-03 12:00", "2025-11-03 13:00"), "end", pd.Timestamp("2025-11-03 11:00")),
    (FlexibleTask("Gym", 60), "minutes", -30),
    (ProportionalTask("Read", 1), "weight", 0),
])
def test_tasks_are_immutable(task, field, value):
    with pytest.raises(dataclasses.FrozenInstanceError):
        setattr(task, field, value)


def test_day_window_rejects_mixed_awareness():
    with pytest.raises(ValueError):
        DayWindow(pd.Timestamp("2025-11-03 08:00", tz="UTC"), pd.Timestamp("2025-11-03 22:00"))


def test_fixed_task_rejects_mixed_awareness():
    with pytest.raises(ValueError):
        FixedTask("Lunch", pd.Timestamp("2025-11-03 12:00", tz="UTC"), "2025-11-03 13:00")


def test_fixed_task_keeps_timezone():
    task = FixedTask("Lunch", "2025-11-03 12:00+00:00", "2025-11-03 13:00+00:00")
    assert task.start.tzinfo is not None


def test_flexible_task_duration_in_minutes():
    assert FlexibleTask("Exercise", 30).duration == pd.Timedelta(minutes=30)


@pytest.mark.parametrize("minutes", [0, -5, 1.5, True])
def test_flexible_task_rejects_bad_minutes(minutes):
    with pytest.raises(ValueError):
        FlexibleTask("Exercise", minutes)


@pytest.mark.parametrize("weight", [0, -1, "2"])
def test_proportional_task_rejects_bad_weight(weight):
    with pytest.raises(ValueError):
        ProportionalTask("Read", weight)


def test_proportional_task_accepts_fractional_weight():
    assert ProportionalTask("Read", 0.5).weight == 0.5


class TestPlannerPrefs:

    def test_defaults(self):
        prefs = PlannerPrefs()
        assert prefs.resolution == pd.Timedelta(milliseconds=1)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TIMETABLE_TZ", "Europe/London")
        monkeypatch.setenv("TIMETABLE_RESOLUTION_MS", "60000")
        prefs = PlannerPrefs.from_env()
        assert prefs.tz == "Europe/London"
        assert prefs.resolution == pd.Timedelta(minutes=1)

    def test_from_env_rejects_non_positive_resolution(self, monkeypatch):
        monkeypatch.setenv("TIMETABLE_RESOLUTION_MS", "0")
        with pytest.raises(ValueError):
            PlannerPrefs.from_env()
