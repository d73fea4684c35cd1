# timetable/scheduler.py
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .allocation import allocate, free_capacity
from .errors import EmptyWindowError, SchedulingError
from .models import (
    DayWindow,
    FixedTask,
    FlexibleTask,
    PlannerPrefs,
    ProportionalTask,
    ScheduledInterval,
    same_awareness,
)
from .placement import WorkingSchedule, place_fixed_tasks, place_split

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["name", "start", "end", "minutes"]


@dataclass
class ScheduleResult:
    """Outcome of Scheduler.plan(): either the intervals or the error that stopped generation."""

    intervals: List[ScheduledInterval] = field(default_factory=list)
    error: Optional[SchedulingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[str]:
        return None if self.error is None else self.error.kind


class Scheduler:
    """
    Builds one day's timetable between wake and bed time.

    Fixed tasks go in first, then flexible tasks in input order, then the
    proportional tasks share whatever free time is left. Inputs are stored
    once; every generate() call works on its own fresh schedule.
    """

    def __init__(self,
                 wake: datetime,
                 bed: datetime,
                 fixed_tasks: Iterable[FixedTask] = (),
                 flexible_tasks: Iterable[FlexibleTask] = (),
                 proportional_tasks: Iterable[ProportionalTask] = (),
                 prefs: Optional[PlannerPrefs] = None):
        self.window = DayWindow(wake, bed)
        self.fixed_tasks: Tuple[FixedTask, ...] = tuple(fixed_tasks)
        self.flexible_tasks: Tuple[FlexibleTask, ...] = tuple(flexible_tasks)
        self.proportional_tasks: Tuple[ProportionalTask, ...] = tuple(proportional_tasks)
        self.prefs = prefs or PlannerPrefs()

        for task in self.fixed_tasks:
            if not same_awareness(task.start, self.window.wake):
                raise ValueError(
                    f"fixed task {task.name!r} and the day window must both be "
                    "timezone-aware or both naive")

    @classmethod
    def from_inputs(cls,
                    wake: datetime,
                    bed: datetime,
                    fixed: Sequence[Dict] = (),
                    flexible: Sequence[Dict] = (),
                    proportional: Sequence[Dict] = (),
                    prefs: Optional[PlannerPrefs] = None) -> "Scheduler":
        """Build from plain dicts: {name,start,end}, {name,minutes}, {name,weight}."""
        return cls(
            wake,
            bed,
            fixed_tasks=[FixedTask(d["name"], d["start"], d["end"]) for d in fixed],
            flexible_tasks=[FlexibleTask(d["name"], d["minutes"]) for d in flexible],
            proportional_tasks=[ProportionalTask(d["name"], d["weight"]) for d in proportional],
            prefs=prefs,
        )

    def generate(self) -> List[ScheduledInterval]:
        """
        Run the full pipeline and return the intervals sorted by start.

        Raises a SchedulingError subclass on the first failure; nothing
        partial is returned.
        """
        schedule = place_fixed_tasks(self.fixed_tasks, self.window)
        self._place_flexible(schedule)
        self._place_proportional(schedule)

        intervals = list(schedule)
        logger.info("generated %d interval(s) between %s and %s",
                    len(intervals), self.window.wake, self.window.bed)
        return intervals

    def plan(self) -> ScheduleResult:
        """Like generate(), but reports a scheduling failure in the result instead of raising."""
        try:
            return ScheduleResult(intervals=self.generate())
        except SchedulingError as exc:
            return ScheduleResult(error=exc)

    def to_frame(self) -> pd.DataFrame:
        return schedule_to_frame(self.generate())

    def _place_flexible(self, schedule: WorkingSchedule) -> None:
        for task in self.flexible_tasks:
            place_split(task.name, task.duration, schedule, self.window)

    def _place_proportional(self, schedule: WorkingSchedule) -> None:
        if not self.proportional_tasks:
            return
        if len(schedule) == 0:
            raise EmptyWindowError(self.proportional_tasks[0].name)

        capacity = free_capacity(schedule.intervals, self.window)
        allocations = allocate(capacity, self.proportional_tasks, self.prefs.resolution)
        for task, duration in allocations:
            place_split(task.name, duration, schedule, self.window)


def schedule_to_frame(intervals: Sequence[ScheduledInterval]) -> pd.DataFrame:
    """Tabular view of a generated day, one row per interval."""
    if not intervals:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    df = pd.DataFrame([{
        "name": iv.name,
        "start": iv.start,
        "end": iv.end,
        "minutes": iv.duration.total_seconds() / 60.0,
    } for iv in intervals], columns=FRAME_COLUMNS)
    return df.sort_values("start", kind="stable").reset_index(drop=True)


def generate_schedule(wake: datetime,
                      bed: datetime,
                      fixed: Sequence[Dict] = (),
                      flexible: Sequence[Dict] = (),
                      proportional: Sequence[Dict] = (),
                      prefs: Optional[PlannerPrefs] = None) -> pd.DataFrame:
    """
    Generate a day's timetable from raw inputs.

    fixed:        [{"name", "start", "end"}]
    flexible:     [{"name", "minutes"}]
    proportional: [{"name", "weight"}]
    """
    scheduler = Scheduler.from_inputs(wake, bed, fixed, flexible, proportional, prefs)
    return schedule_to_frame(scheduler.generate())
