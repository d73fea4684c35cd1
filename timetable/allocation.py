# timetable/allocation.py
import logging
import math
from typing import List, Sequence, Tuple

import pandas as pd

from .models import DayWindow, ProportionalTask, ScheduledInterval
from .placement import find_gaps

logger = logging.getLogger(__name__)


def free_capacity(intervals: Sequence[ScheduledInterval], window: DayWindow) -> pd.Timedelta:
    """Total unscheduled time: morning gap + gaps between intervals + evening gap."""
    return sum((gap.duration for gap in find_gaps(intervals, window)), pd.Timedelta(0))


def allocation_unit(capacity: pd.Timedelta,
                    tasks: Sequence[ProportionalTask],
                    resolution: pd.Timedelta) -> int:
    """
    Free time per unit of weight, floored to whole `resolution` steps.

    Returned as a step count so the per-task multiplication stays exact.
    """
    total_weight = sum(task.weight for task in tasks)
    if total_weight <= 0:
        raise ValueError("proportional tasks need a positive total weight")
    steps = capacity // resolution
    return math.floor(steps / total_weight)


def allocate(capacity: pd.Timedelta,
             tasks: Sequence[ProportionalTask],
             resolution: pd.Timedelta = pd.Timedelta(milliseconds=1),
             ) -> List[Tuple[ProportionalTask, pd.Timedelta]]:
    """
    Derive each proportional task's duration as unit * weight, truncated.

    The flooring remainder is not redistributed and stays free.
    """
    if not tasks:
        return []
    unit = allocation_unit(capacity, tasks, resolution)
    durations = [(task, resolution * int(unit * task.weight)) for task in tasks]

    allocated = sum((d for _, d in durations), pd.Timedelta(0))
    logger.debug("allocated %s of %s free time (unit=%d x %s)",
                 allocated, capacity, unit, resolution)
    return durations
