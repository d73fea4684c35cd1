# timetable/placement.py
import bisect
import logging
from typing import Iterator, List, Sequence, Tuple

import pandas as pd

from .errors import (
    AfterWindowEndError,
    BeforeWindowStartError,
    EmptyWindowError,
    InsufficientCapacityError,
    TaskOverlapError,
)
from .models import DayWindow, FixedTask, Gap, ScheduledInterval

logger = logging.getLogger(__name__)

ZERO = pd.Timedelta(0)


class WorkingSchedule:
    """
    Intervals placed so far during one generation run, kept ordered by start.

    Each insert goes to its sorted position, so readers never have to re-sort.
    """

    def __init__(self):
        self._intervals: List[ScheduledInterval] = []

    def insert(self, interval: ScheduledInterval) -> None:
        bisect.insort(self._intervals, interval, key=lambda iv: iv.start)

    @property
    def intervals(self) -> Tuple[ScheduledInterval, ...]:
        return tuple(self._intervals)

    def __len__(self) -> int:
        return len(self._intervals)

    def __iter__(self) -> Iterator[ScheduledInterval]:
        return iter(self._intervals)


def overlaps(a: FixedTask, b: FixedTask) -> bool:
    # Touching endpoints (a.end == b.start) do not overlap.
    return a.start < b.end and b.start < a.end


def place_fixed_tasks(fixed_tasks: Sequence[FixedTask],
                      window: DayWindow) -> WorkingSchedule:
    """
    Validate the fixed tasks against the day window and each other,
    and return a new working schedule holding them.

    Tasks are checked in input order; each one is compared with every
    other task, so an overlapping pair is caught whichever comes first.
    """
    schedule = WorkingSchedule()
    for i, task in enumerate(fixed_tasks):
        if task.start < window.wake:
            logger.warning("fixed task %r starts before wake time", task.name)
            raise BeforeWindowStartError(task.name, task.start, window.wake)
        if task.end > window.bed:
            logger.warning("fixed task %r ends after bed time", task.name)
            raise AfterWindowEndError(task.name, task.end, window.bed)
        for j, other in enumerate(fixed_tasks):
            if j == i:
                continue
            if overlaps(task, other):
                logger.warning("fixed tasks %r and %r overlap", task.name, other.name)
                raise TaskOverlapError(task.name, other.name)
        schedule.insert(ScheduledInterval(task.name, task.start, task.end))

    logger.debug("placed %d fixed task(s)", len(schedule))
    return schedule


def find_gaps(intervals: Sequence[ScheduledInterval], window: DayWindow) -> List[Gap]:
    """
    Free gaps of the day in chronological order: morning, between
    consecutive intervals, evening. Gaps of zero length are left out.

    `intervals` must be sorted by start and non-empty.
    """
    if not intervals:
        raise ValueError("find_gaps needs at least one placed interval")

    gaps: List[Gap] = []
    if intervals[0].start > window.wake:
        gaps.append(Gap(window.wake, intervals[0].start, "morning"))

    for current, following in zip(intervals, intervals[1:]):
        if following.start > current.end:
            gaps.append(Gap(current.end, following.start, "internal"))

    if window.bed > intervals[-1].end:
        gaps.append(Gap(intervals[-1].end, window.bed, "evening"))
    return gaps


def place_split(name: str,
                total: pd.Timedelta,
                schedule: WorkingSchedule,
                window: DayWindow) -> List[ScheduledInterval]:
    """
    Greedily place `total` worth of `name` into the earliest free gaps.

    Every pass rescans the gaps from the morning. A morning or internal
    gap that is too short is filled completely and the rest carries over
    to the next pass; an evening gap is only used when the remainder fits
    in it whole, otherwise InsufficientCapacityError is raised.

    Returns the fragments inserted into `schedule`.
    """
    if total <= ZERO:
        logger.debug("nothing to place for %r", name)
        return []
    if len(schedule) == 0:
        logger.warning("no placed tasks to fit %r around", name)
        raise EmptyWindowError(name)

    fragments: List[ScheduledInterval] = []
    remaining = total
    while remaining > ZERO:
        gaps = find_gaps(schedule.intervals, window)
        logger.debug("%r: %s left, %d free gap(s)", name, remaining, len(gaps))
        if not gaps:
            logger.warning("no free time left for %r", name)
            raise InsufficientCapacityError(name, remaining)

        gap = gaps[0]
        if remaining <= gap.duration:
            fragment = ScheduledInterval(name, gap.start, gap.start + remaining)
            remaining = ZERO
        elif gap.position == "evening":
            logger.warning("%r does not fit into the evening gap", name)
            raise InsufficientCapacityError(name, remaining)
        else:
            fragment = ScheduledInterval(name, gap.start, gap.end)
            remaining -= gap.duration

        schedule.insert(fragment)
        fragments.append(fragment)
        logger.debug("placed %r %s-%s", name, fragment.start, fragment.end)

    return fragments
