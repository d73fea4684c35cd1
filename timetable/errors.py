# timetable/errors.py
from typing import Optional

import pandas as pd


class SchedulingError(ValueError):
    """Base class for failures that abort a whole generate() call."""

    kind = "scheduling_error"


class BeforeWindowStartError(SchedulingError):
    kind = "before_window_start"

    def __init__(self, task_name: str, start: pd.Timestamp, wake: pd.Timestamp):
        self.task_name = task_name
        super().__init__(f"{task_name!r} starts at {start} which is before wake time {wake}")


class AfterWindowEndError(SchedulingError):
    kind = "after_window_end"

    def __init__(self, task_name: str, end: pd.Timestamp, bed: pd.Timestamp):
        self.task_name = task_name
        super().__init__(f"{task_name!r} ends at {end} which is after bed time {bed}")


class TaskOverlapError(SchedulingError):
    kind = "task_overlap"

    def __init__(self, task_name: str, other_name: str):
        self.task_name = task_name
        self.other_name = other_name
        super().__init__(f"fixed tasks {task_name!r} and {other_name!r} overlap")


class InsufficientCapacityError(SchedulingError):
    kind = "insufficient_capacity"

    def __init__(self, task_name: str, remaining: Optional[pd.Timedelta] = None,
                 message: Optional[str] = None):
        self.task_name = task_name
        self.remaining = remaining
        if message is None:
            message = f"not enough free time left to place {task_name!r}"
            if remaining is not None:
                message += f" ({remaining} still unplaced)"
        super().__init__(message)


class EmptyWindowError(InsufficientCapacityError):
    """Raised when a task needs free gaps but nothing has been placed yet to derive them from."""

    kind = "empty_window"

    def __init__(self, task_name: str):
        super().__init__(
            task_name,
            message=f"cannot place {task_name!r}: the schedule has no placed tasks to fit around",
        )
