# main.py
import logging
import os

import matplotlib.pyplot as plt
import matplotlib.dates as mdates
import pandas as pd

from timetable.errors import SchedulingError
from timetable.models import PlannerPrefs, FixedTask, FlexibleTask, ProportionalTask
from timetable.scheduler import Scheduler, schedule_to_frame


def main():
    logging.basicConfig(
        level=os.getenv("TIMETABLE_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    prefs = PlannerPrefs.from_env()

    day = pd.Timestamp("2025-11-03")
    wake = day + pd.Timedelta(hours=8)
    bed = day + pd.Timedelta(hours=22)

    fixed_tasks = [
        FixedTask(
            name="Lunch",
            start=day + pd.Timedelta(hours=12),
            end=day + pd.Timedelta(hours=13),
        ),
    ]

    flexible_tasks = [
        FlexibleTask(name="Exercise", minutes=30),
    ]

    proportional_tasks = [
        ProportionalTask(name="Read", weight=1),
    ]

    scheduler = Scheduler(
        wake=wake,
        bed=bed,
        fixed_tasks=fixed_tasks,
        flexible_tasks=flexible_tasks,
        proportional_tasks=proportional_tasks,
        prefs=prefs,
    )

    try:
        intervals = scheduler.generate()
    except SchedulingError as exc:
        print(f"Could not build the day ({exc.kind}): {exc}")
        return

    scheduled_df = schedule_to_frame(intervals)
    print("=== Schedule ===")
    print(scheduled_df)

    # Timeline, one row per task name
    names = list(dict.fromkeys(scheduled_df["name"]))
    fig, ax = plt.subplots(figsize=(10, 3))
    for _, row in scheduled_df.iterrows():
        start = mdates.date2num(row["start"])
        width = mdates.date2num(row["end"]) - start
        ax.barh(names.index(row["name"]), width, left=start)
    ax.set_yticks(range(len(names)))
    ax.set_yticklabels(names)
    ax.xaxis_date()
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%H:%M"))
    ax.set_title("Day Timetable")
    ax.set_xlabel("Time")
    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
