# timetable/export.py
from datetime import datetime, timezone
from typing import Optional, Sequence

import pandas as pd

from .models import ScheduledInterval


def _ics_time(ts: pd.Timestamp, tz: Optional[str]) -> str:
    # Aware instants are written in UTC; naive ones are floating local time.
    if ts.tzinfo is None and tz:
        ts = ts.tz_localize(tz)
    if ts.tzinfo is not None:
        return ts.tz_convert("UTC").strftime("%Y%m%dT%H%M%SZ")
    return ts.strftime("%Y%m%dT%H%M%S")


def _escape(text: str) -> str:
    return (text.replace("\\", "\\\\").replace(";", "\\;")
            .replace(",", "\\,").replace("\n", "\\n"))


def schedule_to_ics(intervals: Sequence[ScheduledInterval], tz: Optional[str] = None) -> str:
    """
    Convert a generated day to .ics calendar format.

    Every interval becomes its own VEVENT, so a task split over several
    gaps shows up as several events with the same summary.
    """
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//Timetable//EN",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
    ]

    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    for i, iv in enumerate(intervals):
        dtstart = _ics_time(iv.start, tz)
        dtend = _ics_time(iv.end, tz)
        lines.extend([
            "BEGIN:VEVENT",
            f"UID:{i}-{dtstart}@timetable",
            f"DTSTAMP:{stamp}",
            f"DTSTART:{dtstart}",
            f"DTEND:{dtend}",
            f"SUMMARY:{_escape(iv.name)}",
            "END:VEVENT",
        ])

    lines.append("END:VCALENDAR")
    return "\r\n".join(lines) + "\r\n"
