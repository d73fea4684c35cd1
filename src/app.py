import streamlit as st
import pandas as pd
import plotly.express as px
from datetime import datetime, time

from streamlit_calendar import calendar

from timetable.export import schedule_to_ics
from timetable.models import PlannerPrefs, FixedTask, FlexibleTask, ProportionalTask
from timetable.scheduler import Scheduler, schedule_to_frame

from prometheus_client import start_http_server, Summary, Counter


# Streamlit reruns the script; register metrics and the exporter once per session
if "SCHEDULE_TIME" not in st.session_state:
    st.session_state.SCHEDULE_TIME = Summary(
        "timetable_generation_seconds",
        "Time spent generating a day timetable",
    )
SCHEDULE_TIME = st.session_state.SCHEDULE_TIME

if "FAILURE_COUNTER" not in st.session_state:
    st.session_state.FAILURE_COUNTER = Counter(
        "timetable_failures_total",
        "Count of failed generations by error kind",
        ["kind"],
    )
FAILURE_COUNTER = st.session_state.FAILURE_COUNTER

if "metrics_started" not in st.session_state:
    start_http_server(8000)
    st.session_state.metrics_started = True


ERROR_HINTS = {
    "before_window_start": "Move the fixed task later or wake up earlier.",
    "after_window_end": "Move the fixed task earlier or go to bed later.",
    "task_overlap": "Two fixed tasks share time. Shift one of them.",
    "insufficient_capacity": "Shorten or drop a flexible task; there is not enough free time.",
    "empty_window": "Add at least one fixed task so flexible and free tasks have something to fit around.",
}


def time_on_day(label: str, key: str, default: time) -> datetime:
    """Clock time on the selected day, as a naive datetime."""
    t = st.time_input(label, value=default, key=key)
    return datetime.combine(st.session_state.day, t)


# Session State Setup
if "prefs" not in st.session_state:
    st.session_state.prefs = PlannerPrefs.from_env()

if "day" not in st.session_state:
    st.session_state.day = pd.Timestamp.now(tz=st.session_state.prefs.tz).date()

if "fixed_tasks" not in st.session_state:
    st.session_state.fixed_tasks = []         # list[FixedTask]

if "flexible_tasks" not in st.session_state:
    st.session_state.flexible_tasks = []      # list[FlexibleTask]

if "proportional_tasks" not in st.session_state:
    st.session_state.proportional_tasks = []  # list[ProportionalTask]

if "intervals" not in st.session_state:
    st.session_state.intervals = []


# Sidebar: Inputs
st.sidebar.title("Day Timetable")

st.sidebar.subheader("Day")
st.session_state.day = st.sidebar.date_input("Date", value=st.session_state.day)
with st.sidebar:
    wake = time_on_day("Wake time", "wake", time(8, 0))
    bed = time_on_day("Bed time", "bed", time(22, 0))

# Add Fixed Task
st.sidebar.subheader("Add Fixed Task")
with st.sidebar.form("fixed_form"):
    ft_name = st.text_input("Name", key="ft_name")
    ft_start = time_on_day("Start", "ft_start", time(12, 0))
    ft_end = time_on_day("End", "ft_end", time(13, 0))
    add_fixed = st.form_submit_button("Add Fixed Task")
    if add_fixed:
        if ft_name and ft_end > ft_start:
            st.session_state.fixed_tasks.append(FixedTask(ft_name, ft_start, ft_end))
        else:
            st.sidebar.error("Please enter a name and ensure end > start")

# Add Flexible Task
st.sidebar.subheader("Add Flexible Task")
with st.sidebar.form("flexible_form"):
    fl_name = st.text_input("Name", key="fl_name")
    fl_minutes = st.number_input("Duration (minutes)", min_value=1, max_value=24 * 60, step=5, value=30)
    add_flexible = st.form_submit_button("Add Flexible Task")
    if add_flexible:
        if fl_name:
            st.session_state.flexible_tasks.append(FlexibleTask(fl_name, int(fl_minutes)))
        else:
            st.sidebar.error("Please enter a task name.")

# Add Proportional Task
st.sidebar.subheader("Add Free-Time Task")
with st.sidebar.form("proportional_form"):
    pr_name = st.text_input("Name", key="pr_name")
    pr_weight = st.number_input("Weight", min_value=0.1, max_value=100.0, step=0.5, value=1.0)
    add_proportional = st.form_submit_button("Add Free-Time Task")
    if add_proportional:
        if pr_name:
            st.session_state.proportional_tasks.append(ProportionalTask(pr_name, float(pr_weight)))
        else:
            st.sidebar.error("Please enter a task name.")

if st.sidebar.button("Clear all tasks"):
    st.session_state.fixed_tasks = []
    st.session_state.flexible_tasks = []
    st.session_state.proportional_tasks = []
    st.session_state.intervals = []


# Main: Generate Schedule
st.title("Day Timetable")

col1, col2, col3 = st.columns(3)
with col1:
    st.markdown("### Fixed Tasks")
    if st.session_state.fixed_tasks:
        st.dataframe(pd.DataFrame([{
            "name": t.name,
            "start": t.start,
            "end": t.end,
        } for t in st.session_state.fixed_tasks]))
    else:
        st.write("No fixed tasks yet.")

with col2:
    st.markdown("### Flexible Tasks")
    if st.session_state.flexible_tasks:
        st.dataframe(pd.DataFrame([{
            "name": t.name,
            "minutes": t.minutes,
        } for t in st.session_state.flexible_tasks]))
    else:
        st.write("No flexible tasks yet.")

with col3:
    st.markdown("### Free-Time Tasks")
    if st.session_state.proportional_tasks:
        st.dataframe(pd.DataFrame([{
            "name": t.name,
            "weight": t.weight,
        } for t in st.session_state.proportional_tasks]))
    else:
        st.write("No free-time tasks yet.")


if st.button("Generate Schedule"):
    try:
        scheduler = Scheduler(
            wake=wake,
            bed=bed,
            fixed_tasks=st.session_state.fixed_tasks,
            flexible_tasks=st.session_state.flexible_tasks,
            proportional_tasks=st.session_state.proportional_tasks,
            prefs=st.session_state.prefs,
        )
    except ValueError as exc:
        st.error(str(exc))
    else:
        with SCHEDULE_TIME.time():
            result = scheduler.plan()

        if result.ok:
            st.session_state.intervals = result.intervals
        else:
            FAILURE_COUNTER.labels(kind=result.kind).inc()
            st.session_state.intervals = []
            st.error(f"{result.error}. {ERROR_HINTS.get(result.kind, '')}")


# Calendar UI with FullCalendar
if st.session_state.intervals:
    schedule_df = schedule_to_frame(st.session_state.intervals)
    fixed_names = {t.name for t in st.session_state.fixed_tasks}
    flexible_names = {t.name for t in st.session_state.flexible_tasks}

    def task_color(name):
        if name in fixed_names:
            return "#7f7f7f"  # grey
        if name in flexible_names:
            return "#1f77b4"  # blue
        return "#2ca02c"      # green

    st.markdown("## Day View")
    events = []
    for i, row in schedule_df.iterrows():
        events.append({
            "title": row["name"],
            "start": pd.Timestamp(row["start"]).isoformat(),
            "end": pd.Timestamp(row["end"]).isoformat(),
            "id": str(i),
            "color": task_color(row["name"]),
        })

    cal_options = {
        "initialView": "timeGridDay",
        "initialDate": str(st.session_state.day),
        "slotMinTime": "00:00:00",
        "slotMaxTime": "24:00:00",
        "allDaySlot": False,
        "nowIndicator": True,
    }

    calendar(events=events, options=cal_options, key="calendar")

    st.markdown("### Timeline")
    fig = px.timeline(schedule_df, x_start="start", x_end="end", y="name", color="name")
    st.plotly_chart(fig, use_container_width=True)

    st.dataframe(schedule_df)
    st.download_button(
        "Download .ics",
        data=schedule_to_ics(st.session_state.intervals, tz=st.session_state.prefs.tz),
        file_name=f"timetable-{st.session_state.day}.ics",
        mime="text/calendar",
    )
else:
    st.info("Add some tasks and click **Generate Schedule** to see the day.")
