# =============================================================================
# hacknotify/analytics/derived_views.py
# Pure views over the last rendered hackathon/task collections
# =============================================================================
"""
Derived views never fetch or cache anything. They take the collections a
fetcher produced plus the current instant and return filtered lists of the
original records, so they can be recomputed whenever either input changes.
"""

from __future__ import annotations
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Union

import pandas as pd

Record = Dict[str, Any]

DONE = "done"
TASK_STATUSES = ("todo", "doing", DONE)
TASK_PRIORITIES = ("low", "medium", "high")
URGENT_WINDOW = timedelta(days=7)


def parse_timestamp(value: Any) -> Optional[pd.Timestamp]:
    """Parse a deadline field into a UTC timestamp; None when empty or invalid."""
    if value is None or value == "":
        return None
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(ts):
        return None
    return ts


def as_utc(now: Union[datetime, pd.Timestamp]) -> pd.Timestamp:
    ts = pd.Timestamp(now)
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def _in_window(value: Any, start: pd.Timestamp, end: Optional[pd.Timestamp] = None) -> bool:
    ts = parse_timestamp(value)
    if ts is None or ts <= start:
        return False
    return end is None or ts <= end


# =============================================================================
# HACKATHONS
# =============================================================================

def upcoming_deadlines(hackathons: List[Record], now: datetime) -> List[Record]:
    """Hackathons with a registration or submission deadline still ahead."""
    now_ts = as_utc(now)
    return [
        h for h in hackathons
        if _in_window(h.get("reg_deadline"), now_ts)
        or _in_window(h.get("submission_deadline"), now_ts)
    ]


def urgent_deadlines(
    hackathons: List[Record],
    now: datetime,
    window: timedelta = URGENT_WINDOW,
    limit: Optional[int] = 3,
) -> List[Record]:
    """Hackathons with a deadline in (now, now + window], first `limit` of them."""
    now_ts = as_utc(now)
    end = now_ts + pd.Timedelta(window)
    urgent = [
        h for h in hackathons
        if _in_window(h.get("reg_deadline"), now_ts, end)
        or _in_window(h.get("submission_deadline"), now_ts, end)
    ]
    return urgent[:limit] if limit is not None else urgent


def upcoming_hackathons(hackathons: List[Record], now: datetime) -> List[Record]:
    now_ts = as_utc(now)
    return [h for h in hackathons if _in_window(h.get("submission_deadline"), now_ts)]


def past_hackathons(hackathons: List[Record], now: datetime) -> List[Record]:
    now_ts = as_utc(now)
    past = []
    for h in hackathons:
        ts = parse_timestamp(h.get("submission_deadline"))
        if ts is not None and ts < now_ts:
            past.append(h)
    return past


# =============================================================================
# TASKS
# =============================================================================

def my_tasks(tasks: List[Record], user_id: Optional[str]) -> List[Record]:
    """Open tasks assigned to the user."""
    if not user_id:
        return []
    return [t for t in tasks if t.get("assigned_to") == user_id and t.get("status") != DONE]


def pending_tasks(tasks: List[Record], user_id: Optional[str], limit: int = 5) -> List[Record]:
    return my_tasks(tasks, user_id)[:limit]


def overdue_tasks(tasks: List[Record], now: datetime) -> List[Record]:
    now_ts = as_utc(now)
    overdue = []
    for t in tasks:
        if t.get("status") == DONE:
            continue
        ts = parse_timestamp(t.get("deadline"))
        if ts is not None and ts < now_ts:
            overdue.append(t)
    return overdue


def completed_tasks(tasks: List[Record]) -> List[Record]:
    return [t for t in tasks if t.get("status") == DONE]


def tasks_by_status(tasks: List[Record]) -> Dict[str, List[Record]]:
    """Kanban columns; tasks with an unknown status are left out."""
    columns: Dict[str, List[Record]] = {status: [] for status in TASK_STATUSES}
    for t in tasks:
        status = t.get("status")
        if status in columns:
            columns[status].append(t)
    return columns


def dashboard_stats(
    hackathons: List[Record],
    tasks: List[Record],
    user_id: Optional[str],
    now: datetime,
) -> Dict[str, int]:
    """Counts shown on the dashboard stat cards."""
    return {
        "hackathons": len(hackathons),
        "upcoming": len(upcoming_deadlines(hackathons, now)),
        "my_tasks": len(my_tasks(tasks, user_id)),
        "completed": len(completed_tasks(tasks)),
        "overdue": len(overdue_tasks(tasks, now)),
    }
