# =============================================================================
# hacknotify/analytics/__init__.py
# =============================================================================

from .derived_views import (
    parse_timestamp,
    upcoming_deadlines,
    urgent_deadlines,
    my_tasks,
    pending_tasks,
    overdue_tasks,
    completed_tasks,
    tasks_by_status,
    upcoming_hackathons,
    past_hackathons,
    dashboard_stats,
)

__all__ = [
    "parse_timestamp",
    "upcoming_deadlines",
    "urgent_deadlines",
    "my_tasks",
    "pending_tasks",
    "overdue_tasks",
    "completed_tasks",
    "tasks_by_status",
    "upcoming_hackathons",
    "past_hackathons",
    "dashboard_stats",
]
