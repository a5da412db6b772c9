# =============================================================================
# hacknotify/notifications/reminders.py
# Deadline reminder bucketing
# =============================================================================
"""
Which deadlines deserve a reminder right now.

Reminders go out 7, 3 and 1 whole days before a deadline, and once more on
the day itself when at most 12 hours remain. The job runs often, so every
bucket is a window and repeats are filtered by the per-day notification log.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta

REMINDER_DAYS = (7, 3, 1)
SAME_DAY_WINDOW = timedelta(hours=12)
ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class ReminderDecision:
    should_send: bool
    days_until: int

    def __bool__(self) -> bool:
        return self.should_send


def should_send_reminder(deadline: datetime, now: datetime) -> ReminderDecision:
    """
    Decide whether a reminder is due for `deadline` at `now`.

    days_until is the number of whole days left (floored, so it is
    negative once the deadline has passed).
    """
    remaining = deadline - now
    days_until = int(remaining // ONE_DAY)

    if days_until in REMINDER_DAYS:
        return ReminderDecision(True, days_until)

    # Same day: 0-12 hours left. 12-24 hours left sends nothing.
    if timedelta(0) <= remaining <= SAME_DAY_WINDOW:
        return ReminderDecision(True, 0)

    return ReminderDecision(False, days_until)


def reminder_type(kind: str, days_until: int) -> str:
    """notification_logs type, e.g. hackathon_sub_3d."""
    return f"hackathon_{kind}_{days_until}d"
