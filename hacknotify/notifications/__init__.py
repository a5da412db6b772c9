# =============================================================================
# hacknotify/notifications/__init__.py
# Email reminders and summaries
# =============================================================================

from .reminders import ReminderDecision, should_send_reminder, reminder_type
from .email import EmailSender, RESEND_API_URL
from .jobs import (
    NotificationJob,
    HackathonReminderJob,
    DailySummaryJob,
    WeeklySummaryJob,
    JobReport,
)
from .cron import verify_cron_authorization, run_master, run_job, JOBS

__all__ = [
    "ReminderDecision",
    "should_send_reminder",
    "reminder_type",
    "EmailSender",
    "RESEND_API_URL",
    "NotificationJob",
    "HackathonReminderJob",
    "DailySummaryJob",
    "WeeklySummaryJob",
    "JobReport",
    "verify_cron_authorization",
    "run_master",
    "run_job",
    "JOBS",
]
