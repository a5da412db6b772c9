# =============================================================================
# hacknotify/notifications/cron.py
# Cron entry points: bearer-token guard and the master job
# =============================================================================

from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, Optional, Type
import logging

from supabase import Client

from hacknotify.config import get_settings
from hacknotify.data.supabase_client import get_admin_client
from hacknotify.errors import CronAuthorizationError
from hacknotify.notifications.email import EmailSender
from hacknotify.notifications.jobs import (
    DailySummaryJob,
    HackathonReminderJob,
    NotificationJob,
    WeeklySummaryJob,
    as_utc,
    utcnow,
    to_iso,
)

logger = logging.getLogger(__name__)

MONDAY = 0

JOBS: Dict[str, Type[NotificationJob]] = {
    "hackathon-reminders": HackathonReminderJob,
    "daily-summary": DailySummaryJob,
    "weekly-summary": WeeklySummaryJob,
}


def verify_cron_authorization(authorization: Optional[str], secret: Optional[str] = None) -> None:
    """
    Check an Authorization header against the cron secret.

    Raises:
        CronAuthorizationError: header missing or not "Bearer <secret>",
            or no secret configured
    """
    if secret is None:
        secret = get_settings().cron_secret
    if not secret or authorization != f"Bearer {secret}":
        logger.warning("Rejected cron invocation with missing or invalid token")
        raise CronAuthorizationError()


def run_master(
    now: Optional[datetime] = None,
    client: Optional[Client] = None,
    sender: Optional[EmailSender] = None,
) -> Dict[str, Any]:
    """
    Hackathon reminders and the daily summary on every run; the weekly
    summary on Mondays (UTC) only.
    """
    now = as_utc(now or utcnow())
    results: Dict[str, Any] = {
        "hackathonReminders": None,
        "dailySummary": None,
        "weeklySummary": None,
    }

    try:
        if client is None:
            client = get_admin_client()
        if sender is None:
            sender = EmailSender.from_settings(client)

        logger.info("Running hackathon reminders...")
        results["hackathonReminders"] = HackathonReminderJob(client, sender).run(now)

        logger.info("Running daily summary...")
        results["dailySummary"] = DailySummaryJob(client, sender).run(now)

        if now.weekday() == MONDAY:
            logger.info("Running weekly summary...")
            results["weeklySummary"] = WeeklySummaryJob(client, sender).run(now)
        else:
            results["weeklySummary"] = {"skipped": True, "reason": "Not Monday"}
    except Exception as e:
        logger.error(f"Master cron failed: {e}", exc_info=True)
        return {"error": "Master Cron Failed", "details": str(e)}

    return {"success": True, "timestamp": to_iso(utcnow()), "results": results}


def run_job(name: str, authorization: Optional[str], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Authorize, then run one job by name ("master" or a key of JOBS).

    Raises:
        CronAuthorizationError: bad token
        KeyError: unknown job name
    """
    verify_cron_authorization(authorization)
    if name == "master":
        return run_master(now)
    return JOBS[name].from_settings().run(now)
