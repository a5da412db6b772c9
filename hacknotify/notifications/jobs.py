# =============================================================================
# hacknotify/notifications/jobs.py
# Scheduled reminder and summary jobs
# =============================================================================
"""
Cron jobs that email team members.

    HackathonReminderJob   registration / submission deadlines (7d, 3d, 1d, same day)
    DailySummaryJob        upcoming hackathons, pending and overdue tasks
    WeeklySummaryJob       last week's activity and next week's deadlines

Jobs read with the service-role client, so row-level security does not
apply. Every run returns the same report:

    {"success": bool, "emailsSent": int, "errors": [str], "timestamp": ISO-8601}

A delivery failure is recorded in the report and the run continues; a
failed query ends the run with success False.
"""

from __future__ import annotations
from abc import abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from supabase import Client

from hacknotify.analytics.derived_views import parse_timestamp
from hacknotify.data.supabase_client import get_admin_client
from hacknotify.errors import NotificationError
from hacknotify.notifications.content import (
    daily_summary_email,
    hackathon_deadline_email,
    weekly_summary_email,
)
from hacknotify.notifications.email import NOTIFICATION_LOG_TABLE, EmailSender
from hacknotify.notifications.reminders import reminder_type, should_send_reminder
from hacknotify.services.base_service import BaseService

Record = Dict[str, Any]

LOOKAHEAD = timedelta(days=7)
DEADLINE_FIELDS = (("reg", "reg_deadline"), ("sub", "submission_deadline"))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: datetime) -> str:
    """UTC ISO-8601 with a Z suffix, safe inside PostgREST filters."""
    return as_utc(value).isoformat().replace("+00:00", "Z")


def _embedded(value: Any) -> Optional[Record]:
    # PostgREST returns an embedded relation as an object or a 1-row list
    if isinstance(value, list):
        return value[0] if value else None
    return value


@dataclass
class JobReport:
    emails_sent: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self, success: bool = True) -> Dict[str, Any]:
        return {
            "success": success,
            "emailsSent": self.emails_sent,
            "errors": list(self.errors),
            "timestamp": to_iso(utcnow()),
        }


class NotificationJob(BaseService):
    """Shared plumbing: queries, per-day dedup, delivery bookkeeping."""

    name = "notification job"

    def __init__(self, client: Client, sender: EmailSender):
        super().__init__()
        self.client = client
        self.sender = sender

    @classmethod
    def from_settings(cls) -> NotificationJob:
        client = get_admin_client()
        return cls(client, EmailSender.from_settings(client))

    def run(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = as_utc(now or utcnow())
        report = JobReport()
        with self.log_operation(f"Running {self.name}"):
            try:
                self._run(now, report)
            except Exception as e:
                self.logger.error(f"{self.name} failed: {e}", exc_info=True)
                report.errors.append(str(e))
                return report.to_dict(success=False)
        return report.to_dict()

    @abstractmethod
    def _run(self, now: datetime, report: JobReport) -> None:
        """Do the work, counting deliveries into `report`."""

    # =========================================================================
    # QUERIES
    # =========================================================================

    def _deadlines_between(self, query, start: datetime, end: datetime):
        """Rows with a registration or submission deadline inside [start, end]."""
        return (
            query
            .or_(f"reg_deadline.lte.{to_iso(end)},submission_deadline.lte.{to_iso(end)}")
            .or_(f"reg_deadline.gte.{to_iso(start)},submission_deadline.gte.{to_iso(start)}")
        )

    def _opted_in_profiles(self) -> List[Record]:
        response = self.client.table("profiles").select("*").eq("notifications_email", True).execute()
        return list(response.data or [])

    def _team_of(self, user_id: str) -> Optional[Record]:
        response = (
            self.client.table("team_members")
            .select("team:teams(*)")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        if not rows:
            return None
        team = _embedded(rows[0].get("team"))
        if not team or not team.get("id") or not team.get("name"):
            return None
        return team

    def _team_members(self, team_id: str) -> List[Tuple[str, Record]]:
        response = (
            self.client.table("team_members")
            .select("user_id, profile:profiles(*)")
            .eq("team_id", team_id)
            .execute()
        )
        members = []
        for row in response.data or []:
            profile = _embedded(row.get("profile"))
            if profile:
                members.append((row["user_id"], profile))
        return members

    def _user_tasks(self, user_id: str):
        return (
            self.client.table("tasks")
            .select("*")
            .eq("assigned_to", user_id)
            .neq("status", "done")
        )

    def _count(self, query) -> int:
        response = query.execute()
        if response.count is not None:
            return response.count
        return len(response.data or [])

    # =========================================================================
    # DELIVERY
    # =========================================================================

    def already_sent(self, user_id: str, notification_type: str, now: datetime) -> bool:
        """Whether this notification already went to this user today (UTC)."""
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        response = (
            self.client.table(NOTIFICATION_LOG_TABLE)
            .select("id")
            .eq("user_id", user_id)
            .eq("type", notification_type)
            .gte("created_at", to_iso(day_start))
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def _deliver(
        self,
        report: JobReport,
        to: str,
        content: Tuple[str, str],
        user_id: str,
        notification_type: str,
    ) -> None:
        subject, body = content
        try:
            self.sender.send(to, subject, body, user_id=user_id, notification_type=notification_type)
        except NotificationError as e:
            self.logger.warning(e.message)
            report.errors.append(f"Failed to send to {to}")
            return
        report.emails_sent += 1


class HackathonReminderJob(NotificationJob):
    name = "hackathon reminders"

    def _run(self, now, report):
        query = (
            self.client.table("hackathons")
            .select("*, team:teams(id, name)")
            .eq("notifications_enabled", True)
        )
        hackathons = self._deadlines_between(query, now, now + LOOKAHEAD).execute().data or []

        members_by_team: Dict[str, List[Tuple[str, Record]]] = {}
        for hackathon in hackathons:
            for kind, deadline_field in DEADLINE_FIELDS:
                deadline = parse_timestamp(hackathon.get(deadline_field))
                if deadline is None:
                    continue
                decision = should_send_reminder(deadline.to_pydatetime(), now)
                if not decision.should_send:
                    continue

                team_id = hackathon.get("team_id")
                if team_id not in members_by_team:
                    members_by_team[team_id] = self._team_members(team_id)

                notification_type = reminder_type(kind, decision.days_until)
                for user_id, profile in members_by_team[team_id]:
                    if not profile.get("notifications_email") or not profile.get("email"):
                        continue
                    if self.already_sent(user_id, notification_type, now):
                        continue
                    self._deliver(
                        report,
                        profile["email"],
                        hackathon_deadline_email(hackathon, kind, decision.days_until),
                        user_id,
                        notification_type,
                    )


class DailySummaryJob(NotificationJob):
    name = "daily summary"
    notification_type = "daily_summary"

    def _run(self, now, report):
        for profile in self._opted_in_profiles():
            if not profile.get("email"):
                continue
            team = self._team_of(profile["id"])
            if team is None:
                continue
            if self.already_sent(profile["id"], self.notification_type, now):
                continue

            hackathons_query = self.client.table("hackathons").select("*").eq("team_id", team["id"])
            hackathons = self._deadlines_between(hackathons_query, now, now + LOOKAHEAD).execute().data

            pending = (
                self._user_tasks(profile["id"])
                .gte("deadline", to_iso(now))
                .order("deadline")
                .execute()
                .data
            )
            overdue = (
                self._user_tasks(profile["id"])
                .lt("deadline", to_iso(now))
                .order("deadline")
                .execute()
                .data
            )

            content = daily_summary_email(
                profile.get("name"),
                team["name"],
                list(hackathons or []),
                list(pending or []),
                list(overdue or []),
            )
            self._deliver(report, profile["email"], content, profile["id"], self.notification_type)


class WeeklySummaryJob(NotificationJob):
    name = "weekly summary"
    notification_type = "weekly_summary"

    def _run(self, now, report):
        week_ago = now - LOOKAHEAD
        week_ahead = now + LOOKAHEAD

        for profile in self._opted_in_profiles():
            if not profile.get("email"):
                continue
            team = self._team_of(profile["id"])
            if team is None:
                continue
            if self.already_sent(profile["id"], self.notification_type, now):
                continue

            tasks_completed = self._count(
                self.client.table("tasks")
                .select("id", count="exact")
                .eq("team_id", team["id"])
                .eq("status", "done")
                .gte("updated_at", to_iso(week_ago))
            )
            tasks_created = self._count(
                self.client.table("tasks")
                .select("id", count="exact")
                .eq("team_id", team["id"])
                .gte("created_at", to_iso(week_ago))
            )
            hackathons_added = self._count(
                self.client.table("hackathons")
                .select("id", count="exact")
                .eq("team_id", team["id"])
                .gte("created_at", to_iso(week_ago))
            )

            hackathons_query = self.client.table("hackathons").select("*").eq("team_id", team["id"])
            next_hackathons = list(
                self._deadlines_between(hackathons_query, now, week_ahead).execute().data or []
            )
            next_tasks = list(
                self._user_tasks(profile["id"])
                .gte("deadline", to_iso(now))
                .lte("deadline", to_iso(week_ahead))
                .order("deadline")
                .execute()
                .data
                or []
            )

            stats = {
                "tasksCompleted": tasks_completed,
                "tasksCreated": tasks_created,
                "hackathonsAdded": hackathons_added,
                "upcomingDeadlines": len(next_hackathons) + len(next_tasks),
            }
            content = weekly_summary_email(
                profile.get("name"), team["name"], stats, next_hackathons, next_tasks
            )
            self._deliver(report, profile["email"], content, profile["id"], self.notification_type)
