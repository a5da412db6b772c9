# =============================================================================
# hacknotify/notifications/content.py
# Plain-text email subjects and bodies
# =============================================================================

from typing import Any, Dict, List, Optional, Tuple

from hacknotify.analytics.derived_views import parse_timestamp

Record = Dict[str, Any]
EmailContent = Tuple[str, str]

DEADLINE_LABELS = {"reg": "registration", "sub": "submission"}


def _when(days_until: int) -> str:
    if days_until == 0:
        return "today"
    if days_until == 1:
        return "in 1 day"
    return f"in {days_until} days"


def _format_deadline(value: Any) -> str:
    ts = parse_timestamp(value)
    if ts is None:
        return "no deadline"
    return ts.strftime("%a %d %b %Y, %H:%M UTC")


def _task_lines(tasks: List[Record]) -> List[str]:
    return [f"  - {t.get('title', 'Untitled task')} (due {_format_deadline(t.get('deadline'))})" for t in tasks]


def _hackathon_lines(hackathons: List[Record]) -> List[str]:
    return [
        f"  - {h.get('title', 'Untitled hackathon')} (submission {_format_deadline(h.get('submission_deadline'))})"
        for h in hackathons
    ]


def hackathon_deadline_email(hackathon: Record, kind: str, days_until: int) -> EmailContent:
    label = DEADLINE_LABELS.get(kind, kind)
    name = hackathon.get("title", "Your hackathon")
    field = "reg_deadline" if kind == "reg" else "submission_deadline"

    subject = f"{name}: {label} deadline {_when(days_until)}"
    body = "\n".join([
        f"The {label} deadline for {name} is {_when(days_until)}.",
        f"Deadline: {_format_deadline(hackathon.get(field))}",
        "",
        "Good luck!",
        "HackNotify",
    ])
    return subject, body


def daily_summary_email(
    user_name: Optional[str],
    team_name: str,
    hackathons: List[Record],
    pending_tasks: List[Record],
    overdue_tasks: List[Record],
) -> EmailContent:
    subject = f"Your daily HackNotify summary for {team_name}"
    lines = [f"Hi {user_name or 'there'},", ""]

    lines.append(f"Upcoming hackathon deadlines ({len(hackathons)}):")
    lines.extend(_hackathon_lines(hackathons) or ["  none this week"])
    lines.append("")
    lines.append(f"Pending tasks ({len(pending_tasks)}):")
    lines.extend(_task_lines(pending_tasks) or ["  nothing pending"])
    if overdue_tasks:
        lines.append("")
        lines.append(f"Overdue tasks ({len(overdue_tasks)}):")
        lines.extend(_task_lines(overdue_tasks))

    lines.extend(["", "HackNotify"])
    return subject, "\n".join(lines)


def weekly_summary_email(
    user_name: Optional[str],
    team_name: str,
    stats: Dict[str, int],
    hackathons: List[Record],
    tasks: List[Record],
) -> EmailContent:
    subject = f"{team_name}: your week on HackNotify"
    lines = [
        f"Hi {user_name or 'there'},",
        "",
        "Last 7 days:",
        f"  Tasks completed:  {stats.get('tasksCompleted', 0)}",
        f"  Tasks created:    {stats.get('tasksCreated', 0)}",
        f"  Hackathons added: {stats.get('hackathonsAdded', 0)}",
        "",
        f"Coming up in the next 7 days ({stats.get('upcomingDeadlines', 0)}):",
    ]
    lines.extend(_hackathon_lines(hackathons))
    lines.extend(_task_lines(tasks))
    if not hackathons and not tasks:
        lines.append("  nothing scheduled")

    lines.extend(["", "HackNotify"])
    return subject, "\n".join(lines)
