import streamlit as st
from datetime import datetime
from typing import Any, Dict, Optional

from hacknotify.analytics.derived_views import DONE, as_utc, parse_timestamp
from hacknotify.data.supabase_client import SupabaseGateway
from hacknotify.errors import ErrorContext
from hacknotify.offline.data_fetcher import FetchResult
from hacknotify.offline.precache import detail_url
from hacknotify.service_worker.policy import Request
from hacknotify.service_worker.registration import get_service_worker
from hacknotify.service_worker.worker import OFFLINE_URL

Record = Dict[str, Any]

DEADLINE_FIELDS = {"registration": "reg_deadline", "submission": "submission_deadline"}


def header(title: str, subtitle: str, icon: str = "🏁"):
    st.markdown(f"## {icon} {title}")
    st.caption(subtitle)


def offline_document() -> Optional[str]:
    """The offline page from the request interceptor's cache, if installed."""
    worker = get_service_worker()
    if worker is None:
        return None
    response = worker.fetch(Request.navigate(OFFLINE_URL))
    if not response.ok:
        return None
    return response.body.decode("utf-8", errors="replace")


def offline_banner(result: FetchResult):
    """
    Staleness notice for a fallback render; nothing on a live read. With
    no saved copy at all the offline page is shown instead of empty lists.
    """
    if not result.offline_info:
        return
    st.warning(result.offline_info, icon="📴")
    if result.saved_at is None:
        page = offline_document()
        if page:
            st.html(page)


def urgency_label(deadline: Any, now: datetime) -> Optional[str]:
    ts = parse_timestamp(deadline)
    if ts is None:
        return None
    now_ts = as_utc(now)
    if ts < now_ts:
        return "Overdue"
    days = (ts.normalize() - now_ts.normalize()).days
    if days == 0:
        return "Today"
    if days == 1:
        return "Tomorrow"
    return None


def deadline_card(hackathon: Record, deadline_type: str, now: datetime):
    """One hackathon deadline: title, badge, relative time and link."""
    deadline = hackathon.get(DEADLINE_FIELDS[deadline_type])
    ts = parse_timestamp(deadline)
    if ts is None:
        return

    with st.container(border=True):
        badge = urgency_label(deadline, now)
        title = hackathon.get("title", "Untitled hackathon")
        st.markdown(f"**[{title}]({detail_url('hackathons', hackathon['id'])})**"
                    + (f"  `{badge}`" if badge else ""))
        st.caption(f"{deadline_type.capitalize()} deadline · {ts.strftime('%d %b %Y, %H:%M')} UTC")
        if hackathon.get("link"):
            st.link_button("Open", hackathon["link"])


def task_item(task: Record, now: datetime):
    assignee = task.get("assignee") or {}
    due = parse_timestamp(task.get("deadline"))
    overdue = due is not None and due < as_utc(now) and task.get("status") != DONE

    title = task.get("title", "Untitled task")
    line = f"{'✅' if task.get('status') == DONE else '⬜'} **[{title}]({detail_url('tasks', task['id'])})**"
    if due is not None:
        line += f" · due {due.strftime('%d %b')}"
    if overdue:
        line += " · :red[overdue]"
    if assignee.get("name"):
        line += f" · {assignee['name']}"
    st.markdown(line)


def no_team_notice():
    """Onboarding: the user has not joined a team yet."""
    st.info(
        "**Create your first team.** Teams are where you and your hackathon "
        "partners collaborate. Create or join a team to start tracking "
        "hackathons and assigning tasks."
    )


def save_task(gateway: SupabaseGateway, task_id: str, fields: Record) -> bool:
    """Write task columns; errors are shown on the page. True once written."""
    saved = False
    with ErrorContext("Updating task"):
        gateway.update_task(task_id, fields)
        saved = True
    return saved
