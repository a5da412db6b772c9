# =============================================================================
# 05_Task.py - Edit one task (/Task?id=<id>)
# =============================================================================
"""
Task details and edit form. The form writes to the backend, so it is
read-only while offline or while showing a cached copy.
"""
from __future__ import annotations
import streamlit as st
from datetime import datetime, time, timezone

from hacknotify.analytics.derived_views import TASK_PRIORITIES, TASK_STATUSES, parse_timestamp
from hacknotify.auth import AuthService, initialize_navigation, require_authentication
from hacknotify.data import get_gateway
from hacknotify.offline import FetchPhase, TaskListFetcher, can_mutate, get_connectivity_signal
from hacknotify.ui import header, no_team_notice, offline_banner, save_task

st.set_page_config(
    page_title="Task - HackNotify",
    page_icon="✅",
    layout="centered",
)

gateway = get_gateway()
auth = AuthService(gateway)
require_authentication(auth)
signal = get_connectivity_signal()
initialize_navigation(auth, signal)

result = TaskListFetcher(gateway).fetch()
if result.phase == FetchPhase.SIGNED_OUT:
    st.switch_page("Welcome.py")
if result.phase == FetchPhase.NO_TEAM:
    no_team_notice()
    st.stop()

task_id = st.query_params.get("id")
task = next((t for t in result.tasks if t.get("id") == task_id), None)

if task is None:
    header("Task", "Not found", icon="✅")
    offline_banner(result)
    st.info("This task is not in your teams' board" + (" or not saved offline." if result.is_stale else "."))
    st.page_link("pages/03_Tasks.py", label="Task board", icon="✅")
    st.stop()

header(task.get("title", "Untitled task"), "Edit task", icon="✅")
offline_banner(result)
editable = can_mutate(signal) and not result.is_stale
if not editable:
    st.caption("Editing is available when online.")

due = parse_timestamp(task.get("deadline"))
status = task.get("status") if task.get("status") in TASK_STATUSES else TASK_STATUSES[0]
priority = task.get("priority") if task.get("priority") in TASK_PRIORITIES else "medium"

with st.form("edit_task"):
    title = st.text_input("Title", value=task.get("title") or "", disabled=not editable)
    description = st.text_area("Description", value=task.get("description") or "", disabled=not editable)
    col1, col2 = st.columns(2)
    with col1:
        new_status = st.selectbox("Status", TASK_STATUSES, index=TASK_STATUSES.index(status),
                                  disabled=not editable)
    with col2:
        new_priority = st.selectbox("Priority", TASK_PRIORITIES, index=TASK_PRIORITIES.index(priority),
                                    disabled=not editable)
    deadline = st.date_input("Deadline", value=due.date() if due is not None else None,
                             disabled=not editable)
    submitted = st.form_submit_button("Save", type="primary", disabled=not editable)

if submitted:
    if not title.strip():
        st.error("A task needs a title.")
    else:
        fields = {
            "title": title.strip(),
            "description": description.strip() or None,
            "status": new_status,
            "priority": new_priority,
            "deadline": (
                datetime.combine(deadline, time(23, 59), tzinfo=timezone.utc).isoformat()
                if deadline else None
            ),
        }
        if save_task(gateway, task["id"], fields):
            st.success("Task saved.")
            st.page_link("pages/03_Tasks.py", label="Back to the task board", icon="✅")
