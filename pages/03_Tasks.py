# =============================================================================
# 03_Tasks.py - Task board
# =============================================================================
"""
Task board - todo / doing / done columns, newest tasks first.

Status changes write to the backend, so they are only offered online.
"""
from __future__ import annotations
import streamlit as st
from datetime import datetime, timezone

from hacknotify.analytics import tasks_by_status
from hacknotify.analytics.derived_views import TASK_STATUSES
from hacknotify.auth import AuthService, initialize_navigation, require_authentication
from hacknotify.data import get_gateway
from hacknotify.offline import FetchPhase, TaskListFetcher, can_mutate, get_connectivity_signal
from hacknotify.ui import header, no_team_notice, offline_banner, save_task, task_item

st.set_page_config(
    page_title="Tasks - HackNotify",
    page_icon="✅",
    layout="wide",
)

gateway = get_gateway()
auth = AuthService(gateway)
require_authentication(auth)
signal = get_connectivity_signal()
initialize_navigation(auth, signal)

result = TaskListFetcher(gateway).fetch()
if result.phase == FetchPhase.SIGNED_OUT:
    st.switch_page("Welcome.py")

header("Tasks", "Everything your team is working on", icon="✅")

if result.phase == FetchPhase.NO_TEAM:
    no_team_notice()
    st.stop()

offline_banner(result)
editable = can_mutate(signal) and not result.is_stale

now = datetime.now(timezone.utc)
columns = tasks_by_status(result.tasks)
board = st.columns(len(TASK_STATUSES))

for col, status in zip(board, TASK_STATUSES):
    with col:
        st.subheader(f"{status.capitalize()} ({len(columns[status])})")
        for task in columns[status]:
            task_item(task, now)
            new_status = st.selectbox(
                "Status",
                TASK_STATUSES,
                index=TASK_STATUSES.index(status),
                key=f"status_{task['id']}",
                disabled=not editable,
                label_visibility="collapsed",
            )
            # A failed write keeps its error on screen: rerun only on success
            if new_status != status and save_task(gateway, task["id"], {"status": new_status}):
                st.rerun()
